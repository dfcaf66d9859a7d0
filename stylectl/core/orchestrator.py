"""
Top-level run orchestration.

``run()`` wires configuration resolution, reporter selection and the
checker together and returns immediately with a ``RunResult``. Its
``outcome`` future settles to the process exit code. Handles for the
resolved configuration, the checker and the reporter are set on the
result as soon as each stage has produced them, before the outcome
settles.

Every failure before checking starts (configuration, reporter, empty
input) is written once to the error sink and settles the outcome with
that failure's exit code; later stages are never constructed.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, TextIO, Union

from ..reporters import ReporterHandle, resolve_reporter
from ..rules import RuleSet
from ..utils.output import print_error
from .checker import Checker, require_inputs
from .config import Invocation, ResolvedConfig, resolve_config
from .exceptions import ExitCode, StyleCtlError
from .logging import get_logger

logger = get_logger(__name__)

ErrorSink = Callable[..., None]


@dataclass
class RunResult:
    """Handles for one run.

    Attributes:
        outcome: Future settling to the exit code
        config: Resolved configuration, once resolution succeeded
        checker: Checker, once constructed
        reporter: Reporter handle, once resolved
        error: The exception that ended the run early, if any
    """
    outcome: "asyncio.Future[int]"
    config: Optional[ResolvedConfig] = None
    checker: Optional[Checker] = None
    reporter: Optional[ReporterHandle] = None
    error: Optional[BaseException] = None


def run(
    invocation: Union[Invocation, Mapping[str, Any]],
    *,
    stdout: Optional[TextIO] = None,
    error_sink: Optional[ErrorSink] = None,
    presets: Optional[Mapping[str, Mapping[str, Any]]] = None,
    rules: Optional[RuleSet] = None,
    tty: Optional[bool] = None,
) -> RunResult:
    """Start a run on the current event loop.

    Args:
        invocation: Run parameters, or a mapping accepted by Invocation.from_dict
        stdout: Stream reporters write to (default: sys.stdout)
        error_sink: Called with the message segments of a failure
                    (default: one line on stderr)
        presets: Preset registry override
        rules: Rule registry override
        tty: Terminal detection override for the colors default

    Returns:
        RunResult whose ``outcome`` settles to an exit code

    Must be called with a running event loop.
    """
    loop = asyncio.get_running_loop()
    sink = error_sink or print_error
    if not isinstance(invocation, Invocation):
        invocation = Invocation.from_dict(invocation)

    def fail(exc: StyleCtlError) -> RunResult:
        logger.debug(f"Run stopped: {type(exc).__name__}: {exc}")
        sink(*exc.segments)
        result.error = exc
        result.outcome.set_result(exc.exit_code)
        return result

    result = RunResult(outcome=loop.create_future())

    try:
        result.config = resolve_config(invocation, presets=presets, rules=rules, tty=tty)
    except StyleCtlError as e:
        return fail(e)
    config = result.config

    try:
        result.reporter = resolve_reporter(config.reporter, config.colors)
    except StyleCtlError as e:
        return fail(e)

    result.checker = Checker(config)

    try:
        inputs = require_inputs(invocation.args)
    except StyleCtlError as e:
        return fail(e)

    result.outcome = loop.create_task(
        _check_and_report(result, inputs, stdout, sink)
    )
    return result


async def _check_and_report(
    result: RunResult,
    inputs: list[str],
    stdout: Optional[TextIO],
    sink: ErrorSink,
) -> int:
    config = result.config
    try:
        check = await result.checker.check_paths(inputs)
        result.reporter.render(
            check,
            verbose=config.verbose,
            colors=config.colors,
            stream=stdout,
        )
    except Exception as e:
        logger.debug("Check failed", exc_info=True)
        result.error = e
        sink("Unexpected error -", f"{type(e).__name__}: {e}")
        return ExitCode.GENERAL_ERROR

    logger.info(
        f"{check.error_count} violations in {len(check.files)} files "
        f"({len(check.failed_files)} failed)"
    )
    return check.status
