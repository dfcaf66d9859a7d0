#!/usr/bin/env python3
"""
stylectl - source style checker

Usage:
    stylectl src/
    stylectl --preset pep8 setup.py src/
    stylectl -c ci/.stylectl.yaml --reporter checkstyle src/ > style.xml
    stylectl --reporter ./my_reporter.py src/

For more information: stylectl --help
"""

import sys
from typing import Optional

import click

from . import __version__
from .core.config import Invocation
from .core.logging import setup_logging
from .core.orchestrator import run
from .core.presets import list_presets
from .utils import run_async
from .utils.output import discard_error, handle_error


@click.command()
@click.version_option(version=__version__, prog_name="stylectl")
@click.argument("paths", nargs=-1)
@click.option("--config", "-c", default=None, help="Configuration source (default: discovered)")
@click.option("--preset", "-p", default=None, help=f"Preset to use ({', '.join(list_presets())})")
@click.option("--verbose", "-v", is_flag=True, default=None,
              help="Prefix each violation with its rule name")
@click.option("--colors/--no-colors", default=None,
              help="Force colored output on or off (default: on for a terminal)")
@click.option("--reporter", "-r", default=None,
              help="Reporter name, or path to a reporter module")
@click.option("--max-errors", "-m", type=int, default=None,
              help="Maximum number of violations to report (-1: unlimited)")
@click.option("--debug", "-d", count=True, help="Increase log verbosity (-d, -dd, -ddd)")
@click.option("--json-errors", is_flag=True, help="Output errors as JSON for CI integration")
def cli(
    paths: tuple[str, ...],
    config: Optional[str],
    preset: Optional[str],
    verbose: Optional[bool],
    colors: Optional[bool],
    reporter: Optional[str],
    max_errors: Optional[int],
    debug: int,
    json_errors: bool,
) -> None:
    """Check source files for code style violations.

    \b
    Reporters:
      console     colorized explanations with source excerpts (default on a terminal)
      text        plain explanations (default when redirected or --no-colors)
      inline      one line per violation
      unix        path:line:column: message
      summary     violation counts per file
      json        machine-readable result
      checkstyle  Checkstyle XML
      junit       JUnit XML

    \b
    Exit status:
      0  no violations
      2  violations found, or a file could not be checked
      3+ configuration, preset, reporter or input error

    \b
    Examples:
      stylectl src/
      stylectl -p jquery -c .stylectl.yaml src/app.py
      stylectl --no-colors -v src/ | less
      stylectl --json-errors -r json src/ | jq .
    """
    setup_logging(debug, quiet=json_errors)
    invocation = Invocation(
        args=list(paths),
        config=config,
        preset=preset,
        verbose=verbose,
        colors=colors,
        reporter=reporter,
        max_errors=max_errors,
    )
    status = run_async(_check_async(invocation, json_errors))
    sys.exit(status)


async def _check_async(invocation: Invocation, json_errors: bool) -> int:
    result = run(invocation, error_sink=discard_error if json_errors else None)
    status = await result.outcome
    if json_errors and result.error is not None:
        context = {"config": invocation.config, "preset": invocation.preset}
        return handle_error(result.error, json_errors=True, context=context)
    return status


def main() -> None:
    """Entry point for the stylectl console script."""
    cli()


if __name__ == "__main__":
    main()
