"""
Checker: runs the configured rules over input paths.

Each file is checked in its own asyncio task on the current event loop.
File contents are read through aiofiles so a slow read suspends only its
own task; rule evaluation itself is synchronous. A file that cannot be
read or parsed, or that makes a rule raise, gets a failure entry and the
other files carry on. Results are reordered into input order
before they are returned, whatever order the tasks finished in.
"""

import asyncio
import os
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

import aiofiles

from ..rules import ErrorList, Rule, RuleSet
from .config import ResolvedConfig
from .exceptions import NoInputFiles
from .logging import get_file_logger, get_logger
from .results import CheckResult, FileResult
from .source import SourceFile, SourceParseError, load_source, parse_source, split_lines

logger = get_logger(__name__)

DEFAULT_CONCURRENCY = 16


class FileState(Enum):
    """Progress of a single file within a run."""
    PENDING = "pending"
    READING = "reading"
    CHECKING = "checking"
    DONE = "done"
    FAILED = "failed"


def require_inputs(paths: Optional[Iterable[str]]) -> list[str]:
    """Drop blank entries; reject an input set with nothing left.

    Raises:
        NoInputFiles: If no non-blank path was given
    """
    given = list(paths or [])
    inputs = [p for p in given if p and str(p).strip()]
    if not inputs:
        raise NoInputFiles(paths=[str(p) for p in given])
    return inputs


class Checker:
    """Checks files against a resolved configuration.

    The configuration is shared read-only with every per-file task.

    Usage:
        checker = Checker(config)
        result = await checker.check_paths(["src/", "setup.py"])
    """

    def __init__(
        self,
        config: ResolvedConfig,
        rules: Optional[RuleSet] = None,
        concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self._config = config
        self._rule_set = rules or config.rule_set
        self._concurrency = max(1, concurrency)
        self._configured: dict[tuple, list[Rule]] = {}
        self._states: dict[str, FileState] = {}

    @property
    def config(self) -> ResolvedConfig:
        """The configuration this checker applies."""
        return self._config

    @property
    def processed_config(self) -> dict[str, Any]:
        """A copy of the applied configuration as a plain dictionary."""
        return self._config.as_dict()

    @property
    def states(self) -> Mapping[str, FileState]:
        """Read-only view of per-file progress, keyed by path."""
        return MappingProxyType(self._states)

    def _rules_for(self, path: str) -> list[Rule]:
        options = self._config.rules_for(path)
        key = tuple(sorted((name, repr(value)) for name, value in options.items()))
        if key not in self._configured:
            self._configured[key] = self._rule_set.configure(options)
        return self._configured[key]

    def expand_path(self, path: str) -> list[str]:
        """Expand a directory argument into the files it contains.

        Files are sorted; ``excludeFiles`` and ``fileExtensions`` apply.
        Excluded directories are pruned from the walk. A file argument is
        returned as-is unless excluded.
        """
        candidate = Path(path)
        if candidate.is_dir():
            found: list[Path] = []
            for root, dirnames, filenames in os.walk(candidate):
                base = Path(root)
                dirnames[:] = [d for d in dirnames if not self._config.excludes_directory(base / d)]
                for name in filenames:
                    file = base / name
                    if self._config.accepts_extension(file) and not self._config.is_excluded(file):
                        found.append(file)
            return [str(file) for file in sorted(found)]
        if self._config.is_excluded(candidate):
            logger.debug(f"Skipping excluded path {path}")
            return []
        return [path]

    def check_source(self, text: str, path: str = "<input>") -> FileResult:
        """Check in-memory source text synchronously."""
        try:
            source = parse_source(text, path)
        except SourceParseError as e:
            return FileResult(path=path, lines=split_lines(text), failure=str(e))
        return self._run_rules(source)

    def _run_rules(self, source: SourceFile) -> FileResult:
        file_logger = get_file_logger(__name__, source.path)
        errors = ErrorList(source)
        for rule in self._rules_for(source.path):
            before = len(errors)
            try:
                rule.check(source, errors.scoped(rule.name))
            except Exception as e:
                file_logger.warning(f"rule {rule.name} raised {type(e).__name__}: {e}")
                file_logger.debug("rule traceback", exc_info=True)
                return FileResult(
                    path=source.path,
                    lines=source.lines,
                    failure=f"Rule {rule.name} failed: {type(e).__name__}: {e}",
                )
            file_logger.trace(f"{rule.name}: {len(errors) - before} violations")
        return FileResult(path=source.path, violations=errors.violations, lines=source.lines)

    async def check_file(self, path: str) -> FileResult:
        """Read, parse and check one file.

        Never raises for unreadable or unparseable files, or for rules
        that raise: the failure is recorded on the returned FileResult.
        """
        file_logger = get_file_logger(__name__, path)
        self._states[path] = FileState.READING
        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except OSError as e:
            self._states[path] = FileState.FAILED
            reason = e.strerror or str(e)
            file_logger.debug(f"read failed: {reason}")
            return FileResult(path=path, failure=f"Cannot read file: {reason}")

        self._states[path] = FileState.CHECKING
        try:
            source = load_source(data, path)
        except SourceParseError as e:
            self._states[path] = FileState.FAILED
            file_logger.debug(f"parse failed: {e}")
            lines = split_lines(data.decode("utf-8", errors="replace"))
            return FileResult(path=path, lines=lines, failure=str(e))
        await asyncio.sleep(0)

        result = self._run_rules(source)
        self._states[path] = FileState.FAILED if result.failure else FileState.DONE
        file_logger.debug(f"{len(result.violations)} violations")
        return result

    def _files_for(self, path: str) -> list[str]:
        # missing paths still produce an entry so the run reports them
        if not Path(path).exists():
            return [path]
        return self.expand_path(path)

    async def check_paths(self, paths: Sequence[str]) -> CheckResult:
        """Check every input path concurrently.

        Raises:
            NoInputFiles: If ``paths`` has no non-blank entry; raised before
                any filesystem access
        """
        inputs = require_inputs(paths)

        files: list[str] = []
        seen: set[str] = set()
        for path in inputs:
            for file in self._files_for(path):
                if file not in seen:
                    seen.add(file)
                    files.append(file)
                    self._states[file] = FileState.PENDING
        logger.info(f"Checking {len(files)} files")

        semaphore = asyncio.Semaphore(self._concurrency)
        slots: list[Optional[FileResult]] = [None] * len(files)

        async def run(index: int, file: str) -> None:
            async with semaphore:
                # single merge point: each task fills only its own slot
                slots[index] = await self.check_file(file)

        await asyncio.gather(*(run(i, f) for i, f in enumerate(files)))

        return self._finalize([slot for slot in slots if slot is not None])

    def _finalize(self, results: list[FileResult]) -> CheckResult:
        limit = self._config.max_errors
        if limit is None:
            return CheckResult(files=tuple(results))

        remaining = limit
        truncated = False
        kept = []
        for result in results:
            if len(result.violations) > remaining:
                truncated = True
                result = FileResult(
                    path=result.path,
                    violations=result.violations[:remaining],
                    lines=result.lines,
                    failure=result.failure,
                    omitted=len(result.violations) - remaining,
                )
            remaining -= len(result.violations)
            kept.append(result)
        return CheckResult(files=tuple(kept), truncated=truncated)
