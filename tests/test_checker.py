"""Tests for the asynchronous checker."""

import asyncio
import json
import os
import threading
import time

import pytest

from stylectl.core.checker import Checker, FileState, require_inputs
from stylectl.core.config import Invocation, ResolvedConfig, resolve_config
from stylectl.core.exceptions import ExitCode, NoInputFiles

pytestmark = pytest.mark.unit


def make_checker(cwd, options=None, **kwargs) -> Checker:
    if options is not None:
        (cwd / ".stylectl.json").write_text(json.dumps(options))
    return Checker(resolve_config(Invocation(), tty=False), **kwargs)


SEMICOLONS = {"disallowSemicolons": True}


class DelayedChecker(Checker):
    """Checker whose file tasks finish in reverse input order."""

    def __init__(self, *args, delays=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.delays = delays or {}
        self.completed = []

    async def check_file(self, path):
        await asyncio.sleep(self.delays.get(path, 0))
        result = await super().check_file(path)
        self.completed.append(path)
        return result


class TestRequireInputs:

    @pytest.mark.parametrize("paths", [None, [], [""], ["", "   "]])
    def test_blank_inputs_rejected(self, paths):
        with pytest.raises(NoInputFiles):
            require_inputs(paths)

    def test_blank_entries_dropped(self):
        assert require_inputs(["", "a.py", " "]) == ["a.py"]


class TestCheckPaths:
    """Test checking, ordering and failure isolation."""

    @pytest.mark.asyncio
    async def test_clean_file(self, isolated_cwd, write_source):
        write_source("a.py", "x = 1\n")
        result = await make_checker(isolated_cwd, SEMICOLONS).check_paths(["a.py"])
        assert result.status == ExitCode.SUCCESS
        assert result.error_count == 0
        assert [f.path for f in result.files] == ["a.py"]

    @pytest.mark.asyncio
    async def test_violations_tagged_with_rule(self, isolated_cwd, write_source):
        write_source("a.py", "x = 1; y = 2\n")
        result = await make_checker(isolated_cwd, SEMICOLONS).check_paths(["a.py"])
        assert result.status == ExitCode.STYLE_ERRORS
        [violation] = result.violations()
        assert violation.rule == "disallowSemicolons"
        assert (violation.line, violation.column) == (1, 5)
        assert violation.path == "a.py"

    @pytest.mark.asyncio
    async def test_input_order_preserved(self, isolated_cwd, write_source):
        for name in ("a.py", "b.py", "c.py"):
            write_source(name, "x = 1;\n")
        checker = DelayedChecker(
            make_checker(isolated_cwd, SEMICOLONS).config,
            delays={"c.py": 0.03, "a.py": 0.02, "b.py": 0},
        )
        result = await checker.check_paths(["c.py", "a.py", "b.py"])
        assert checker.completed == ["b.py", "a.py", "c.py"]
        assert [f.path for f in result.files] == ["c.py", "a.py", "b.py"]

    @pytest.mark.asyncio
    async def test_violations_ordered_by_position(self, isolated_cwd, write_source):
        write_source("a.py", "a = 1;\nb = 2  \nc = 3;\n")
        checker = make_checker(
            isolated_cwd, {"disallowSemicolons": True, "disallowTrailingWhitespace": True}
        )
        result = await checker.check_paths(["a.py"])
        assert [(v.line, v.rule) for v in result.violations()] == [
            (1, "disallowSemicolons"),
            (2, "disallowTrailingWhitespace"),
            (3, "disallowSemicolons"),
        ]

    @pytest.mark.asyncio
    async def test_partial_failure(self, isolated_cwd, write_source, cli_data):
        write_source("good.py", "x = 1\n")
        write_source("broken.py", (cli_data / "syntax_error.py").read_text())
        checker = make_checker(isolated_cwd, SEMICOLONS)
        result = await checker.check_paths(["missing.py", "broken.py", "good.py"])

        missing, broken, good = result.files
        assert missing.failure.startswith("Cannot read file: ")
        assert broken.failure.startswith("Syntax error: ")
        assert good.is_clean
        assert result.status == ExitCode.STYLE_ERRORS
        assert len(result.failed_files) == 2
        assert checker.states["good.py"] is FileState.DONE
        assert checker.states["broken.py"] is FileState.FAILED

    @pytest.mark.asyncio
    async def test_no_inputs(self, isolated_cwd):
        with pytest.raises(NoInputFiles):
            await make_checker(isolated_cwd).check_paths(["", " "])

    @pytest.mark.asyncio
    async def test_duplicate_paths_checked_once(self, isolated_cwd, write_source):
        write_source("a.py", "x = 1;\n")
        result = await make_checker(isolated_cwd, SEMICOLONS).check_paths(["a.py", "a.py"])
        assert len(result.files) == 1

    @pytest.mark.asyncio
    async def test_directory_expansion(self, isolated_cwd, write_source):
        write_source("src/b.py", "x = 1\n")
        write_source("src/a.py", "x = 1\n")
        write_source("src/notes.txt", "x = 1;\n")
        write_source("src/build/gen.py", "x = 1;\n")
        checker = make_checker(isolated_cwd, {**SEMICOLONS, "excludeFiles": ["src/build/**"]})
        result = await checker.check_paths(["src"])
        assert [f.path for f in result.files] == ["src/a.py", "src/b.py"]

    @pytest.mark.asyncio
    async def test_excluded_file_argument_skipped(self, isolated_cwd, write_source):
        write_source("gen.py", "x = 1;\n")
        write_source("ok.py", "x = 1\n")
        checker = make_checker(isolated_cwd, {**SEMICOLONS, "excludeFiles": ["gen.py"]})
        result = await checker.check_paths(["gen.py", "ok.py"])
        assert [f.path for f in result.files] == ["ok.py"]

    @pytest.mark.asyncio
    async def test_excluded_directories_pruned(self, isolated_cwd, write_source, monkeypatch):
        write_source("pkg/a.py", "x = 1\n")
        write_source("pkg/.venv/lib/site.py", "x = 1;\n")
        write_source("pkg/node_modules/tool/build.py", "x = 1;\n")
        visited = []
        is_excluded = ResolvedConfig.is_excluded

        def recording(self, path):
            visited.append(str(path))
            return is_excluded(self, path)

        monkeypatch.setattr(ResolvedConfig, "is_excluded", recording)
        result = await make_checker(isolated_cwd, SEMICOLONS).check_paths(["pkg"])
        assert [f.path for f in result.files] == ["pkg/a.py"]
        assert visited == ["pkg/a.py"]

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs named pipes")
    @pytest.mark.asyncio
    async def test_slow_read_does_not_block_loop(self, isolated_cwd, write_source):
        write_source("fast.py", "x = 1;\n")
        slow = isolated_cwd / "slow.py"
        os.mkfifo(slow)
        (isolated_cwd / ".stylectl.json").write_text(json.dumps(SEMICOLONS))
        checker = DelayedChecker(resolve_config(Invocation(), tty=False))

        def feed():
            time.sleep(0.3)
            with open(slow, "w") as pipe:
                pipe.write("y = 2;\n")

        ticks = 0

        async def tick():
            nonlocal ticks
            while True:
                await asyncio.sleep(0.01)
                ticks += 1

        writer = threading.Thread(target=feed)
        writer.start()
        ticker = asyncio.create_task(tick())
        try:
            result = await checker.check_paths(["slow.py", "fast.py"])
        finally:
            ticker.cancel()
            writer.join()

        assert ticks >= 10
        assert checker.completed == ["fast.py", "slow.py"]
        assert [f.path for f in result.files] == ["slow.py", "fast.py"]
        assert [len(f.violations) for f in result.files] == [1, 1]

    @pytest.mark.asyncio
    async def test_rule_error_isolated_to_file(self, isolated_cwd, write_source, data_dir):
        write_source("good.py", "x = 1;\n")
        write_source("bad.py", "# CRASH\nx = 1;\n")
        checker = make_checker(isolated_cwd, {
            **SEMICOLONS,
            "additionalRules": [str(data_dir / "rules" / "crashing_rules.py")],
            "crashOnMarker": True,
        })
        result = await checker.check_paths(["good.py", "bad.py"])

        good, bad = result.files
        assert [v.rule for v in good.violations] == ["disallowSemicolons"]
        assert bad.failure == "Rule crashOnMarker failed: RuntimeError: rule bug"
        assert bad.violations == ()
        assert checker.states["good.py"] is FileState.DONE
        assert checker.states["bad.py"] is FileState.FAILED
        assert result.status == ExitCode.STYLE_ERRORS

    @pytest.mark.asyncio
    async def test_verbose_does_not_change_violations(self, isolated_cwd, cli_data):
        args = [str(cli_data / "error.py"), str(cli_data / "success.py")]
        plain = await Checker(
            resolve_config(Invocation(preset="jquery", verbose=False), tty=False)
        ).check_paths(args)
        verbose = await Checker(
            resolve_config(Invocation(preset="jquery", verbose=True), tty=False)
        ).check_paths(args)
        assert plain.violations()
        assert verbose.violations() == plain.violations()
        assert verbose.error_count == plain.error_count

    @pytest.mark.asyncio
    async def test_max_errors_truncates_in_order(self, isolated_cwd, write_source):
        write_source("a.py", "a = 1;\nb = 2;\n")
        write_source("b.py", "c = 3;\n")
        checker = make_checker(isolated_cwd, {**SEMICOLONS, "maxErrors": 1})
        result = await checker.check_paths(["a.py", "b.py"])
        assert result.truncated is True
        assert result.error_count == 1
        assert result.files[0].violations[0].line == 1
        assert result.files[1].violations == ()
        assert result.files[1].omitted == 1
        assert result.files[1].is_clean is False
        assert result.clean_count == 0
        assert result.status == ExitCode.STYLE_ERRORS

    @pytest.mark.asyncio
    async def test_overrides_per_path(self, isolated_cwd, write_source):
        write_source("src/a.py", "x = 1;\n")
        write_source("tests/test_a.py", "x = 1;\n")
        checker = make_checker(isolated_cwd, {
            **SEMICOLONS,
            "overrides": {"tests/**": {"disallowSemicolons": False}},
        })
        result = await checker.check_paths(["src/a.py", "tests/test_a.py"])
        assert [len(f.violations) for f in result.files] == [1, 0]

    @pytest.mark.asyncio
    async def test_concurrency_bounded(self, isolated_cwd, write_source):
        names = [f"m{i}.py" for i in range(6)]
        for name in names:
            write_source(name, "x = 1\n")

        in_flight = 0
        peak = 0

        class CountingChecker(Checker):
            async def check_file(self, path):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                try:
                    return await super().check_file(path)
                finally:
                    in_flight -= 1

        config = make_checker(isolated_cwd, SEMICOLONS).config
        result = await CountingChecker(config, concurrency=2).check_paths(names)
        assert len(result.files) == 6
        assert peak == 2


class TestIntrospection:

    def test_processed_config_is_a_copy(self, isolated_cwd):
        checker = make_checker(isolated_cwd, {"disallowKeywords": ["global"]})
        processed = checker.processed_config
        processed["disallowKeywords"].append("nonlocal")
        assert checker.processed_config["disallowKeywords"] == ["global"]
        assert checker.config.rules["disallowKeywords"] == ["global"]

    def test_states_read_only(self, isolated_cwd):
        checker = make_checker(isolated_cwd)
        with pytest.raises(TypeError):
            checker.states["a.py"] = FileState.DONE

    def test_check_source(self, isolated_cwd):
        checker = make_checker(isolated_cwd, SEMICOLONS)
        result = checker.check_source("x = 1;\n", "snippet.py")
        assert [v.rule for v in result.violations] == ["disallowSemicolons"]
        assert result.lines == ("x = 1;",)

    def test_check_source_syntax_error(self, isolated_cwd):
        result = make_checker(isolated_cwd).check_source("def (:\n")
        assert result.failure.startswith("Syntax error: ")
        assert result.path == "<input>"
