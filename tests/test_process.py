"""Tests for synchronous process execution."""

import os
import sys
from pathlib import Path

import pytest

from buildtoolsupport.errors import ErrorCode, NonzeroExitError, ResolutionError
from buildtoolsupport.process import ProcessResult, run, run_process


class TestRunProcess:
    """Tests for run_process()."""

    def test_captures_both_streams(self) -> None:
        """Verify stdout and stderr are captured separately."""
        result = run_process(
            sys.executable,
            ["-c", "import sys; print('out'); print('err', file=sys.stderr)"],
        )

        assert result.ok
        assert result.exit_status == 0
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"
        assert result.command_line[0] == sys.executable

    def test_nonzero_status_is_returned(self) -> None:
        """Verify failure does not raise from run_process."""
        result = run_process(sys.executable, ["-c", "raise SystemExit(4)"])

        assert not result.ok
        assert result.exit_status == 4

    def test_environment_and_working_directory(self, tmp_path: Path) -> None:
        """Verify the child sees the given environment and directory."""
        result = run_process(
            sys.executable,
            ["-c", "import os; print(os.environ['BTS_VALUE']); print(os.getcwd())"],
            environment={**os.environ, "BTS_VALUE": "seen"},
            working_directory=tmp_path,
        )

        lines = result.stdout.splitlines()
        assert lines[0] == "seen"
        assert Path(lines[1]).resolve() == tmp_path.resolve()

    def test_missing_executable(self, tmp_path: Path) -> None:
        """Verify a nonexistent program raises ResolutionError."""
        with pytest.raises(ResolutionError) as exc_info:
            run_process(tmp_path / "no-such-tool")

        assert exc_info.value.code is ErrorCode.TOOL_NOT_FOUND

    def test_invalid_utf8_is_replaced(self) -> None:
        """Verify undecodable output does not raise."""
        result = run_process(
            sys.executable, ["-c", "import sys; sys.stdout.buffer.write(b'\\xff')"]
        )

        assert result.stdout == "\ufffd"


class TestRun:
    """Tests for run()."""

    def test_returns_stdout(self) -> None:
        """Verify stdout is returned on success."""
        assert run(sys.executable, ["-c", "print('hello')"]).strip() == "hello"

    def test_raises_on_failure(self) -> None:
        """Verify NonzeroExitError carries the outcome."""
        with pytest.raises(NonzeroExitError) as exc_info:
            run(
                sys.executable,
                ["-c", "import sys; print('o'); print('e', file=sys.stderr); sys.exit(3)"],
            )

        error = exc_info.value
        assert error.exit_status == 3
        assert error.stdout.strip() == "o"
        assert error.stderr.strip() == "e"
        assert error.command_line[0] == sys.executable


class TestProcessResult:
    """Tests for ProcessResult."""

    def test_check_returns_self_on_success(self) -> None:
        """Verify check() passes successful results through."""
        result = ProcessResult(0, "", "", ("tool",))

        assert result.check() is result

    def test_check_raises_on_failure(self) -> None:
        """Verify check() raises for nonzero status."""
        with pytest.raises(NonzeroExitError):
            ProcessResult(1, "", "", ("tool",)).check()
