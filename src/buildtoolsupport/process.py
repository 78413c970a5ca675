"""Synchronous process execution.

Runs one executable to completion, capturing its output. There is no
timeout and no retry: a hung tool hangs the caller, as it would hang the
host build.
"""

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from buildtoolsupport.errors import ErrorCode, NonzeroExitError, ResolutionError


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a completed process run.

    Attributes:
        exit_status: The process exit code.
        stdout: Everything written to standard output, decoded as UTF-8.
        stderr: Everything written to standard error, decoded as UTF-8.
        command_line: The executable followed by its arguments.
    """

    exit_status: int
    stdout: str
    stderr: str
    command_line: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    def check(self) -> "ProcessResult":
        """Return self, or raise NonzeroExitError if the run failed."""
        if not self.ok:
            raise NonzeroExitError(
                exit_status=self.exit_status,
                stdout=self.stdout,
                stderr=self.stderr,
                command_line=self.command_line,
            )
        return self


def run_process(
    executable: str | os.PathLike[str],
    arguments: Sequence[str] = (),
    environment: Mapping[str, str] | None = None,
    working_directory: str | os.PathLike[str] | None = None,
) -> ProcessResult:
    """Run ``executable`` and wait for it to exit.

    Args:
        executable: Path of the program to run.
        arguments: Command-line arguments, not including the program itself.
        environment: Complete environment for the child, or None to inherit.
        working_directory: Initial directory of the child, or None to inherit.

    Returns:
        The captured ProcessResult, whatever the exit status.

    Raises:
        ResolutionError: If the executable does not exist.
    """
    command_line = (os.fspath(executable), *arguments)
    try:
        completed = subprocess.run(
            command_line,
            capture_output=True,
            env=dict(environment) if environment is not None else None,
            cwd=Path(working_directory) if working_directory is not None else None,
            check=False,
        )
    except FileNotFoundError as e:
        raise ResolutionError(
            ErrorCode.TOOL_NOT_FOUND,
            f"Executable not found: {command_line[0]}",
            cause=e,
        ) from e

    return ProcessResult(
        exit_status=completed.returncode,
        stdout=completed.stdout.decode("utf-8", errors="replace"),
        stderr=completed.stderr.decode("utf-8", errors="replace"),
        command_line=command_line,
    )


def run(
    executable: str | os.PathLike[str],
    arguments: Sequence[str] = (),
    environment: Mapping[str, str] | None = None,
    working_directory: str | os.PathLike[str] | None = None,
) -> str:
    """Run ``executable`` and return the text written to its standard output.

    Raises:
        NonzeroExitError: If the process exits with a nonzero status.
        ResolutionError: If the executable does not exist.
    """
    return (
        run_process(executable, arguments, environment, working_directory)
        .check()
        .stdout
    )
