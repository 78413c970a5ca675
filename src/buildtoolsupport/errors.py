"""Error types and error codes.

This module defines the error hierarchy for build tool support, providing
specific error codes for the different ways that resolving and running a
build tool can fail.

Classes:
    - ErrorCode: Enum of error codes for categorizing failures
    - BuildToolError: Base exception for all build-tool-support errors
    - ResolutionError: An executable, tool, target or path could not be resolved
    - ScratchDirectoryError: A scratch directory could not be created
    - NonzeroExitError: A process ran to completion but reported failure
"""

from collections.abc import Sequence
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for build tool support operations.

    Used to categorize errors for logging and for deciding whether a
    failure aborts command generation or is reported as a failed build step.
    """

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"

    # Resolution errors
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
    TOOLCHAIN_NOT_FOUND = "TOOLCHAIN_NOT_FOUND"
    PATH_RESOLUTION_FAILED = "PATH_RESOLUTION_FAILED"

    # Resource errors
    SCRATCH_DIRECTORY_FAILED = "SCRATCH_DIRECTORY_FAILED"

    # Execution errors
    NONZERO_EXIT = "NONZERO_EXIT"


class BuildToolError(Exception):
    """Base exception for build tool support errors.

    Attributes:
        code: The error code categorizing this error.
        message: Human-readable error message.
        plugin_name: Name of the plugin that caused the error (if applicable).
        cause: The underlying exception that caused this error (if any).

    Example:
        raise BuildToolError(
            code=ErrorCode.TOOL_NOT_FOUND,
            message="No executable invoked as bash found",
            plugin_name="script_demo",
            cause=original_exception,
        )
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        plugin_name: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: The error code for this error.
            message: Human-readable error message.
            plugin_name: Name of the plugin (optional).
            cause: The underlying exception (optional).
        """
        self.code = code
        self.message = message
        self.plugin_name = plugin_name
        self.cause = cause

        super().__init__(message)

    def __str__(self) -> str:
        full_message = f"[{self.code.value}] {self.message}"
        if self.plugin_name:
            full_message = f"[{self.plugin_name}] {full_message}"
        return full_message


class ResolutionError(BuildToolError):
    """An executable, tool, target or path could not be resolved."""


class ScratchDirectoryError(BuildToolError):
    """A scratch directory could not be created within the allowed attempts."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ErrorCode.SCRATCH_DIRECTORY_FAILED, message, cause=cause)


class NonzeroExitError(BuildToolError):
    """The results of a process run that exited with a nonzero code.

    Attributes:
        exit_status: The nonzero exit code of the process run.
        stdout: The contents of the standard output stream.
        stderr: The contents of the standard error stream.
        command_line: The command line that triggered the process run.
    """

    def __init__(
        self,
        exit_status: int,
        stdout: str,
        stderr: str,
        command_line: Sequence[str],
    ) -> None:
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr
        self.command_line = list(command_line)
        super().__init__(
            ErrorCode.NONZERO_EXIT,
            f"Process exited with status {exit_status}",
        )

    def __str__(self) -> str:
        quoted = " ".join(repr(part) for part in self.command_line)
        return (
            f"Process.NonzeroExit (status: {self.exit_status})\n"
            f"Command line: {quoted}\n"
            "\n"
            "  standard output:\n"
            "  -------------\n"
            f"{self.stdout}\n"
            "  -------------\n"
            "\n"
            "  standard error:\n"
            "  -------------\n"
            f"{self.stderr}\n"
            "  -------------"
        )
