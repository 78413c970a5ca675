"""Platform capabilities.

Everything that differs between operating system families is isolated
behind a small ``Platform`` object, selected once with ``current_platform()``
and injected into the path resolver, the executable locator and the
invocation planner.

Classes:
    - Platform: Abstract capability interface
    - PosixPlatform: Linux and other POSIX systems
    - MacOSPlatform: POSIX, but scripts are compiled through ``xcrun``
    - WindowsPlatform: Windows, with path repair and indirect command lookup
"""

import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from buildtoolsupport.errors import ErrorCode, ResolutionError


class Platform(ABC):
    """Operating-system specific behavior needed by the core.

    Attributes:
        name: Short identifier of the platform family.
        path_list_separator: Separator between entries of ``PATH``.
        executable_suffix: Suffix appended to extensionless command names.
        case_insensitive_environment: Whether environment variable names
            compare case-insensitively.
        locates_via_where: Whether commands are located by running the
            system's ``where`` utility rather than scanning directories.
        supports_tool_dependencies: Whether a plugin may depend directly on
            an executable target of the same package. Where it cannot,
            such targets are built reentrantly.
        script_compiler: Command line prefix used to compile scripts.
        script_shell_beside_git: Whether scripts run under the bash that
            ships with git rather than one found on the search path.
    """

    name: str = "abstract"
    path_list_separator: str = ":"
    executable_suffix: str = ""
    case_insensitive_environment: bool = False
    locates_via_where: bool = False
    supports_tool_dependencies: bool = True
    script_compiler: str = "swiftc"
    script_shell_beside_git: bool = False

    @abstractmethod
    def repair_path(self, path: str) -> str:
        """Return the canonical absolute form of ``path``.

        Must be idempotent.

        Raises:
            ResolutionError: If the path cannot be resolved.
        """
        ...

    def executable_name(self, name: str) -> str:
        """Return ``name`` as it appears on disk as an executable file."""
        if self.executable_suffix and not Path(name).suffix:
            return name + self.executable_suffix
        return name

    def is_executable_file(self, path: Path) -> bool:
        """Check whether ``path`` is a regular file the process may execute."""
        return path.is_file() and os.access(path, os.X_OK)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PosixPlatform(Platform):
    """Linux and other POSIX systems."""

    name = "posix"

    def repair_path(self, path: str) -> str:
        # Path.absolute() leaves ".." alone, matching the OS's own view of
        # the string; only "." segments and doubled separators collapse.
        return os.fspath(Path(path).absolute())


class MacOSPlatform(PosixPlatform):
    """macOS: scripts are compiled through the active developer toolchain."""

    name = "macos"
    script_compiler = "xcrun swiftc"


class WindowsPlatform(Platform):
    """Windows.

    Paths handed to plugins by the host may use a representation that files
    are not found under; they are repaired with ``GetFullPathNameW``.
    """

    name = "windows"
    path_list_separator = ";"
    executable_suffix = ".exe"
    case_insensitive_environment = True
    locates_via_where = True
    supports_tool_dependencies = False
    script_shell_beside_git = True

    def repair_path(self, path: str) -> str:
        import ctypes
        from ctypes import wintypes

        get_full_path_name = ctypes.windll.kernel32.GetFullPathNameW
        get_full_path_name.argtypes = [
            wintypes.LPCWSTR,
            wintypes.DWORD,
            wintypes.LPWSTR,
            ctypes.c_void_p,
        ]
        get_full_path_name.restype = wintypes.DWORD

        size = get_full_path_name(path, 0, None, None)
        if size == 0:
            raise ResolutionError(
                ErrorCode.PATH_RESOLUTION_FAILED,
                f"GetFullPathNameW failed for {path!r} "
                f"(error {ctypes.GetLastError()})",
            )
        buffer = ctypes.create_unicode_buffer(size)
        written = get_full_path_name(path, size, buffer, None)
        if written == 0 or written >= size:
            raise ResolutionError(
                ErrorCode.PATH_RESOLUTION_FAILED,
                f"GetFullPathNameW failed for {path!r}",
            )
        return buffer.value

    def is_executable_file(self, path: Path) -> bool:
        return path.is_file()


def current_platform() -> Platform:
    """Return the platform capabilities of the running interpreter."""
    if sys.platform.startswith("win"):
        return WindowsPlatform()
    if sys.platform == "darwin":
        return MacOSPlatform()
    return PosixPlatform()
