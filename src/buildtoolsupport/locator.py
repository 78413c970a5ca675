"""Executable location.

Finds the file that would run if a command were typed into a shell with a
given executable search path, and finds tools of the active build toolchain.

Classes:
    - ExecutableLocator: Search-path and toolchain lookups
"""

import os
from collections.abc import Iterable
from pathlib import Path

import structlog

from buildtoolsupport.config import SupportSettings
from buildtoolsupport.context import PluginContext
from buildtoolsupport.environment import Environment, SearchPath
from buildtoolsupport.errors import ErrorCode, NonzeroExitError, ResolutionError
from buildtoolsupport.paths import sans_suffix
from buildtoolsupport.process import run
from buildtoolsupport.scratch import scratch_directory

logger = structlog.get_logger()


class ExecutableLocator:
    """Resolves command names to executable files.

    Attributes:
        environment: Snapshot of the environment whose PATH is searched.
        settings: Resolution settings (toolchain suffix, scratch attempts).

    Example:
        locator = ExecutableLocator(Environment.capture(), scratch_root=work)
        bash = locator.locate("bash")
    """

    def __init__(
        self,
        environment: Environment,
        scratch_root: Path,
        settings: SupportSettings | None = None,
        context: PluginContext | None = None,
    ) -> None:
        """Initialize the locator.

        Args:
            environment: Environment snapshot; its platform decides the
                lookup strategy.
            scratch_root: Directory in which isolated scratch directories
                are created for indirect lookups.
            settings: Resolution settings (defaults apply if omitted).
            context: Host context consulted as the last resort for
                toolchain commands.
        """
        self.environment = environment
        self.settings = settings or SupportSettings()
        self._platform = environment.platform
        self._scratch_root = Path(scratch_root)
        self._context = context

    def first_executable(
        self, search_path: Iterable[Path], name: str
    ) -> Path | None:
        """Return the first executable named ``name`` in ``search_path``.

        Directories are scanned in order. The current directory is only
        searched if it appears in ``search_path``.
        """
        file_name = self._platform.executable_name(name)
        for directory in search_path:
            candidate = Path(directory) / file_name
            if self._platform.is_executable_file(candidate):
                return candidate
        return None

    def locate(self, command: str, search_path: SearchPath | None = None) -> Path:
        """Return the executable invoked as ``command`` when searching ``search_path``.

        Args:
            command: The command name as typed in a shell.
            search_path: Directories to search; defaults to the environment's
                PATH.

        Returns:
            Path of the executable.

        Raises:
            ResolutionError: If no such executable can be found.
        """
        if search_path is None:
            search_path = self.environment.search_path()

        if self._platform.locates_via_where:
            return self._locate_with_where(command, search_path)

        found = self.first_executable(search_path, command)
        if found is None:
            raise ResolutionError(
                ErrorCode.TOOL_NOT_FOUND,
                f"No executable invoked as {command} found in: "
                f"{[os.fspath(p) for p in search_path]}",
            )
        return found

    def _locate_with_where(self, command: str, search_path: SearchPath) -> Path:
        windir = self.environment.get("WINDIR")
        if not windir:
            raise ResolutionError(
                ErrorCode.TOOL_NOT_FOUND,
                f"Cannot locate {command}: WINDIR is not set",
            )
        where = Path(windir) / "System32" / "where.exe"
        child_environment = self.environment.with_search_path(search_path)

        # An empty working directory keeps ``where`` from matching a file in
        # the current directory.
        with scratch_directory(
            self._scratch_root, self.settings.scratch_attempts
        ) as empty:
            try:
                output = run(
                    where,
                    [command],
                    environment=child_environment,
                    working_directory=empty,
                )
            except NonzeroExitError as e:
                raise ResolutionError(
                    ErrorCode.TOOL_NOT_FOUND,
                    f"No executable invoked as {command} found in: "
                    f"{[os.fspath(p) for p in search_path]}",
                    cause=e,
                ) from e

        first_line = output.splitlines()[0] if output else ""
        if not first_line.strip():
            raise ResolutionError(
                ErrorCode.TOOL_NOT_FOUND,
                f"where.exe reported nothing for {command}",
            )
        return Path(first_line.strip())

    def toolchain_bin_directory(self) -> Path | None:
        """Return the ``bin`` directory of the active toolchain, if identifiable.

        The host adds a directory with a known trailing layout to the search
        path of plugin processes; stripping that layout yields the toolchain
        root.
        """
        suffix = self.settings.toolchain_path_suffix
        for entry in self.environment.search_path():
            root = sans_suffix(entry, suffix)
            if root is not None:
                return root / "bin"
        return None

    def toolchain_executable(self, command: str) -> Path:
        """Return the executable of the active toolchain invoked as ``command``.

        Falls back, with a warning each time, to the full search path and
        then to a like-named tool declared to the host.

        Raises:
            ResolutionError: If every strategy fails.
        """
        bin_directory = self.toolchain_bin_directory()
        if bin_directory is not None:
            found = self.first_executable([bin_directory], command)
            if found is not None:
                return found
            logger.warning(
                "toolchain_command_not_in_bin_directory",
                command=command,
                bin_directory=str(bin_directory),
            )
        else:
            logger.warning(
                "toolchain_directory_not_found",
                command=command,
                suffix="/".join(self.settings.toolchain_path_suffix),
            )

        try:
            return self.locate(command)
        except ResolutionError as e:
            logger.warning(
                "toolchain_command_not_on_search_path",
                command=command,
                error=str(e),
            )

        if self._context is None:
            raise ResolutionError(
                ErrorCode.TOOLCHAIN_NOT_FOUND,
                f"Cannot find toolchain command {command!r}",
            )
        try:
            return self._context.tool_path(command)
        except ResolutionError as e:
            raise ResolutionError(
                ErrorCode.TOOLCHAIN_NOT_FOUND,
                f"Cannot find toolchain command {command!r}",
                cause=e,
            ) from e
