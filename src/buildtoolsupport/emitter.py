"""Command emission.

Wraps planned invocations together with the caller's arguments and files
into the host's native command types, adding the inputs needed for the host
to rerun a command when the plugin or its tool changes.
"""

from collections.abc import Callable, Iterable
from pathlib import Path

import structlog

from buildtoolsupport.commands import (
    BuildCommand,
    HostBuildCommand,
    HostCommand,
    HostPrebuildCommand,
    OnDemandCommand,
    UnconditionalCommand,
)
from buildtoolsupport.planner import InvocationPlanner

logger = structlog.get_logger()


def is_trackable_dependency(path: Path) -> bool:
    """Check whether ``path`` can be declared as a build input.

    Some installed executables are zero-byte placeholders (for example
    application execution aliases on Windows); the host reports those as
    missing when they are listed as inputs.
    """
    try:
        return path.is_file() and path.stat().st_size > 0
    except OSError:
        return False


def plugin_source_files(root: Path) -> list[Path]:
    """Return every file making up the plugin's own source, sorted.

    ``root`` is either a single module file or a directory. There is no
    reliable way to know which files under a directory the plugin actually
    uses, so all of them are treated as inputs.
    """
    root = Path(root)
    if root.is_file():
        return [root]
    if not root.is_dir():
        return []
    return sorted(
        p
        for p in root.rglob("*")
        if p.is_file() and "__pycache__" not in p.relative_to(root).parts
    )


def _unique(paths: Iterable[Path]) -> tuple[Path, ...]:
    return tuple(dict.fromkeys(paths))


class CommandEmitter:
    """Translates portable build commands into host commands.

    Attributes:
        planner: Resolves each command's executable.
        plugin_source_root: The plugin's module file or package directory.
    """

    def __init__(
        self,
        planner: InvocationPlanner,
        plugin_source_root: Path,
        is_trackable: Callable[[Path], bool] = is_trackable_dependency,
    ) -> None:
        self.planner = planner
        self.plugin_source_root = Path(plugin_source_root)
        self._is_trackable = is_trackable

    def emit(self, command: BuildCommand) -> HostCommand:
        """Return the host representation of ``command``.

        Raises:
            ResolutionError: If the command's executable cannot be resolved.
            TypeError: If ``command`` is not a BuildCommand variant.
        """
        if isinstance(command, OnDemandCommand):
            return self._emit_on_demand(command)
        if isinstance(command, UnconditionalCommand):
            return self._emit_unconditional(command)
        raise TypeError(f"Not a build command: {command!r}")

    def emit_all(self, commands: Iterable[BuildCommand]) -> list[HostCommand]:
        return [self.emit(command) for command in commands]

    def _emit_on_demand(self, command: OnDemandCommand) -> HostBuildCommand:
        invocation = self.planner.plan(command.executable)

        executable_dependency: list[Path] = []
        if self._is_trackable(invocation.executable):
            executable_dependency.append(invocation.executable)
        else:
            logger.debug(
                "executable_not_tracked",
                executable=str(invocation.executable),
            )

        input_files = _unique(
            [
                *command.input_files,
                *plugin_source_files(self.plugin_source_root),
                *sorted(invocation.additional_sources),
                *executable_dependency,
            ]
        )

        return HostBuildCommand(
            display_name=command.display_name,
            executable=invocation.executable,
            arguments=(*invocation.argument_prefix, *command.arguments),
            environment=dict(command.environment),
            input_files=input_files,
            output_files=tuple(command.output_files),
        )

    def _emit_unconditional(
        self, command: UnconditionalCommand
    ) -> HostPrebuildCommand:
        invocation = self.planner.plan(command.executable)
        return HostPrebuildCommand(
            display_name=command.display_name,
            executable=invocation.executable,
            arguments=(*invocation.argument_prefix, *command.arguments),
            environment=dict(command.environment),
            output_files_directory=command.output_files_directory,
        )
