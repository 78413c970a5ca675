"""Plugin entry point.

This module defines ``BuildToolPlugin``, the base class for plugins having a
build-tool capability. Subclasses describe their work with portable
commands; the base class translates them into the host's command types.

Example:
    class Plugin(BuildToolPlugin):
        async def build_commands(self, context, target):
            output = context.work_directory / "CommandOutput.swift"
            return [
                OnDemandCommand(
                    display_name="Running sh",
                    executable=Command("sh"),
                    arguments=("-c", f"echo let x = 1 > {shell_quoted(output)}"),
                    output_files=(output,),
                )
            ]
"""

import inspect
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import structlog

from buildtoolsupport.commands import BuildCommand, HostCommand
from buildtoolsupport.config import SETTINGS_PATH_ENV, SupportSettings, load_settings
from buildtoolsupport.context import PluginContext, Target
from buildtoolsupport.emitter import CommandEmitter
from buildtoolsupport.environment import Environment
from buildtoolsupport.errors import BuildToolError
from buildtoolsupport.locator import ExecutableLocator
from buildtoolsupport.planner import InvocationPlanner
from buildtoolsupport.platform import Platform, current_platform

logger = structlog.get_logger()


class BuildToolPlugin(ABC):
    """Abstract base class for build tool plugins.

    Subclasses MUST implement:
        - build_commands(): Return the portable commands for a target

    Subclasses may override:
        - source_root(): The file or directory whose files are plugin inputs

    The platform, environment and settings may be injected for testing;
    otherwise they are taken from the running process when commands are
    created.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        platform: Platform | None = None,
        environment: Environment | None = None,
        settings: SupportSettings | None = None,
    ) -> None:
        """Initialize the plugin.

        Args:
            config: Plugin-specific configuration.
            platform: Platform used when capturing the environment
                (defaults to the running one).
            environment: Environment snapshot, which carries its own
                platform (defaults to a fresh capture).
            settings: Resolution settings (defaults to the environment's).
        """
        self.config = config or {}
        self._platform = platform
        self._environment = environment
        self._settings = settings

    @property
    def name(self) -> str:
        return type(self).__module__.rsplit(".", 1)[-1]

    @property
    def platform(self) -> Platform:
        """The platform commands are generated for."""
        if self._environment is not None:
            return self._environment.platform
        return self._platform or current_platform()

    @abstractmethod
    async def build_commands(
        self,
        context: PluginContext,
        target: Target,
    ) -> list[BuildCommand]:
        """Return the build commands for ``target`` in ``context``."""
        ...

    @classmethod
    def source_root(cls) -> Path:
        """The plugin's own source code.

        This is the directory of the defining module when that module belongs
        to a package, and the module file alone otherwise.
        """
        path = Path(inspect.getfile(cls)).resolve()
        module = sys.modules.get(cls.__module__)
        if module is not None and module.__package__:
            return path.parent
        return path

    def resolve_settings(self, environment: Environment) -> SupportSettings:
        if self._settings is not None:
            return self._settings
        settings_path = environment.get(SETTINGS_PATH_ENV)
        if settings_path:
            return load_settings(settings_path, environment)
        return SupportSettings.from_environment(environment)

    async def create_build_commands(
        self,
        context: PluginContext,
        target: Target,
    ) -> list[HostCommand]:
        """Return the host commands for ``target`` in ``context``.

        Raises:
            BuildToolError: If any command cannot be translated; no commands
                are produced in that case.
        """
        environment = self._environment or Environment.capture(self.platform)
        settings = self.resolve_settings(environment)

        locator = ExecutableLocator(
            environment,
            scratch_root=context.work_directory,
            settings=settings,
            context=context,
        )
        emitter = CommandEmitter(
            InvocationPlanner(context, locator, settings),
            self.source_root(),
        )

        commands = await self.build_commands(context, target)
        try:
            host_commands = emitter.emit_all(commands)
        except BuildToolError as e:
            if e.plugin_name is None:
                e.plugin_name = self.name
            logger.error(
                "build_command_generation_failed",
                plugin=self.name,
                target=target.name,
                error=str(e),
            )
            raise

        logger.info(
            "build_commands_created",
            plugin=self.name,
            target=target.name,
            count=len(host_commands),
        )
        return host_commands

    @classmethod
    def get_plugin_metadata(cls) -> dict[str, Any]:
        """Return metadata about this plugin for CLI display."""
        return {
            "name": cls.__module__.rsplit(".", 1)[-1],
            "description": (cls.__doc__ or "No description").strip().splitlines()[0],
        }
