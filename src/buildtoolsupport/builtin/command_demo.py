"""Demo plugin running a command by name, as if in a shell."""

import logging
from typing import Any

from buildtoolsupport.commands import BuildCommand, Command, OnDemandCommand
from buildtoolsupport.context import PluginContext, Target
from buildtoolsupport.paths import shell_quoted
from buildtoolsupport.plugin import BuildToolPlugin

logger = logging.getLogger(__name__)


class Plugin(BuildToolPlugin):
    """Generates source by running the platform shell found on the search path."""

    async def build_commands(
        self, context: PluginContext, target: Target
    ) -> list[BuildCommand]:
        platform = self.platform
        output_file = context.work_directory / "CommandOutput.swift"

        if platform.name == "windows":
            shell, arguments = "cmd", ["/Q", "/C"]
        else:
            shell, arguments = "sh", ["-c"]
        arguments.append(
            f"echo let commandOutput = 1 > {shell_quoted(output_file, platform)}"
        )
        logger.debug("Command demo for %s: %s %s", target.name, shell, arguments)

        return [
            OnDemandCommand(
                display_name=f"Running {' '.join([shell, *arguments])}",
                executable=Command(shell),
                arguments=tuple(arguments),
                output_files=(output_file,),
            )
        ]

    @classmethod
    def get_plugin_metadata(cls) -> dict[str, Any]:
        return {
            "name": "command_demo",
            "description": "Runs a shell command found on the search path",
        }
