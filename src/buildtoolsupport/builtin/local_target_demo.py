"""Demo plugin running an executable target of the same package."""

import logging
from pathlib import Path

from buildtoolsupport.commands import BuildCommand, OnDemandCommand, TargetInPackage
from buildtoolsupport.context import PluginContext, Target
from buildtoolsupport.paths import repair
from buildtoolsupport.plugin import BuildToolPlugin

logger = logging.getLogger(__name__)

INPUTS_DIRECTORY = "BuildToolPluginInputs"
DEFAULT_TOOL = "GenRsrc"


class Plugin(BuildToolPlugin):
    """Generates resources from .in files with the package's GenRsrc target.

    Configuration options:
        tool: Name of the resource generator target (default: "GenRsrc")
        inputs_directory: Directory under the target holding the inputs
            (default: "BuildToolPluginInputs")
    """

    async def build_commands(
        self, context: PluginContext, target: Target
    ) -> list[BuildCommand]:
        platform = self.platform
        tool = self.config.get("tool", DEFAULT_TOOL)
        input_directory = target.directory / self.config.get(
            "inputs_directory", INPUTS_DIRECTORY
        )

        # Listing the inputs as target sources makes the host warn that they
        # are unhandled, so they live in a directory of their own.
        inputs: list[Path] = (
            sorted(p for p in input_directory.rglob("*") if p.is_file())
            if input_directory.is_dir()
            else []
        )
        if not inputs:
            logger.info("No inputs for %s in %s", target.name, input_directory)
            return []

        output_directory = context.work_directory / "GeneratedResources"
        outputs = [output_directory / f"{p.stem}.out" for p in inputs]

        return [
            OnDemandCommand(
                display_name=f"Running {tool}",
                executable=TargetInPackage(tool),
                arguments=tuple(
                    repair(p, platform) for p in [*inputs, output_directory]
                ),
                input_files=tuple(inputs),
                output_files=tuple(outputs),
            )
        ]
