"""Demo plugin running an executable file with a known path."""

from buildtoolsupport.commands import BuildCommand, File, OnDemandCommand
from buildtoolsupport.context import PluginContext, Target
from buildtoolsupport.paths import repair
from buildtoolsupport.plugin import BuildToolPlugin


class Plugin(BuildToolPlugin):
    """Generates source by running DemoScripts/Echo1Into2 from the package."""

    async def build_commands(
        self, context: PluginContext, target: Target
    ) -> list[BuildCommand]:
        platform = self.platform
        output_file = context.work_directory / "ExecutableOutput.swift"
        script_name = "Echo1Into2.cmd" if platform.name == "windows" else "Echo1Into2"

        return [
            OnDemandCommand(
                display_name="Running Echo1Into2",
                executable=File(context.package.directory / "DemoScripts" / script_name),
                # Tools may fail to find files given in any form other than
                # the repaired one.
                arguments=(
                    "let executableOutput = 1",
                    repair(output_file, platform),
                ),
                output_files=(output_file,),
            )
        ]
