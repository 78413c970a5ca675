"""Demo plugin compiling and running a script."""

from buildtoolsupport.commands import BuildCommand, OnDemandCommand, Script
from buildtoolsupport.context import PluginContext, Target
from buildtoolsupport.paths import repair
from buildtoolsupport.plugin import BuildToolPlugin


class Plugin(BuildToolPlugin):
    """Generates source by running DemoScripts/Echo1Into2.swift as a script."""

    async def build_commands(
        self, context: PluginContext, target: Target
    ) -> list[BuildCommand]:
        platform = self.platform
        output_file = context.work_directory / "SwiftScriptOutput.swift"
        script = context.package.directory / "DemoScripts" / "Echo1Into2.swift"

        return [
            OnDemandCommand(
                display_name="Running Echo1Into2.swift",
                executable=Script(script),
                arguments=("let swiftScriptOutput = 1", repair(output_file, platform)),
                output_files=(output_file,),
            )
        ]
