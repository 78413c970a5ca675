"""Demo plugin running a tool of the build toolchain."""

from buildtoolsupport.commands import BuildCommand, OnDemandCommand, ToolchainCommand
from buildtoolsupport.context import PluginContext, Target
from buildtoolsupport.paths import repair
from buildtoolsupport.plugin import BuildToolPlugin


class Plugin(BuildToolPlugin):
    """Preprocesses DemoScripts/Dummy.c with the toolchain's clang."""

    async def build_commands(
        self, context: PluginContext, target: Target
    ) -> list[BuildCommand]:
        platform = self.platform
        raw_source = context.package.directory / "DemoScripts" / "Dummy.c"
        preprocessed = context.work_directory / "Dummy.pp"

        return [
            OnDemandCommand(
                display_name="Generating preprocessed C as resource",
                executable=ToolchainCommand(self.config.get("compiler", "clang")),
                arguments=(
                    "-E",
                    repair(raw_source, platform),
                    "-o",
                    repair(preprocessed, platform),
                ),
                input_files=(raw_source,),
                output_files=(preprocessed,),
            )
        ]
