"""Plugin emitting the commands declared in a manifest."""

from buildtoolsupport.commands import BuildCommand
from buildtoolsupport.context import PluginContext, Target
from buildtoolsupport.plugin import BuildToolPlugin


class Plugin(BuildToolPlugin):
    """Emits a fixed list of commands.

    Configuration options:
        commands: The BuildCommand values to emit (required)
    """

    async def build_commands(
        self, context: PluginContext, target: Target
    ) -> list[BuildCommand]:
        return list(self.config.get("commands", []))
