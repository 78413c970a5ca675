"""Tests for the BuildToolPlugin base class."""

from collections.abc import Callable
from pathlib import Path

import pytest
import yaml
from structlog.testing import capture_logs

from buildtoolsupport.builtin import command_demo
from buildtoolsupport.commands import (
    BuildCommand,
    Command,
    HostBuildCommand,
    OnDemandCommand,
)
from buildtoolsupport.config import (
    REUSE_BUILD_OUTPUT_ENV,
    SETTINGS_PATH_ENV,
    SupportSettings,
)
from buildtoolsupport.context import PluginContext, StaticPluginContext, Target
from buildtoolsupport.environment import Environment
from buildtoolsupport.errors import ErrorCode, ResolutionError
from buildtoolsupport.platform import PosixPlatform, WindowsPlatform
from buildtoolsupport.plugin import BuildToolPlugin


class EchoPlugin(BuildToolPlugin):
    """Runs sh to write a file.

    Second line of the docstring.
    """

    root: Path | None = None

    @classmethod
    def source_root(cls) -> Path:
        assert cls.root is not None
        return cls.root

    async def build_commands(
        self, context: PluginContext, target: Target
    ) -> list[BuildCommand]:
        output = context.work_directory / f"{target.name}.txt"
        return [
            OnDemandCommand(
                display_name="Echo",
                executable=Command(self.config.get("shell", "sh")),
                arguments=("-c", "echo hi"),
                output_files=(output,),
            )
        ]


@pytest.fixture
def plugin_root(tmp_path: Path) -> Path:
    root = tmp_path / "plugin-src"
    root.mkdir()
    (root / "plugin.py").write_text("# plugin\n")
    EchoPlugin.root = root
    return root


@pytest.fixture
def environment(
    tmp_path: Path, make_executable: Callable[..., Path]
) -> Environment:
    make_executable(tmp_path / "bin" / "sh")
    return Environment({"PATH": str(tmp_path / "bin")}, PosixPlatform())


class TestPluginProperties:
    """Tests for plugin identity and metadata."""

    def test_name_is_module_name(self) -> None:
        """Verify the name is the last component of the module."""
        assert EchoPlugin().name == "test_plugin"

    def test_metadata_uses_first_docstring_line(self) -> None:
        """Verify metadata takes the docstring summary."""
        assert EchoPlugin.get_plugin_metadata() == {
            "name": "test_plugin",
            "description": "Runs sh to write a file.",
        }

    def test_platform_follows_environment(self) -> None:
        """Verify an injected environment decides the platform."""
        plugin = EchoPlugin(
            platform=PosixPlatform(),
            environment=Environment({}, WindowsPlatform()),
        )

        assert isinstance(plugin.platform, WindowsPlatform)

    def test_platform_injected(self) -> None:
        """Verify an injected platform is used without an environment."""
        platform = WindowsPlatform()

        assert EchoPlugin(platform=platform).platform is platform

    def test_config_defaults_to_empty(self) -> None:
        """Verify config is an empty dict by default."""
        assert EchoPlugin().config == {}


class TestResolveSettings:
    """Tests for settings resolution."""

    def test_injected_settings_win(self) -> None:
        """Verify injected settings are returned as-is."""
        settings = SupportSettings(build_tool="x")
        plugin = EchoPlugin(settings=settings)

        assert plugin.resolve_settings(Environment({}, PosixPlatform())) is settings

    def test_settings_file_from_environment(self, tmp_path: Path) -> None:
        """Verify the settings file named by the environment is loaded."""
        path = tmp_path / "settings.yml"
        path.write_text(yaml.dump({"build_tool": "swift-build"}))
        env = Environment({SETTINGS_PATH_ENV: str(path)}, PosixPlatform())

        assert EchoPlugin().resolve_settings(env).build_tool == "swift-build"

    def test_flag_from_environment(self) -> None:
        """Verify the override flag is read without a settings file."""
        env = Environment({REUSE_BUILD_OUTPUT_ENV: "1"}, PosixPlatform())

        assert EchoPlugin().resolve_settings(env).reuse_build_output is True


class TestCreateBuildCommands:
    """Tests for create_build_commands()."""

    @pytest.mark.asyncio
    async def test_translates_commands(
        self,
        tmp_path: Path,
        demo_context: StaticPluginContext,
        plugin_root: Path,
        environment: Environment,
    ) -> None:
        """Verify portable commands become host commands."""
        plugin = EchoPlugin(environment=environment)
        target = demo_context.package.find_target("LibWithResource")

        with capture_logs() as logs:
            commands = await plugin.create_build_commands(demo_context, target)

        (command,) = commands
        assert isinstance(command, HostBuildCommand)
        assert command.executable == tmp_path / "bin" / "sh"
        assert command.output_files == (
            demo_context.work_directory / "LibWithResource.txt",
        )
        assert plugin_root / "plugin.py" in command.input_files
        assert logs[-1]["event"] == "build_commands_created"
        assert logs[-1]["count"] == 1

    @pytest.mark.asyncio
    async def test_failure_produces_no_commands(
        self,
        demo_context: StaticPluginContext,
        plugin_root: Path,
        environment: Environment,
    ) -> None:
        """Verify a resolution failure propagates and is logged."""
        plugin = EchoPlugin({"shell": "no-such-shell"}, environment=environment)
        target = demo_context.package.find_target("LibWithResource")

        with capture_logs() as logs:
            with pytest.raises(ResolutionError) as exc_info:
                await plugin.create_build_commands(demo_context, target)

        assert exc_info.value.code is ErrorCode.TOOL_NOT_FOUND
        assert exc_info.value.plugin_name == "test_plugin"
        assert str(exc_info.value).startswith("[test_plugin] [TOOL_NOT_FOUND]")
        assert logs[-1]["event"] == "build_command_generation_failed"
        assert logs[-1]["error"] == str(exc_info.value)
        assert logs[-1]["log_level"] == "error"


class TestSourceRoot:
    """Tests for the default plugin source root."""

    def test_standalone_module_is_its_own_root(self) -> None:
        """Verify a plugin in a top-level module only claims that file."""

        class Local(BuildToolPlugin):
            async def build_commands(self, context, target):
                return []

        assert Local.source_root() == Path(__file__).resolve()

    def test_packaged_module_claims_its_directory(self) -> None:
        """Verify a plugin inside a package claims the package directory."""
        root = command_demo.Plugin.source_root()

        assert root == Path(command_demo.__file__).resolve().parent
        assert root.is_dir()
