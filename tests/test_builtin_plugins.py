"""Tests for the built-in demo plugins and the plugin registry."""

import os
import shlex
from collections.abc import Callable
from pathlib import Path

import pytest

from buildtoolsupport.builtin import (
    command_demo,
    executable_file_demo,
    local_target_demo,
    manifest,
    script_demo,
    toolchain_command_demo,
)
from buildtoolsupport.commands import Command, OnDemandCommand, ToolchainCommand
from buildtoolsupport.config import SupportSettings
from buildtoolsupport.context import StaticPluginContext, Target
from buildtoolsupport.environment import Environment
from buildtoolsupport.platform import PosixPlatform
from buildtoolsupport.registry import (
    get_module_paths,
    get_plugin,
    get_plugins,
    register_plugin,
)


class CmdPlatform(PosixPlatform):
    """Looks like Windows to the demo plugins, resolves like POSIX."""

    name = "windows"


@pytest.fixture
def environment(
    tmp_path: Path, make_executable: Callable[..., Path]
) -> Environment:
    bin_directory = tmp_path / "bin"
    for tool in ("sh", "bash"):
        make_executable(bin_directory / tool)
    api = tmp_path.joinpath("tc", "usr", "lib", "swift", "pm", "PluginAPI")
    api.mkdir(parents=True)
    make_executable(tmp_path / "tc" / "usr" / "bin" / "clang")
    make_executable(tmp_path / "tc" / "usr" / "bin" / "swift")
    return Environment(
        {"PATH": os.pathsep.join([str(bin_directory), str(api)])}, PosixPlatform()
    )


@pytest.fixture
def library(demo_context: StaticPluginContext) -> Target:
    target = demo_context.package.find_target("LibWithResource")
    assert target is not None
    return target


class TestCommandDemo:
    """Tests for command_demo."""

    @pytest.mark.asyncio
    async def test_posix_uses_sh(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify sh -c writes into a quoted output path."""
        plugin = command_demo.Plugin(platform=PosixPlatform())

        (command,) = await plugin.build_commands(demo_context, library)

        output = demo_context.work_directory / "CommandOutput.swift"
        assert command.executable == Command("sh")
        assert command.arguments == (
            "-c",
            f"echo let commandOutput = 1 > {shlex.quote(str(output))}",
        )
        assert command.output_files == (output,)
        assert command.display_name.startswith("Running sh -c")

    @pytest.mark.asyncio
    async def test_windows_uses_cmd(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify cmd /Q /C with a double-quoted path."""
        plugin = command_demo.Plugin(platform=CmdPlatform())

        (command,) = await plugin.build_commands(demo_context, library)

        output = demo_context.work_directory / "CommandOutput.swift"
        assert command.executable == Command("cmd")
        assert command.arguments == (
            "/Q",
            "/C",
            f'echo let commandOutput = 1 > "{output}"',
        )

    @pytest.mark.asyncio
    async def test_host_command(
        self,
        tmp_path: Path,
        demo_context: StaticPluginContext,
        library: Target,
        environment: Environment,
    ) -> None:
        """Verify the emitted host command runs the located sh."""
        plugin = command_demo.Plugin(environment=environment)

        (command,) = await plugin.create_build_commands(demo_context, library)

        assert command.executable == tmp_path / "bin" / "sh"
        assert tmp_path / "bin" / "sh" in command.input_files

    def test_metadata(self) -> None:
        """Verify the custom metadata."""
        assert command_demo.Plugin.get_plugin_metadata()["name"] == "command_demo"


class TestExecutableFileDemo:
    """Tests for executable_file_demo."""

    @pytest.mark.asyncio
    async def test_runs_package_script(
        self,
        tmp_path: Path,
        demo_context: StaticPluginContext,
        library: Target,
        environment: Environment,
    ) -> None:
        """Verify the script shipped with the package is the executable."""
        plugin = executable_file_demo.Plugin(environment=environment)

        (command,) = await plugin.create_build_commands(demo_context, library)

        output = demo_context.work_directory / "ExecutableOutput.swift"
        assert command.executable == tmp_path / "Demo" / "DemoScripts" / "Echo1Into2"
        assert command.arguments == ("let executableOutput = 1", os.fspath(output))
        assert command.output_files == (output,)

    @pytest.mark.asyncio
    async def test_windows_script_name(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify the .cmd variant is chosen on Windows."""
        plugin = executable_file_demo.Plugin(platform=CmdPlatform())

        (command,) = await plugin.build_commands(demo_context, library)

        assert command.executable.path.name == "Echo1Into2.cmd"


class TestLocalTargetDemo:
    """Tests for local_target_demo."""

    @pytest.mark.asyncio
    async def test_no_inputs_no_commands(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify nothing is emitted when there are no inputs."""
        plugin = local_target_demo.Plugin(platform=PosixPlatform())

        assert await plugin.build_commands(demo_context, library) == []

    @pytest.mark.asyncio
    async def test_one_output_per_input(
        self,
        tmp_path: Path,
        demo_context: StaticPluginContext,
        library: Target,
        environment: Environment,
    ) -> None:
        """Verify each input maps to an .out resource and GenRsrc runs."""
        inputs = library.directory / "BuildToolPluginInputs"
        inputs.mkdir(parents=True)
        (inputs / "b.in").write_text("b")
        (inputs / "a.in").write_text("a")
        plugin = local_target_demo.Plugin(environment=environment)

        (command,) = await plugin.create_build_commands(demo_context, library)

        generated = demo_context.work_directory / "GeneratedResources"
        assert command.executable == tmp_path / "build" / "debug" / "GenRsrc"
        assert command.arguments == (
            os.fspath(inputs / "a.in"),
            os.fspath(inputs / "b.in"),
            os.fspath(generated),
        )
        assert command.output_files == (generated / "a.out", generated / "b.out")
        assert command.input_files[:2] == (inputs / "a.in", inputs / "b.in")
        assert {p.name for p in command.input_files} >= {
            "main.swift",
            "helpers.swift",
            "core.swift",
        }

    @pytest.mark.asyncio
    async def test_reentrant_on_request(
        self,
        tmp_path: Path,
        demo_context: StaticPluginContext,
        library: Target,
        environment: Environment,
    ) -> None:
        """Verify the target can be built by running the build tool."""
        inputs = library.directory / "BuildToolPluginInputs"
        inputs.mkdir(parents=True)
        (inputs / "a.in").write_text("a")
        plugin = local_target_demo.Plugin(
            environment=environment,
            settings=SupportSettings(reentrant_target_builds=True),
        )

        (command,) = await plugin.create_build_commands(demo_context, library)

        assert command.executable == tmp_path / "tc" / "usr" / "bin" / "swift"
        assert command.arguments[0] == "run"
        assert command.arguments[6] == "GenRsrc"
        assert command.arguments[7] == os.fspath(inputs / "a.in")

    @pytest.mark.asyncio
    async def test_tool_is_configurable(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify the generator target name comes from the config."""
        inputs = library.directory / "BuildToolPluginInputs"
        inputs.mkdir(parents=True)
        (inputs / "a.in").write_text("a")
        plugin = local_target_demo.Plugin({"tool": "Other"}, platform=PosixPlatform())

        (command,) = await plugin.build_commands(demo_context, library)

        assert command.executable.name == "Other"


class TestScriptDemo:
    """Tests for script_demo."""

    @pytest.mark.asyncio
    async def test_runs_script_through_bash(
        self,
        tmp_path: Path,
        demo_context: StaticPluginContext,
        library: Target,
        environment: Environment,
    ) -> None:
        """Verify the script pipeline runs with the forwarded arguments."""
        plugin = script_demo.Plugin(environment=environment)

        (command,) = await plugin.create_build_commands(demo_context, library)

        script = tmp_path / "Demo" / "DemoScripts" / "Echo1Into2.swift"
        output = demo_context.work_directory / "SwiftScriptOutput.swift"
        assert command.executable == tmp_path / "bin" / "bash"
        assert command.arguments[6] == os.fspath(script)
        assert command.arguments[7:] == ("let swiftScriptOutput = 1", os.fspath(output))
        assert script in command.input_files


class TestToolchainCommandDemo:
    """Tests for toolchain_command_demo."""

    @pytest.mark.asyncio
    async def test_runs_toolchain_clang(
        self,
        tmp_path: Path,
        demo_context: StaticPluginContext,
        library: Target,
        environment: Environment,
    ) -> None:
        """Verify clang from the toolchain preprocesses Dummy.c."""
        plugin = toolchain_command_demo.Plugin(environment=environment)

        (command,) = await plugin.create_build_commands(demo_context, library)

        raw = tmp_path / "Demo" / "DemoScripts" / "Dummy.c"
        output = demo_context.work_directory / "Dummy.pp"
        assert command.executable == tmp_path / "tc" / "usr" / "bin" / "clang"
        assert command.arguments == ("-E", os.fspath(raw), "-o", os.fspath(output))
        assert command.input_files[0] == raw
        assert command.output_files == (output,)

    @pytest.mark.asyncio
    async def test_compiler_is_configurable(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify the compiler name comes from the config."""
        plugin = toolchain_command_demo.Plugin(
            {"compiler": "gcc"}, platform=PosixPlatform()
        )

        (command,) = await plugin.build_commands(demo_context, library)

        assert command.executable == ToolchainCommand("gcc")


class TestManifestPlugin:
    """Tests for the manifest plugin."""

    @pytest.mark.asyncio
    async def test_emits_configured_commands(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify the configured commands are returned unchanged."""
        commands = [OnDemandCommand(display_name="x", executable=Command("sh"))]
        plugin = manifest.Plugin({"commands": commands})

        assert await plugin.build_commands(demo_context, library) == commands

    @pytest.mark.asyncio
    async def test_no_commands(
        self, demo_context: StaticPluginContext, library: Target
    ) -> None:
        """Verify an empty configuration emits nothing."""
        assert await manifest.Plugin().build_commands(demo_context, library) == []


class TestRegistry:
    """Tests for the plugin registry."""

    def test_builtin_plugins_registered(self) -> None:
        """Verify every built-in plugin is available."""
        plugins = get_plugins()

        assert {
            "command_demo",
            "executable_file_demo",
            "local_target_demo",
            "script_demo",
            "toolchain_command_demo",
            "manifest",
        } <= set(plugins)
        assert plugins["command_demo"] is command_demo.Plugin

    def test_module_paths(self) -> None:
        """Verify module paths are recorded."""
        assert get_module_paths()["script_demo"] == "buildtoolsupport.builtin.script_demo"

    def test_unknown_plugin(self) -> None:
        """Verify an unknown name raises KeyError listing the available ones."""
        with pytest.raises(KeyError, match="command_demo"):
            get_plugin("no_such_plugin")

    def test_register_plugin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify custom plugins can be registered."""
        plugins = dict(get_plugins())
        paths = get_module_paths()
        monkeypatch.setattr("buildtoolsupport.registry._registry", plugins)
        monkeypatch.setattr("buildtoolsupport.registry._module_paths", paths)

        register_plugin("custom", manifest.Plugin, "tests.custom")

        assert get_plugin("custom") is manifest.Plugin
        assert get_module_paths()["custom"] == "tests.custom"
