"""Run command.

This module provides the `bts run` command, which emits the host commands
for a manifest and executes them in order, the way a host would on a clean
build.
"""

import os

import typer

from buildtoolsupport.cli.commands.plan import (
    ManifestArgument,
    PluginOption,
    TargetOption,
    emit_or_exit,
    load_or_exit,
)
from buildtoolsupport.commands import HostBuildCommand
from buildtoolsupport.errors import BuildToolError
from buildtoolsupport.process import run


def run_command(
    manifest: ManifestArgument,
    plugin: PluginOption = None,
    target: TargetOption = None,
) -> None:
    """Execute the host commands a plugin emits for a manifest.

    Every command runs unconditionally; outputs are reported afterwards.
    """
    loaded = load_or_exit(manifest)
    commands = emit_or_exit(loaded, plugin, target)

    for command in commands:
        label = command.display_name or os.fspath(command.executable)
        typer.echo(f"==> {label}")

        if isinstance(command, HostBuildCommand):
            for output in command.output_files:
                output.parent.mkdir(parents=True, exist_ok=True)
        else:
            command.output_files_directory.mkdir(parents=True, exist_ok=True)

        environment = {**os.environ, **command.environment}
        try:
            output = run(command.executable, command.arguments, environment)
        except BuildToolError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None

        if output:
            typer.echo(output.rstrip("\n"))

        if isinstance(command, HostBuildCommand):
            produced = [p for p in command.output_files if p.exists()]
        else:
            produced = command.discovered_outputs()
        for path in produced:
            typer.echo(f"    produced {path}")
