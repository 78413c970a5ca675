"""Plan command.

This module provides the `bts plan` command, which loads a manifest, runs a
plugin against the package it describes, and prints the emitted host
commands as JSON.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError

from buildtoolsupport.commands import HostCommand
from buildtoolsupport.environment import Environment
from buildtoolsupport.errors import BuildToolError
from buildtoolsupport.manifest import LoadedManifest, load_manifest
from buildtoolsupport.registry import get_plugin

logger = logging.getLogger(__name__)

ManifestArgument = Annotated[
    Path,
    typer.Argument(help="Path to the plugin manifest (YAML)"),
]
PluginOption = Annotated[
    str | None,
    typer.Option(
        "--plugin",
        "-p",
        help="Registered plugin to run (default: the manifest's plugin or its commands)",
    ),
]
TargetOption = Annotated[
    str | None,
    typer.Option("--target", "-t", help="Target the plugin is applied to"),
]


def emit_commands(
    loaded: LoadedManifest,
    plugin_name: str | None = None,
    target_name: str | None = None,
) -> list[HostCommand]:
    """Run the selected plugin over the manifest and return its host commands.

    Raises:
        BuildToolError: If command generation fails.
        KeyError: If the named plugin is not registered.
    """
    manifest = loaded.manifest
    plugin_name = plugin_name or manifest.plugin or "manifest"
    config = dict(manifest.config)
    if plugin_name == "manifest":
        config["commands"] = loaded.commands()

    environment = Environment.capture()
    plugin_cls = get_plugin(plugin_name)
    plugin = plugin_cls(
        config,
        environment=environment,
        settings=manifest.support_settings(dict(environment)),
    )

    context = loaded.context
    context.work_directory.mkdir(parents=True, exist_ok=True)
    target = loaded.target(target_name)
    logger.debug("Running plugin %s for target %s", plugin_name, target.name)
    return asyncio.run(plugin.create_build_commands(context, target))


def load_or_exit(manifest: Path) -> LoadedManifest:
    """Load a manifest, reporting problems and exiting with status 1."""
    try:
        return load_manifest(manifest)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
    except yaml.YAMLError as e:
        typer.echo(f"Error: Invalid YAML in {manifest}: {e}", err=True)
    except ValidationError as e:
        typer.echo(f"Error: Invalid manifest {manifest}:\n{e}", err=True)
    except (BuildToolError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(1)


def emit_or_exit(
    loaded: LoadedManifest,
    plugin_name: str | None,
    target_name: str | None,
) -> list[HostCommand]:
    """Emit commands, reporting failures and exiting with status 1."""
    try:
        return emit_commands(loaded, plugin_name, target_name)
    except KeyError as e:
        typer.echo(f"Error: {e.args[0]}", err=True)
    except BuildToolError as e:
        typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(1)


def plan_command(
    manifest: ManifestArgument,
    plugin: PluginOption = None,
    target: TargetOption = None,
) -> None:
    """Print the host commands a plugin emits for a manifest.

    Examples:
        bts plan manifest.yml
        bts plan manifest.yml --plugin local_target_demo --target Lib
    """
    loaded = load_or_exit(manifest)
    commands = emit_or_exit(loaded, plugin, target)
    typer.echo(json.dumps([c.to_dict() for c in commands], indent=2))
