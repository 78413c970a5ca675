"""Locate command.

This module provides the `bts locate` command, which prints the executable a
command name resolves to.
"""

import tempfile
from pathlib import Path
from typing import Annotated

import typer

from buildtoolsupport.config import SupportSettings
from buildtoolsupport.environment import Environment
from buildtoolsupport.errors import BuildToolError
from buildtoolsupport.locator import ExecutableLocator


def locate_command(
    command: Annotated[str, typer.Argument(help="Command name, as typed in a shell")],
    toolchain: Annotated[
        bool,
        typer.Option(
            "--toolchain",
            help="Resolve as a command of the active build toolchain",
        ),
    ] = False,
) -> None:
    """Print the executable that COMMAND resolves to."""
    environment = Environment.capture()
    with tempfile.TemporaryDirectory() as scratch_root:
        locator = ExecutableLocator(
            environment,
            scratch_root=Path(scratch_root),
            settings=SupportSettings.from_environment(environment),
        )
        try:
            if toolchain:
                found = locator.toolchain_executable(command)
            else:
                found = locator.locate(command)
        except BuildToolError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None

    typer.echo(str(found))
