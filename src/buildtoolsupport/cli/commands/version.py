"""Version command.

This module provides the `bts version` command that displays version information.
"""

import sys
from typing import Annotated

import typer


def get_version() -> str:
    """Get the installed buildtoolsupport version.

    Returns:
        Version string or 'unknown' if not found.
    """
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("buildtoolsupport")
    except PackageNotFoundError:
        return "unknown"


def version_command(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show detailed version information",
        ),
    ] = False,
) -> None:
    """Show version information."""
    from importlib.metadata import PackageNotFoundError, version

    current = get_version()

    if not verbose:
        typer.echo(f"buildtoolsupport {current}")
        return

    typer.echo(f"buildtoolsupport version: {current}")
    typer.echo(f"Python version: {sys.version}")
    typer.echo(f"Python executable: {sys.executable}")

    typer.echo("\nDependencies:")
    for dep in ["pydantic", "pyyaml", "structlog", "typer"]:
        try:
            typer.echo(f"  {dep}: {version(dep)}")
        except PackageNotFoundError:
            typer.echo(f"  {dep}: not found")
