"""Build tool support CLI entry point.

This module provides the main Typer application and entry point for the
`bts` CLI.

Usage:
    bts plan MANIFEST [options]     - Print the host commands for a manifest
    bts run MANIFEST [options]      - Execute the host commands for a manifest
    bts locate COMMAND [options]    - Resolve a command
    bts doctor [options]            - Run diagnostics
    bts version [options]           - Show version information
"""

import logging
import sys
from typing import Annotated

import structlog
import typer

from buildtoolsupport.cli.commands import doctor, locate, plan, run, version

app = typer.Typer(
    name="bts",
    help="Portable build tool plugin support",
    no_args_is_help=True,
)


@app.callback()
def configure_logging(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug diagnostics on stderr"),
    ] = False,
) -> None:
    """Portable build tool plugin support."""
    # Command output goes to stdout; diagnostics must not mix with it.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


app.command(name="plan")(plan.plan_command)
app.command(name="run")(run.run_command)
app.command(name="locate")(locate.locate_command)
app.command(name="doctor")(doctor.doctor_command)
app.command(name="version")(version.version_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
