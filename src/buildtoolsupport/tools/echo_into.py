"""Writes its first argument into the file named by its second."""

from pathlib import Path
from typing import Annotated

import typer

app = typer.Typer(add_completion=False)


@app.command()
def echo_into_command(
    text: Annotated[str, typer.Argument(help="Text to write")],
    destination: Annotated[Path, typer.Argument(help="File to write it into")],
) -> None:
    """Echo TEXT into DESTINATION."""
    typer.echo(f"Echoing {text!r} into {str(destination)!r}")
    destination.write_text(text, encoding="utf-8")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
