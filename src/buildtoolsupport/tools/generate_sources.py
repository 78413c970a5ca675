"""Generates source files from input files.

Usage:
    generate-sources -o <output-directory> <input-file>...

Each input produces ``<output-directory>/<stem>`` whose first line comments
out the input's first line.
"""

from pathlib import Path
from typing import Annotated

import typer

COMMENT_PREFIX = "// Comment out the first line, which was "

app = typer.Typer(add_completion=False)


@app.command()
def generate_sources_command(
    inputs: Annotated[list[Path], typer.Argument(help="Input files")],
    output_directory: Annotated[
        Path,
        typer.Option("-o", "--output-directory", help="Where to write sources"),
    ],
) -> None:
    """Generate one source file per input file."""
    output_directory.mkdir(parents=True, exist_ok=True)
    for input_file in inputs:
        output = output_directory / input_file.with_suffix("").name
        with input_file.open(encoding="utf-8", newline="") as f:
            text = f.read()
        with output.open("w", encoding="utf-8", newline="") as f:
            f.write(COMMENT_PREFIX + text)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
