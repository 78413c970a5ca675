"""Resource generator used as an executable target by the demo plugins.

Usage:
    generate-resource <input-file>... <output-directory>

Each input produces ``<output-directory>/<stem>.out`` holding the input's
text followed by a processing marker.
"""

import sys
from pathlib import Path
from typing import Annotated

import typer

PROCESSED_MARKER = "\n# PROCESSED!\n"

app = typer.Typer(add_completion=False)


def output_path(input_file: Path, output_directory: Path) -> Path:
    """Return where the resource generated from ``input_file`` is written."""
    return output_directory / input_file.with_suffix(".out").name


def generate_resources(inputs: list[Path], output_directory: Path) -> list[Path]:
    """Write one processed resource per input and return the written paths."""
    outputs = []
    for input_file in inputs:
        output = output_path(input_file, output_directory)
        with input_file.open(encoding="utf-8", newline="") as f:
            text = f.read()
        with output.open("w", encoding="utf-8", newline="") as f:
            f.write(text + PROCESSED_MARKER)
        outputs.append(output)
    return outputs


@app.command()
def generate_resource_command(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Input files followed by the output directory"),
    ],
) -> None:
    """Generate processed resources from input files."""
    # Log our invocation for diagnostic purposes
    typer.echo(f"GenerateResource invocation: {sys.argv}")

    if len(paths) < 2:
        typer.echo("Usage: generate-resource <input-file>... <output-directory>", err=True)
        raise typer.Exit(2)

    *inputs, output_directory = paths
    output_directory.mkdir(parents=True, exist_ok=True)
    generate_resources(inputs, output_directory)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
