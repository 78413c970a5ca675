"""Build command descriptions.

A plugin describes its work with the portable types in this module; the
emitter translates them into the host's native command types, also defined
here.

Executables (what to run):
    - TargetInPackage: An executable target of the same package, by name
    - File: An executable file that exists before the build starts
    - Command: Found on the executable search path, by the name used in a shell
    - Script: A script compiled and run on the fly by the toolchain
    - ToolchainCommand: A tool shipped with the running build toolchain

Portable commands (what the plugin returns):
    - OnDemandCommand: Rerun when an output is missing or out of date
    - UnconditionalCommand: Rerun before every build

Host commands (what the host consumes):
    - HostBuildCommand
    - HostPrebuildCommand

Other:
    - Invocation: A resolved executable plus implied arguments and inputs
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class TargetInPackage:
    """The executable target in this package named ``name``."""

    name: str


@dataclass(frozen=True)
class File:
    """An executable file that exists before the build starts."""

    path: Path


@dataclass(frozen=True)
class Command:
    """An executable found in the environment's executable search path.

    ``name`` is what you'd type to invoke it in a shell (e.g. "find").
    """

    name: str


@dataclass(frozen=True)
class Script:
    """The executable produced by compiling the script at ``path``."""

    path: Path


@dataclass(frozen=True)
class ToolchainCommand:
    """An executable from the running build toolchain (e.g. "clang").

    Works portably as long as the plugin does not depend on a target with
    the same name as the command.
    """

    name: str


Executable = TargetInPackage | File | Command | Script | ToolchainCommand


@dataclass(frozen=True)
class Invocation:
    """A partial translation of an executable into host command inputs.

    Attributes:
        executable: The executable that will actually run.
        argument_prefix: Arguments that must precede the caller's.
        additional_sources: Files that must be build inputs so the command
            reruns when the tool itself changes.
    """

    executable: Path
    argument_prefix: tuple[str, ...] = ()
    additional_sources: frozenset[Path] = frozenset()


@dataclass(frozen=True)
class OnDemandCommand:
    """A command that runs when any of its output files are needed but out of date.

    An output file is out of date if it doesn't exist, or if any input
    file has changed since the command last ran.

    The output paths may depend on the input paths, but must not depend on
    the contents of any input file; use UnconditionalCommand for that.

    Attributes:
        display_name: Shown in build logs, if given.
        executable: The executable invoked to build the output files.
        arguments: Command-line arguments passed to the executable.
        environment: Environment variable assignments visible to the tool.
        input_files: Files on which the contents of the outputs may depend.
            Any paths passed as arguments should usually be listed here too.
        output_files: Files generated or updated by the tool.
    """

    display_name: str | None
    executable: Executable
    arguments: tuple[str, ...] = ()
    environment: dict[str, str] = field(default_factory=dict)
    input_files: tuple[Path, ...] = ()
    output_files: tuple[Path, ...] = ()


@dataclass(frozen=True)
class UnconditionalCommand:
    """A command that runs before every build.

    Since its outputs cannot be known in advance, every file found in
    ``output_files_directory`` after it runs is treated as an output.

    Attributes:
        display_name: Shown in build logs, if given.
        executable: The executable invoked to build the output files.
        arguments: Command-line arguments passed to the executable.
        environment: Environment variable assignments visible to the tool.
        output_files_directory: Directory into which the tool writes.
    """

    display_name: str | None
    executable: Executable
    output_files_directory: Path
    arguments: tuple[str, ...] = ()
    environment: dict[str, str] = field(default_factory=dict)


BuildCommand = OnDemandCommand | UnconditionalCommand


def _paths(paths: tuple[Path, ...]) -> list[str]:
    return [os.fspath(p) for p in paths]


@dataclass(frozen=True)
class HostBuildCommand:
    """The host's on-demand command."""

    display_name: str | None
    executable: Path
    arguments: tuple[str, ...]
    environment: dict[str, str]
    input_files: tuple[Path, ...]
    output_files: tuple[Path, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "build",
            "display_name": self.display_name,
            "executable": os.fspath(self.executable),
            "arguments": list(self.arguments),
            "environment": dict(self.environment),
            "input_files": _paths(self.input_files),
            "output_files": _paths(self.output_files),
        }


@dataclass(frozen=True)
class HostPrebuildCommand:
    """The host's unconditional command."""

    display_name: str | None
    executable: Path
    arguments: tuple[str, ...]
    environment: dict[str, str]
    output_files_directory: Path

    def discovered_outputs(self) -> list[Path]:
        """Return the files currently in the output directory.

        The host calls this after the command has run to learn its outputs.
        """
        directory = Path(self.output_files_directory)
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.rglob("*") if p.is_file())

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "prebuild",
            "display_name": self.display_name,
            "executable": os.fspath(self.executable),
            "arguments": list(self.arguments),
            "environment": dict(self.environment),
            "output_files_directory": os.fspath(self.output_files_directory),
        }


HostCommand = HostBuildCommand | HostPrebuildCommand
