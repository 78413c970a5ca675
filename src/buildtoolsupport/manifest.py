"""Plugin manifest models.

A manifest is a YAML file describing a package graph, the tools the host
declares, and optionally the commands a plugin should emit. The CLI uses it
to stand in for a real host.

Example manifest:
    package:
      name: Demo
      directory: .
      targets:
        - name: GenRsrc
          directory: Sources/GenRsrc
          source_files: [Sources/GenRsrc/main.py]
        - name: LibWithResource
          directory: Sources/LibWithResource
    tools:
      GenRsrc: .build/debug/GenRsrc
    work_directory: .build/plugins/work
    target: LibWithResource
    commands:
      - kind: build
        display_name: Echo
        executable: {kind: command, value: sh}
        arguments: ["-c", "echo hi > out.txt"]
        output_files: [out.txt]

Models:
    - ExecutableKind / ExecutableSpec
    - CommandKind / CommandSpec
    - TargetSpec / PackageSpec
    - PluginManifest

Functions:
    - load_manifest: Load and validate a manifest, resolving relative paths
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from buildtoolsupport.commands import (
    BuildCommand,
    Command,
    Executable,
    File,
    OnDemandCommand,
    Script,
    TargetInPackage,
    ToolchainCommand,
    UnconditionalCommand,
)
from buildtoolsupport.config import SupportSettings, read_yaml
from buildtoolsupport.context import Package, StaticPluginContext, Target
from buildtoolsupport.errors import ErrorCode, ResolutionError


class ExecutableKind(str, Enum):
    """Kinds of executable a manifest command can name."""

    TARGET = "target"
    FILE = "file"
    COMMAND = "command"
    SCRIPT = "script"
    TOOLCHAIN = "toolchain"


class ExecutableSpec(BaseModel):
    """An executable description.

    Attributes:
        kind: Which variant of Executable this is.
        value: Target name, file path, command name, script path or
            toolchain command name.
    """

    kind: ExecutableKind
    value: str = Field(..., min_length=1)

    def to_executable(self, base: Path) -> Executable:
        if self.kind is ExecutableKind.TARGET:
            return TargetInPackage(self.value)
        if self.kind is ExecutableKind.FILE:
            return File(base / self.value)
        if self.kind is ExecutableKind.COMMAND:
            return Command(self.value)
        if self.kind is ExecutableKind.SCRIPT:
            return Script(base / self.value)
        return ToolchainCommand(self.value)


class CommandKind(str, Enum):
    """Kinds of build command."""

    BUILD = "build"
    PREBUILD = "prebuild"


class CommandSpec(BaseModel):
    """A build command.

    Attributes:
        kind: ``build`` (on demand) or ``prebuild`` (unconditional).
        display_name: Shown in build logs.
        executable: What to run.
        arguments: Arguments following any implied by the executable.
        environment: Environment variables visible to the tool.
        input_files: Inputs of a build command.
        output_files: Outputs of a build command.
        output_files_directory: Output directory of a prebuild command.
    """

    kind: CommandKind = CommandKind.BUILD
    display_name: str | None = None
    executable: ExecutableSpec
    arguments: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)
    input_files: list[str] = Field(default_factory=list)
    output_files: list[str] = Field(default_factory=list)
    output_files_directory: str | None = None

    @model_validator(mode="after")
    def check_outputs_match_kind(self) -> "CommandSpec":
        """Build commands list outputs; prebuild commands name a directory."""
        if self.kind is CommandKind.PREBUILD:
            if self.output_files_directory is None:
                raise ValueError("prebuild commands require output_files_directory")
            if self.input_files or self.output_files:
                raise ValueError(
                    "prebuild commands cannot declare input_files or output_files"
                )
        elif self.output_files_directory is not None:
            raise ValueError("output_files_directory is only valid for prebuild commands")
        return self

    def to_command(self, base: Path) -> BuildCommand:
        executable = self.executable.to_executable(base)
        if self.kind is CommandKind.PREBUILD:
            return UnconditionalCommand(
                display_name=self.display_name,
                executable=executable,
                arguments=tuple(self.arguments),
                environment=dict(self.environment),
                output_files_directory=base / str(self.output_files_directory),
            )
        return OnDemandCommand(
            display_name=self.display_name,
            executable=executable,
            arguments=tuple(self.arguments),
            environment=dict(self.environment),
            input_files=tuple(base / p for p in self.input_files),
            output_files=tuple(base / p for p in self.output_files),
        )


class TargetSpec(BaseModel):
    """A target of a package.

    Attributes:
        name: Target name.
        directory: Source directory (defaults to ``Sources/<name>``).
        source_files: Source files; defaults to every file in ``directory``.
        dependencies: Names of targets this target depends on.
    """

    name: str = Field(..., min_length=1)
    directory: str | None = None
    source_files: list[str] | None = None
    dependencies: list[str] = Field(default_factory=list)


class PackageSpec(BaseModel):
    """A package and the packages it depends on."""

    name: str = Field(..., min_length=1)
    directory: str = "."
    targets: list[TargetSpec] = Field(default_factory=list)
    dependencies: list["PackageSpec"] = Field(default_factory=list)


class PluginManifest(BaseModel):
    """Root model of a manifest file.

    Attributes:
        version: Manifest schema version.
        package: The root package.
        tools: Declared tools, by name.
        work_directory: The plugin work directory.
        plugin: Name of a registered plugin to run; None runs ``commands``.
        target: Name of the target the plugin is applied to.
        config: Plugin-specific configuration.
        settings: Resolution settings.
        commands: Commands emitted when no registered plugin is named.
    """

    version: str = "1"
    package: PackageSpec
    tools: dict[str, str] = Field(default_factory=dict)
    work_directory: str = ".build/plugins/work"
    plugin: str | None = None
    target: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    commands: list[CommandSpec] = Field(default_factory=list)

    def support_settings(self, environment: dict[str, str] | None = None) -> SupportSettings:
        return SupportSettings.from_environment(environment or {}, **self.settings)


def _build_package(spec: PackageSpec, base: Path) -> Package:
    directory = (base / spec.directory).resolve()
    targets: dict[str, Target] = {}
    for target_spec in spec.targets:
        target_directory = directory / (
            target_spec.directory or f"Sources/{target_spec.name}"
        )
        if target_spec.source_files is None:
            sources = (
                sorted(p for p in target_directory.rglob("*") if p.is_file())
                if target_directory.is_dir()
                else []
            )
        else:
            sources = [directory / p for p in target_spec.source_files]
        targets[target_spec.name] = Target(
            name=target_spec.name,
            directory=target_directory,
            source_files=sources,
        )

    for target_spec in spec.targets:
        for dependency in target_spec.dependencies:
            if dependency not in targets:
                raise ResolutionError(
                    ErrorCode.CONFIG_INVALID,
                    f"Target {target_spec.name!r} depends on unknown target "
                    f"{dependency!r} in package {spec.name!r}",
                )
            targets[target_spec.name].dependencies.append(targets[dependency])

    return Package(
        name=spec.name,
        directory=directory,
        targets=list(targets.values()),
        dependencies=[_build_package(d, directory) for d in spec.dependencies],
    )


class LoadedManifest:
    """A validated manifest with its paths resolved.

    Attributes:
        manifest: The validated model.
        base_directory: Directory containing the manifest file.
        context: Host context described by the manifest.
    """

    def __init__(self, manifest: PluginManifest, base_directory: Path) -> None:
        self.manifest = manifest
        self.base_directory = base_directory
        package = _build_package(manifest.package, base_directory)
        self.context = StaticPluginContext(
            package=package,
            work_directory=(base_directory / manifest.work_directory).resolve(),
            tools={
                name: (base_directory / path).resolve()
                for name, path in manifest.tools.items()
            },
        )

    def target(self, name: str | None = None) -> Target:
        """Return the target the plugin is applied to.

        Raises:
            ResolutionError: If the target does not exist or none is named
                and the package has no targets.
        """
        name = name or self.manifest.target
        package = self.context.package
        if name is None:
            if not package.targets:
                raise ResolutionError(
                    ErrorCode.TARGET_NOT_FOUND,
                    f"Package {package.name!r} has no targets",
                )
            return package.targets[0]
        target = package.find_target(name)
        if target is None:
            raise ResolutionError(
                ErrorCode.TARGET_NOT_FOUND,
                f"No target named {name!r} in package {package.name!r}",
            )
        return target

    def commands(self) -> list[BuildCommand]:
        return [spec.to_command(self.base_directory) for spec in self.manifest.commands]


def load_manifest(path: str | Path) -> LoadedManifest:
    """Load and validate a manifest file.

    Relative paths in the manifest are resolved against its directory.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file contains invalid YAML.
        pydantic.ValidationError: If the manifest is invalid.
        ResolutionError: If the package graph is inconsistent.
    """
    path = Path(path)
    data = read_yaml(path)
    manifest = PluginManifest.model_validate(data)
    return LoadedManifest(manifest, path.resolve().parent)
