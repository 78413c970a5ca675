"""Host build system capabilities available to a plugin.

The host is modeled as an injected ``PluginContext`` so that the core can
run against a real host adapter or against ``StaticPluginContext`` in tests
and in the CLI.

Classes:
    - Target: A named buildable unit with sources and target dependencies
    - Package: A project with targets and package dependencies
    - PluginContext: Abstract host interface
    - StaticPluginContext: In-memory host built from explicit values
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from buildtoolsupport.errors import ErrorCode, ResolutionError


@dataclass(eq=False)
class Target:
    """A named buildable unit within a package.

    Targets compare by identity: two packages may each contain a target
    with the same name.

    Attributes:
        name: Target name, unique within its package.
        directory: Directory holding the target's sources.
        source_files: Source files compiled into the target.
        dependencies: Targets this target depends on directly.
    """

    name: str
    directory: Path
    source_files: list[Path] = field(default_factory=list)
    dependencies: list["Target"] = field(default_factory=list)

    def recursive_target_dependencies(self) -> list["Target"]:
        """Return every target this one depends on, each exactly once."""
        result: list[Target] = []
        visited: set[int] = {id(self)}
        stack = list(reversed(self.dependencies))
        while stack:
            target = stack.pop()
            if id(target) in visited:
                continue
            visited.add(id(target))
            result.append(target)
            stack.extend(reversed(target.dependencies))
        return result


@dataclass(eq=False)
class Package:
    """A project: its targets and the packages it depends on.

    Attributes:
        name: Package name.
        directory: Root directory of the package.
        targets: Targets defined by the package.
        dependencies: Packages this package depends on.
    """

    name: str
    directory: Path
    targets: list[Target] = field(default_factory=list)
    dependencies: list["Package"] = field(default_factory=list)

    def all_packages(self) -> Iterator["Package"]:
        """Yield this package and every package it transitively depends on."""
        seen: set[int] = set()
        stack: list[Package] = [self]
        while stack:
            package = stack.pop()
            if id(package) in seen:
                continue
            seen.add(id(package))
            yield package
            stack.extend(reversed(package.dependencies))

    def find_target(self, name: str) -> Target | None:
        """Find a target named ``name`` anywhere in the package graph."""
        for package in self.all_packages():
            for target in package.targets:
                if target.name == name:
                    return target
        return None


class PluginContext(ABC):
    """What the host build system offers a plugin while it generates commands."""

    @property
    @abstractmethod
    def work_directory(self) -> Path:
        """A directory private to the plugin, for outputs and scratch space."""
        ...

    @property
    @abstractmethod
    def package(self) -> Package:
        """The package to which the plugin is being applied."""
        ...

    @abstractmethod
    def tool_path(self, name: str) -> Path:
        """Return the path of the declared tool ``name``.

        Raises:
            ResolutionError: If the host knows no such tool.
        """
        ...

    def target_sources(self, name: str) -> list[Path]:
        """Return the source files of every target named ``name``.

        Every package in the graph is searched, since there is no way of
        knowing which package defined the target.

        Raises:
            ResolutionError: If no such target exists.
        """
        sources = (
            path for target in self._require_targets(name) for path in target.source_files
        )
        return list(dict.fromkeys(sources))

    def target_dependencies(self, name: str) -> list[Target]:
        """Return the targets any target named ``name`` transitively depends on.

        Raises:
            ResolutionError: If no such target exists.
        """
        result: dict[int, Target] = {}
        for target in self._require_targets(name):
            for dependency in target.recursive_target_dependencies():
                result.setdefault(id(dependency), dependency)
        return list(result.values())

    def source_dependencies(self, name: str) -> set[Path]:
        """Return all the source files on which the target ``name`` depends.

        Raises:
            ResolutionError: If no such target exists.
        """
        result = set(self.target_sources(name))
        for dependency in self.target_dependencies(name):
            result.update(dependency.source_files)
        return result

    def _require_targets(self, name: str) -> list[Target]:
        targets = [
            target
            for package in self.package.all_packages()
            for target in package.targets
            if target.name == name
        ]
        if not targets:
            raise ResolutionError(
                ErrorCode.TARGET_NOT_FOUND,
                f"No target named {name!r} in the dependency graph of "
                f"package {self.package.name!r}",
            )
        return targets


class StaticPluginContext(PluginContext):
    """A host context built from explicit values.

    Example:
        context = StaticPluginContext(
            package=Package("Demo", Path("/src/demo")),
            work_directory=Path("/tmp/work"),
            tools={"GenRsrc": Path("/build/debug/GenRsrc")},
        )
    """

    def __init__(
        self,
        package: Package,
        work_directory: Path,
        tools: Mapping[str, Path] | None = None,
    ) -> None:
        self._package = package
        self._work_directory = Path(work_directory)
        self._tools = {name: Path(path) for name, path in (tools or {}).items()}

    @property
    def work_directory(self) -> Path:
        return self._work_directory

    @property
    def package(self) -> Package:
        return self._package

    def tool_path(self, name: str) -> Path:
        try:
            return self._tools[name]
        except KeyError:
            raise ResolutionError(
                ErrorCode.TOOL_NOT_FOUND,
                f"No tool named {name!r} is available to the plugin",
            ) from None
