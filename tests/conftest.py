"""Shared fixtures for buildtoolsupport tests."""

import os
import stat
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

from buildtoolsupport.context import Package, StaticPluginContext, Target
from buildtoolsupport.environment import Environment
from buildtoolsupport.platform import PosixPlatform


def write_executable(path: Path, content: str = "#!/bin/sh\nexit 0\n") -> Path:
    """Create an executable file at ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by the CLI."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_executable() -> Callable[..., Path]:
    return write_executable


@pytest.fixture
def posix_environment() -> Callable[..., Environment]:
    """Build a POSIX environment whose PATH holds the given directories."""

    def factory(*directories: Path, **variables: str) -> Environment:
        values = dict(variables)
        values["PATH"] = os.pathsep.join(os.fspath(d) for d in directories)
        return Environment(values, PosixPlatform())

    return factory


@pytest.fixture
def demo_package(tmp_path: Path) -> Package:
    """A package with a generator tool, a library using it, and a dependency."""
    root = tmp_path / "Demo"
    dep_root = tmp_path / "Dep"

    core = Target(
        name="Core",
        directory=dep_root / "Sources" / "Core",
        source_files=[dep_root / "Sources" / "Core" / "core.swift"],
    )
    dep = Package(name="Dep", directory=dep_root, targets=[core])

    helpers = Target(
        name="Helpers",
        directory=root / "Sources" / "Helpers",
        source_files=[root / "Sources" / "Helpers" / "helpers.swift"],
        dependencies=[core],
    )
    generator = Target(
        name="GenRsrc",
        directory=root / "Sources" / "GenRsrc",
        source_files=[root / "Sources" / "GenRsrc" / "main.swift"],
        dependencies=[helpers],
    )
    library = Target(
        name="LibWithResource",
        directory=root / "Sources" / "LibWithResource",
        source_files=[root / "Sources" / "LibWithResource" / "lib.swift"],
    )
    return Package(
        name="Demo",
        directory=root,
        targets=[generator, helpers, library],
        dependencies=[dep],
    )


@pytest.fixture
def demo_context(tmp_path: Path, demo_package: Package) -> StaticPluginContext:
    work = tmp_path / "work"
    work.mkdir()
    return StaticPluginContext(
        package=demo_package,
        work_directory=work,
        tools={"GenRsrc": tmp_path / "build" / "debug" / "GenRsrc"},
    )
