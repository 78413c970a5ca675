"""Doctor command.

This module provides the `bts doctor` command that diagnoses executable
resolution in the current environment.

Checks performed:
    1. The executable search path is set
    2. The active toolchain's bin directory can be identified
    3. The build tool used for reentrant builds resolves
    4. A shell for running scripts resolves
    5. A settings file named by the environment loads
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError

from buildtoolsupport.config import (
    REUSE_BUILD_OUTPUT_ENV,
    SETTINGS_PATH_ENV,
    SupportSettings,
    load_settings,
)
from buildtoolsupport.environment import Environment
from buildtoolsupport.errors import BuildToolError
from buildtoolsupport.locator import ExecutableLocator


@dataclass
class CheckResult:
    """Result of a diagnostic check.

    Attributes:
        name: Short name of the check.
        passed: Whether the check passed.
        message: Descriptive message about the result.
        suggestion: Optional suggestion for fixing failures.
    """

    name: str
    passed: bool
    message: str
    suggestion: str | None = None


def doctor_command(
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Fail when the toolchain directory cannot be identified",
        ),
    ] = False,
) -> None:
    """Diagnose executable resolution and suggest fixes."""
    typer.echo("Running diagnostics...\n")

    environment = Environment.capture()
    typer.echo(f"Platform: {environment.platform.name}")
    typer.echo(f"{REUSE_BUILD_OUTPUT_ENV}: {environment.flag(REUSE_BUILD_OUTPUT_ENV)}\n")

    checks: list[CheckResult] = []
    settings_check, settings = _check_settings(environment)
    if settings_check is not None:
        checks.append(settings_check)

    with tempfile.TemporaryDirectory() as scratch_root:
        locator = ExecutableLocator(
            environment, scratch_root=Path(scratch_root), settings=settings
        )
        checks.append(_check_search_path(environment))
        checks.append(_check_toolchain_directory(locator, strict))
        checks.append(_check_build_tool(locator, settings))
        checks.append(_check_shell(locator))

    _display_results(checks)

    if any(not check.passed for check in checks):
        raise typer.Exit(1)


def _check_settings(
    environment: Environment,
) -> tuple[CheckResult | None, SupportSettings]:
    """Load the settings file named by the environment, if any."""
    path = environment.get(SETTINGS_PATH_ENV)
    if not path:
        return None, SupportSettings.from_environment(environment)
    try:
        settings = load_settings(path, environment)
    except (FileNotFoundError, yaml.YAMLError, ValidationError, ValueError) as e:
        return (
            CheckResult(
                name="Settings file",
                passed=False,
                message=str(e),
                suggestion=f"Fix or unset {SETTINGS_PATH_ENV}.",
            ),
            SupportSettings.from_environment(environment),
        )
    return CheckResult(name="Settings file", passed=True, message=f"Loaded: {path}"), settings


def _check_search_path(environment: Environment) -> CheckResult:
    search_path = environment.search_path()
    if not search_path:
        return CheckResult(
            name="Search path",
            passed=False,
            message="PATH is empty",
            suggestion="Set PATH so that commands can be located.",
        )
    return CheckResult(
        name="Search path",
        passed=True,
        message=f"{len(search_path)} directories",
    )


def _check_toolchain_directory(
    locator: ExecutableLocator, strict: bool
) -> CheckResult:
    bin_directory = locator.toolchain_bin_directory()
    if bin_directory is not None:
        return CheckResult(
            name="Toolchain directory",
            passed=True,
            message=f"Found: {bin_directory}",
        )
    suffix = os.path.join(*locator.settings.toolchain_path_suffix)
    return CheckResult(
        name="Toolchain directory",
        passed=not strict,
        message=f"No search path entry ends with {suffix}; toolchain commands "
        "fall back to the full search path",
        suggestion="Run inside a plugin process or add the toolchain to PATH.",
    )


def _check_build_tool(
    locator: ExecutableLocator, settings: SupportSettings
) -> CheckResult:
    try:
        found = locator.toolchain_executable(settings.build_tool)
    except BuildToolError as e:
        return CheckResult(
            name="Build tool",
            passed=False,
            message=str(e),
            suggestion="Install the toolchain or set build_tool in the settings.",
        )
    return CheckResult(name="Build tool", passed=True, message=f"Found: {found}")


def _check_shell(locator: ExecutableLocator) -> CheckResult:
    command = "git" if locator.environment.platform.script_shell_beside_git else "bash"
    try:
        found = locator.locate(command)
    except BuildToolError as e:
        return CheckResult(
            name="Script shell",
            passed=False,
            message=str(e),
            suggestion=f"Install {command} to run script executables.",
        )
    return CheckResult(name="Script shell", passed=True, message=f"Found: {found}")


def _display_results(checks: list[CheckResult]) -> None:
    """Display check results in a human-readable format.

    Args:
        checks: List of CheckResults to display.
    """
    passed_count = 0
    failed_count = 0

    for check in checks:
        if check.passed:
            passed_count += 1
            prefix = "[PASS]"
        else:
            failed_count += 1
            prefix = "[FAIL]"

        typer.echo(f"{prefix} {check.name}: {check.message}")

        if check.suggestion and not check.passed:
            typer.echo(f"       Suggestion: {check.suggestion}")

    typer.echo()
    typer.echo(f"Summary: {passed_count} passed, {failed_count} errors")
