"""Settings models and utilities.

This module provides Pydantic models for build tool support settings,
loadable from YAML files with support for environment variable expansion.

Models:
    - SupportSettings: Knobs for executable resolution and reentrant builds

Functions:
    - expand_env_vars: Expand ${VAR} patterns in strings
    - expand_env_vars_in_dict: Recursively expand env vars in nested dicts
    - load_settings: Load and validate settings from a YAML file
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

# When set, reentrant builds of package targets reuse the default build
# output (``--skip-build``) instead of an isolated scratch path.
REUSE_BUILD_OUTPUT_ENV = "BUILDTOOLSUPPORT_REUSE_BUILD_OUTPUT"

# Optional path of a settings file consulted by plugins.
SETTINGS_PATH_ENV = "BUILDTOOLSUPPORT_SETTINGS"

# The directory, relative to the toolchain root, that the host adds to the
# executable search path of plugin processes.
DEFAULT_TOOLCHAIN_PATH_SUFFIX = ["lib", "swift", "pm", "PluginAPI"]

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class SupportSettings(BaseModel):
    """Settings for executable resolution.

    Attributes:
        build_tool: Name of the host build tool inside the toolchain's bin
            directory, used for reentrant builds.
        script_compiler: Command used to compile scripts. None selects the
            platform default.
        toolchain_path_suffix: Trailing path components identifying the
            search path entry injected by the host for plugin support.
        reuse_build_output: Reuse the default build output for reentrant
            builds instead of an isolated scratch path.
        reentrant_target_builds: Force (True) or forbid (False) reentrant
            builds of package targets. None selects the platform default.
        scratch_attempts: Number of random names tried when creating a
            scratch directory.
    """

    build_tool: str = "swift"
    script_compiler: str | None = None
    toolchain_path_suffix: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TOOLCHAIN_PATH_SUFFIX),
        min_length=1,
    )
    reuse_build_output: bool = False
    reentrant_target_builds: bool | None = None
    scratch_attempts: int = Field(default=10, ge=1)

    @classmethod
    def from_environment(
        cls,
        environment: Mapping[str, str],
        **overrides: Any,
    ) -> "SupportSettings":
        """Create settings, honoring the override flag in ``environment``.

        Args:
            environment: Environment variables to consult.
            **overrides: Explicit field values, which take precedence.

        Returns:
            Validated SupportSettings instance.
        """
        data: dict[str, Any] = {}
        flag = environment.get(REUSE_BUILD_OUTPUT_ENV, "")
        if flag.strip().lower() in _TRUE_VALUES:
            data["reuse_build_output"] = True
        data.update(overrides)
        return cls.model_validate(data)


# Environment variable expansion pattern: ${VAR_NAME}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str, environment: Mapping[str, str] | None = None) -> str:
    """Expand ${VAR} patterns with environment variables.

    Args:
        value: String potentially containing ${VAR} patterns.
        environment: Variables to expand from (defaults to the process
            environment).

    Returns:
        String with all ${VAR} patterns replaced with environment variable values.

    Raises:
        ValueError: If a referenced environment variable is not set.

    Example:
        >>> os.environ["TOOLCHAIN"] = "/opt/swift"
        >>> expand_env_vars("${TOOLCHAIN}/usr/bin")
        "/opt/swift/usr/bin"
    """
    if environment is None:
        environment = os.environ

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = environment.get(var_name)
        if env_value is None:
            raise ValueError(f"Environment variable '{var_name}' not set")
        return env_value

    return _ENV_VAR_PATTERN.sub(replacer, value)


def expand_env_vars_in_dict(
    data: dict[str, Any],
    environment: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Recursively expand environment variables in a nested dictionary.

    Args:
        data: Dictionary potentially containing ${VAR} patterns in string values.
        environment: Variables to expand from (defaults to the process
            environment).

    Returns:
        New dictionary with all ${VAR} patterns expanded.

    Raises:
        ValueError: If a referenced environment variable is not set.
    """
    result: dict[str, Any] = {}

    for key, value in data.items():
        if isinstance(value, str):
            result[key] = expand_env_vars(value, environment)
        elif isinstance(value, dict):
            result[key] = expand_env_vars_in_dict(value, environment)
        elif isinstance(value, list):
            result[key] = [_expand_item(item, environment) for item in value]
        else:
            result[key] = value

    return result


def _expand_item(item: Any, environment: Mapping[str, str] | None) -> Any:
    if isinstance(item, str):
        return expand_env_vars(item, environment)
    if isinstance(item, dict):
        return expand_env_vars_in_dict(item, environment)
    return item


def read_yaml(
    path: str | Path,
    environment: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Read a YAML mapping from ``path`` with environment variables expanded.

    Variables come from ``environment`` when given, otherwise from the
    process environment.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file contains invalid YAML.
        ValueError: If the document is not a mapping or expansion fails.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with path.open() as f:
        data = yaml.safe_load(f)

    # Handle empty file
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top level of {path}")

    return expand_env_vars_in_dict(data, environment)


def load_settings(
    path: str | Path,
    environment: Mapping[str, str] | None = None,
) -> SupportSettings:
    """Load and validate settings from a YAML file.

    Performs environment variable expansion on all string values before
    validation. Values in the file take precedence over the override flag.

    Args:
        path: Path to the settings file.
        environment: Environment used for variable expansion and for the
            override flag (defaults to the process environment).

    Returns:
        Validated SupportSettings instance.

    Raises:
        FileNotFoundError: If the settings file does not exist.
        yaml.YAMLError: If the file contains invalid YAML.
        pydantic.ValidationError: If the configuration is invalid.
        ValueError: If environment variable expansion fails.
    """
    if environment is None:
        environment = os.environ
    data = read_yaml(path, environment)
    return SupportSettings.from_environment(environment, **data)
