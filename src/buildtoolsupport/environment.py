"""Read-only snapshot of process environment variables.

The locator never reads ``os.environ`` directly; it is handed an
``Environment`` taken once when a plugin starts generating commands.
"""

import os
from collections.abc import Iterator, Mapping
from pathlib import Path

from buildtoolsupport.platform import Platform, current_platform

SearchPath = tuple[Path, ...]


class Environment(Mapping[str, str]):
    """An immutable view of environment variables.

    On platforms where variable names are case-insensitive, lookups ignore
    case (``env["Path"]`` and ``env["PATH"]`` are the same variable), while
    iteration still yields the original spelling of each name.

    Example:
        env = Environment.capture()
        for directory in env.search_path():
            ...
    """

    def __init__(
        self,
        variables: Mapping[str, str],
        platform: Platform | None = None,
    ) -> None:
        self._platform = platform or current_platform()
        self._variables = dict(variables)
        self._names: dict[str, str] = {
            self._fold(name): name for name in self._variables
        }

    @classmethod
    def capture(cls, platform: Platform | None = None) -> "Environment":
        """Snapshot the environment of the running process."""
        return cls(os.environ, platform)

    @property
    def platform(self) -> Platform:
        return self._platform

    def _fold(self, name: str) -> str:
        if self._platform.case_insensitive_environment:
            return name.upper()
        return name

    def __getitem__(self, name: str) -> str:
        actual = self._names.get(self._fold(name))
        if actual is None:
            raise KeyError(name)
        return self._variables[actual]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def search_path(self) -> SearchPath:
        """The directories searched for commands having no directory part."""
        raw = self.get("PATH", "")
        return tuple(
            Path(entry)
            for entry in raw.split(self._platform.path_list_separator)
            if entry
        )

    def with_search_path(self, search_path: SearchPath) -> dict[str, str]:
        """Return a copy of the variables with ``PATH`` replaced.

        Every spelling of the variable is dropped first so that the child
        process sees exactly one definition. Windows spells it ``Path``.
        """
        folded = self._fold("PATH")
        result = {
            name: value
            for name, value in self._variables.items()
            if self._fold(name) != folded
        }
        name = "Path" if self._platform.case_insensitive_environment else "PATH"
        result[name] = self._platform.path_list_separator.join(
            os.fspath(entry) for entry in search_path
        )
        return result

    def flag(self, name: str) -> bool:
        """Interpret the variable ``name`` as a boolean switch."""
        return self.get(name, "").strip().lower() in {"1", "true", "yes", "on"}
