"""Platform path resolution.

Paths supplied by the host build system are not always usable as-is: on
Windows their string form may not be found by file APIs until it has been
repaired. Everything the core hands to the OS or to a child process goes
through ``repair()`` first.

Functions:
    - repair: Canonical absolute string form of a path
    - sans_suffix: Strip trailing path components
    - shell_quoted: Quote a path as a shell redirection target

Classes:
    - PlatformPath: A repaired path that composes like ``pathlib.Path``
"""

import os
import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from buildtoolsupport.platform import Platform, current_platform

StrPath = str | os.PathLike[str]


def repair(path: StrPath, platform: Platform | None = None) -> str:
    """Return the canonical absolute string representation of ``path``.

    Repairing an already repaired path returns it unchanged.

    Args:
        path: The path in whatever form the host supplied it.
        platform: Platform to repair for (defaults to the running one).

    Returns:
        A string that can be passed directly to OS file APIs.

    Raises:
        ResolutionError: If the platform's native resolution fails.
    """
    platform = platform or current_platform()
    return platform.repair_path(os.fspath(path))


def sans_suffix(path: Path, components: Sequence[str]) -> Path | None:
    """Return ``path`` without the trailing ``components``.

    Returns:
        The remaining prefix, or None if ``components`` is not a suffix of
        ``path.parts``.

    Example:
        >>> sans_suffix(Path("/tc/usr/lib/swift"), ["lib", "swift"])
        PosixPath('/tc/usr')
    """
    result = path
    for component in reversed(components):
        if result.name != component:
            return None
        result = result.parent
    return result


def shell_quoted(path: StrPath, platform: Platform | None = None) -> str:
    """Quote ``path`` for use as an output redirection target in a shell.

    POSIX paths are quoted for ``sh``; on Windows the path is wrapped in
    double quotes for ``cmd``.
    """
    platform = platform or current_platform()
    inner = repair(path, platform)
    if platform.name == "windows":
        return f'"{inner}"'
    return shlex.quote(inner)


@dataclass(frozen=True)
class PlatformPath:
    """A repaired path, round-trippable back into host APIs.

    Attributes:
        platform_string: The representation used by the native filesystem.
    """

    platform_string: str
    platform: Platform = field(
        default_factory=current_platform, compare=False, repr=False
    )

    @classmethod
    def from_host(
        cls, value: StrPath, platform: Platform | None = None
    ) -> "PlatformPath":
        """Repair a host-supplied path."""
        platform = platform or current_platform()
        return cls(repair(value, platform), platform)

    @property
    def path(self) -> Path:
        return Path(self.platform_string)

    @property
    def url(self) -> str:
        """A ``file://`` URL referring to the same location."""
        return self.path.as_uri()

    @property
    def name(self) -> str:
        return self.path.name

    def __truediv__(self, component: StrPath) -> "PlatformPath":
        return PlatformPath.from_host(self.path / component, self.platform)

    def __fspath__(self) -> str:
        return self.platform_string

    def __str__(self) -> str:
        return self.platform_string
