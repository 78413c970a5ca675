"""Scratch directories.

Scratch directories are private to one call, so collisions are avoided by
random naming with a bounded number of retries rather than by locking.
"""

import contextlib
import shutil
import uuid
from collections.abc import Iterator
from pathlib import Path

import structlog

from buildtoolsupport.errors import ScratchDirectoryError

logger = structlog.get_logger()

DEFAULT_ATTEMPTS = 10


def make_scratch_directory(root: Path, attempts: int = DEFAULT_ATTEMPTS) -> Path:
    """Create a new, empty, uniquely named directory inside ``root``.

    Args:
        root: Existing directory in which to create the scratch directory.
        attempts: Number of random names to try before giving up.

    Returns:
        The path of the created directory.

    Raises:
        ScratchDirectoryError: If every attempt failed.
    """
    candidate: Path | None = None
    last_error: OSError | None = None
    for _ in range(attempts):
        candidate = Path(root) / uuid.uuid4().hex
        try:
            candidate.mkdir()
            return candidate
        except OSError as e:
            last_error = e

    raise ScratchDirectoryError(
        f"Couldn't create scratch directory after {attempts} tries\n"
        f"  last attempt at: {candidate}\n"
        f"  error: {last_error}",
        cause=last_error,
    )


def remove_scratch_directory(directory: Path) -> None:
    """Remove ``directory`` and its contents, ignoring failures."""
    try:
        shutil.rmtree(directory)
    except OSError as e:
        logger.debug(
            "scratch_directory_cleanup_failed",
            path=str(directory),
            error=str(e),
        )


@contextlib.contextmanager
def scratch_directory(
    root: Path, attempts: int = DEFAULT_ATTEMPTS
) -> Iterator[Path]:
    """Yield a fresh scratch directory, removing it afterwards."""
    directory = make_scratch_directory(root, attempts)
    try:
        yield directory
    finally:
        remove_scratch_directory(directory)
