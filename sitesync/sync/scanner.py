"""Directory scanning utilities for sync operations."""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ..exceptions import DirectoryNotFoundError


def is_hidden_path(path: str) -> bool:
    """Check whether any component of a relative path is hidden.

    A component is hidden when it starts with a dot. A file inside a
    hidden directory is hidden too.

    Args:
        path: Relative path using forward slashes

    Returns:
        True if any path component starts with "."

    Examples:
        >>> is_hidden_path("css/site.css")
        False
        >>> is_hidden_path(".well-known/security.txt")
        True
        >>> is_hidden_path("assets/.cache/x.png")
        True
    """
    return any(part.startswith(".") for part in path.split("/") if part)


@dataclass(frozen=True)
class LocalFile:
    """Represents a local file eligible for upload."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes); also the remote object name"""


class DirectoryScanner:
    """Scans a directory tree for files to sync, skipping hidden entries.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> files = list(scanner.scan_local(Path("/var/www/html")))
        >>> [f.relative_path for f in files]
        ['css/site.css', 'index.html']
    """

    def scan_local(self, directory: Path) -> Iterator[LocalFile]:
        """Recursively scan a local directory.

        The root is validated immediately; the files themselves are
        produced lazily, sorted by name within each directory. An
        unreadable subdirectory raises while iterating, so a caller that
        consumes the whole iterator never sees a partial tree.

        Args:
            directory: Root directory to scan

        Returns:
            Iterator of LocalFile objects

        Raises:
            DirectoryNotFoundError: If the directory is missing, is not a
                directory, or it (or any non-hidden subdirectory) cannot
                be read
        """
        if not directory.exists():
            raise DirectoryNotFoundError(str(directory))
        if not directory.is_dir():
            raise DirectoryNotFoundError(str(directory), "is not a directory")

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise DirectoryNotFoundError(
                str(directory), f"cannot be read: {e.strerror or e}"
            ) from e

        return self._walk(entries, directory)

    def _walk(self, entries: list[Path], base_path: Path) -> Iterator[LocalFile]:
        for item in entries:
            # Use as_posix() to ensure forward slashes on all platforms
            relative_path = item.relative_to(base_path).as_posix()
            if is_hidden_path(relative_path):
                continue

            if item.is_dir():
                try:
                    children = sorted(item.iterdir())
                except OSError as e:
                    # Never yield a partial tree
                    raise DirectoryNotFoundError(
                        str(item), f"cannot be read: {e.strerror or e}"
                    ) from e
                yield from self._walk(children, base_path)
            elif item.is_file():
                yield LocalFile(path=item, relative_path=relative_path)
