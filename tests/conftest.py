"""Shared fixtures for SiteSync tests."""

import threading
from pathlib import Path
from typing import BinaryIO, Optional

import pytest

from sitesync.exceptions import ListingFailedError
from sitesync.output import OutputFormatter
from sitesync.storage import Ok, StoreResult


class FakeObjectStore:
    """In-memory ObjectStoreClient that records calls and injects failures."""

    def __init__(self, objects: Optional[dict[str, bytes]] = None):
        self.objects: dict[str, bytes] = dict(objects or {})
        self.content_types: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.put_failures: dict[str, StoreResult] = {}
        self.delete_failures: dict[str, StoreResult] = {}
        self.list_error: Optional[ListingFailedError] = None
        self.closed = False
        self._lock = threading.Lock()

    def _log(self, op: str, name: str) -> None:
        with self._lock:
            self.calls.append((op, name))

    def calls_for(self, op: str) -> list[str]:
        return [name for call_op, name in self.calls if call_op == op]

    def list(self, container: str) -> list[str]:
        self._log("list", container)
        if self.list_error is not None:
            raise self.list_error
        return list(self.objects)

    def put(
        self, container: str, name: str, stream: BinaryIO, content_type: str
    ) -> StoreResult:
        self._log("put", name)
        if name in self.put_failures:
            return self.put_failures[name]
        data = stream.read()
        with self._lock:
            self.objects[name] = data
            self.content_types[name] = content_type
        return Ok()

    def delete(self, container: str, name: str) -> StoreResult:
        self._log("delete", name)
        if name in self.delete_failures:
            return self.delete_failures[name]
        with self._lock:
            self.objects.pop(name, None)
        return Ok()

    def close(self) -> None:
        self.closed = True


def _make_tree(root: Path, files: dict[str, str]) -> Path:
    for relative_path, content in files.items():
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def make_tree():
    """Provide a helper that writes files (relative path -> content) under a root."""
    return _make_tree


@pytest.fixture
def store():
    """Provide an empty in-memory object store."""
    return FakeObjectStore()


@pytest.fixture
def quiet_output():
    """Provide an output formatter that prints nothing but errors."""
    return OutputFormatter(quiet=True)
