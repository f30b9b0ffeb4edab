"""Key-value blob storage used to persist progress snapshots.

Backends only move bytes around. They make no transactional promises and do
not validate content; ``questline.utils.integrity`` does that on load.
"""
from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Dict, Protocol


class BlobStore(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBlobStore:
    """Process-local store, handy for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._blobs[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._blobs)


class FileBlobStore:
    """One file per key inside ``root``. File names are hashed keys."""

    def __init__(self, root: Path | str | None = None) -> None:
        self._root = Path(root) if root is not None else self._default_root()

    @staticmethod
    def _default_root() -> Path:
        return Path(__file__).resolve().parents[3] / "data"

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self._root / f"{digest}.json"

    def get(self, key: str) -> bytes | None:
        try:
            return self._path_for(key).read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: bytes) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(value)
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            pass
