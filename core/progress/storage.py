"""Key-value blob storage for the persisted progress document."""

import os
from abc import ABC, abstractmethod
from pathlib import Path


class BlobStore(ABC):
    """Abstract store of opaque text blobs under string keys."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get the blob stored under a key."""
        ...

    @abstractmethod
    def set(self, key: str, blob: str) -> None:
        """Store a blob, replacing any previous one."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a blob; missing keys are ignored."""
        ...

    def exists(self, key: str) -> bool:
        """Check if a blob exists."""
        return self.get(key) is not None


class InMemoryBlobStore(BlobStore):
    """In-memory store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._blobs.get(key)

    def set(self, key: str, blob: str) -> None:
        self._blobs[key] = blob

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)


class FileBlobStore(BlobStore):
    """One file per key inside a data directory on the local device."""

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        """Get the file path for a key."""
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, blob: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write next to the target, then swap, so a crash never leaves half a file
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(blob, encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
