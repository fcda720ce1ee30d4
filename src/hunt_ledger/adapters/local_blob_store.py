"""Filesystem-backed photo blob store."""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO

from hunt_ledger.domain.submissions import BlobInfo
from hunt_ledger.errors import NotFound, StorageError
from hunt_ledger.identifiers import validate_blob_ref
from hunt_ledger.services.blobs import BlobStore, new_blob_ref

_CHUNK_SIZE = 64 * 1024


@dataclass
class LocalBlobStore(BlobStore):
    """Stores each photo as a flat file named by its reference."""

    directory: Path

    @classmethod
    def create(cls, directory: str | Path) -> "LocalBlobStore":
        """Create the store, making sure the directory exists."""
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        return cls(directory=path)

    def store(self, data: bytes, original_filename: str) -> str:
        """Write bytes to a hidden temp file, then rename into place."""
        blob_ref = new_blob_ref(original_filename)
        target = self.directory / blob_ref
        partial = self.directory / f".{blob_ref}.part"
        try:
            with partial.open("wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(partial, target)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise StorageError(f"Error storing the uploaded photo: {exc}") from exc
        return blob_ref

    def retrieve(self, blob_ref: str) -> Iterator[bytes]:
        """Open a blob and return an iterator over its chunks."""
        path = self.directory / validate_blob_ref(blob_ref)
        try:
            handle = path.open("rb")
        except FileNotFoundError as exc:
            raise NotFound("Photo not found") from exc
        except OSError as exc:
            raise StorageError(f"Error accessing photo: {exc}") from exc
        return _iter_chunks(handle)

    def delete(self, blob_ref: str) -> None:
        """Remove a blob; a missing file is already the desired state."""
        path = self.directory / validate_blob_ref(blob_ref)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Error deleting the photo: {exc}") from exc

    def list_blobs(self) -> list[BlobInfo]:
        """Return stored blobs with their modification time."""
        blobs = []
        try:
            entries = list(self.directory.iterdir())
        except OSError as exc:
            raise StorageError(f"Error listing photos: {exc}") from exc
        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                stat = entry.stat()
            except FileNotFoundError:
                continue
            if not entry.is_file():
                continue
            blobs.append(
                BlobInfo(
                    ref=entry.name,
                    created_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                )
            )
        return blobs


def _iter_chunks(handle: BinaryIO) -> Iterator[bytes]:
    with handle:
        while chunk := handle.read(_CHUNK_SIZE):
            yield chunk
