"""Supabase Storage-backed photo blob store."""

import mimetypes
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from hunt_ledger.domain.submissions import BlobInfo
from hunt_ledger.errors import NotFound, StorageError
from hunt_ledger.identifiers import validate_blob_ref
from hunt_ledger.services.blobs import BlobStore, new_blob_ref

_PAGE_SIZE = 1000


@dataclass
class SupabaseBlobStore(BlobStore):
    """Stores photos as objects in a Supabase Storage bucket."""

    client: Client
    bucket: str

    def store(self, data: bytes, original_filename: str) -> str:
        """Upload bytes under a new reference."""
        blob_ref = new_blob_ref(original_filename)
        content_type, _ = mimetypes.guess_type(blob_ref)
        try:
            self._bucket().upload(
                path=blob_ref,
                file=data,
                file_options={
                    "content-type": content_type or "application/octet-stream"
                },
            )
        except Exception as exc:
            raise StorageError(f"Error storing the uploaded photo: {exc}") from exc
        return blob_ref

    def retrieve(self, blob_ref: str) -> Iterator[bytes]:
        """Download a blob and return it as a single-chunk stream."""
        path = validate_blob_ref(blob_ref)
        try:
            data = self._bucket().download(path)
        except Exception as exc:
            if _is_not_found(exc):
                raise NotFound("Photo not found") from exc
            raise StorageError(f"Error accessing photo: {exc}") from exc
        return iter([data])

    def delete(self, blob_ref: str) -> None:
        """Remove a blob; Storage treats missing objects as removed."""
        path = validate_blob_ref(blob_ref)
        try:
            self._bucket().remove([path])
        except Exception as exc:
            if _is_not_found(exc):
                return
            raise StorageError(f"Error deleting the photo: {exc}") from exc

    def list_blobs(self) -> list[BlobInfo]:
        """Return every object in the bucket."""
        blobs: list[BlobInfo] = []
        offset = 0
        while True:
            try:
                page = self._bucket().list(
                    "", {"limit": _PAGE_SIZE, "offset": offset}
                )
            except Exception as exc:
                raise StorageError(f"Error listing photos: {exc}") from exc
            for entry in page:
                name = entry.get("name")
                if not name or name.startswith("."):
                    continue
                blobs.append(BlobInfo(ref=name, created_at=_parse_time(entry)))
            if len(page) < _PAGE_SIZE:
                return blobs
            offset += _PAGE_SIZE

    def _bucket(self):  # type: ignore[no-untyped-def]
        return self.client.storage.from_(self.bucket)


def _is_not_found(exc: Exception) -> bool:
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    if str(status) == "404":
        return True
    return "not found" in str(exc).lower()


def _parse_time(entry: dict[str, object]) -> datetime:
    raw = entry.get("created_at") or entry.get("updated_at")
    if isinstance(raw, str):
        parsed = datetime.fromisoformat(raw)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(tz=UTC)
