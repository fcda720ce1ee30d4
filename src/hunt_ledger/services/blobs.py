"""Photo blob storage interface and reference helpers."""

from collections.abc import Iterator
from typing import Protocol
from uuid import uuid4

from hunt_ledger.domain.submissions import BlobInfo


class BlobStore(Protocol):
    """Storage for raw photo bytes addressed by a generated reference."""

    def store(self, data: bytes, original_filename: str) -> str:
        """Persist bytes under a new unique reference and return it."""

    def retrieve(self, blob_ref: str) -> Iterator[bytes]:
        """Return a chunked byte stream for a reference.

        Raises NotFound when nothing is stored at that reference.
        """

    def delete(self, blob_ref: str) -> None:
        """Delete a blob; deleting a missing reference is not an error."""

    def list_blobs(self) -> list[BlobInfo]:
        """Return every stored blob with its creation time."""


def file_extension(filename: str) -> str:
    """Return the text after the last dot, or an empty string."""
    _, dot, extension = filename.rpartition(".")
    return extension if dot else ""


def new_blob_ref(original_filename: str) -> str:
    """Generate a globally unique reference keeping the original extension."""
    return f"{uuid4()}.{file_extension(original_filename)}"
