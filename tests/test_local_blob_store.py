"""Tests for the filesystem blob store."""

from datetime import UTC, datetime

import pytest

from hunt_ledger.adapters.local_blob_store import LocalBlobStore
from hunt_ledger.errors import InvalidIdentifier, NotFound
from hunt_ledger.services.blobs import file_extension


def test_store_then_retrieve_returns_identical_bytes(tmp_path) -> None:
    store = LocalBlobStore.create(tmp_path / "photos")
    payload = bytes(range(256)) * 1000

    blob_ref = store.store(payload, "photo.png")

    assert blob_ref.endswith(".png")
    assert b"".join(store.retrieve(blob_ref)) == payload
    assert (tmp_path / "photos" / blob_ref).read_bytes() == payload


def test_store_generates_distinct_references(tmp_path) -> None:
    store = LocalBlobStore.create(tmp_path)

    refs = {store.store(b"x", "a.jpg") for _ in range(20)}

    assert len(refs) == 20


def test_store_leaves_no_partial_files(tmp_path) -> None:
    store = LocalBlobStore.create(tmp_path)

    blob_ref = store.store(b"data", "photo.jpeg")

    assert [path.name for path in tmp_path.iterdir()] == [blob_ref]


def test_retrieve_missing_raises_not_found(tmp_path) -> None:
    store = LocalBlobStore.create(tmp_path)

    with pytest.raises(NotFound):
        store.retrieve("missing.png")


def test_delete_is_idempotent(tmp_path) -> None:
    store = LocalBlobStore.create(tmp_path)
    blob_ref = store.store(b"data", "photo.png")

    store.delete(blob_ref)
    store.delete(blob_ref)

    with pytest.raises(NotFound):
        store.retrieve(blob_ref)


@pytest.mark.parametrize("blob_ref", ["../secret.png", "a/b.png", ".hidden", ""])
def test_rejects_references_outside_directory(tmp_path, blob_ref: str) -> None:
    store = LocalBlobStore.create(tmp_path / "photos")

    with pytest.raises(InvalidIdentifier):
        store.retrieve(blob_ref)
    with pytest.raises(InvalidIdentifier):
        store.delete(blob_ref)


def test_list_blobs_skips_hidden_files(tmp_path) -> None:
    store = LocalBlobStore.create(tmp_path)
    blob_ref = store.store(b"data", "photo.png")
    (tmp_path / ".upload.part").write_bytes(b"partial")

    blobs = store.list_blobs()

    assert [blob.ref for blob in blobs] == [blob_ref]
    assert blobs[0].created_at <= datetime.now(tz=UTC)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("photo.png", "png"),
        ("archive.tar.gz", "gz"),
        ("noextension", ""),
        ("trailing.", ""),
    ],
)
def test_file_extension(filename: str, expected: str) -> None:
    assert file_extension(filename) == expected


def test_store_without_extension_keeps_trailing_dot(tmp_path) -> None:
    store = LocalBlobStore.create(tmp_path)

    blob_ref = store.store(b"data", "camera-upload")

    assert blob_ref.endswith(".")
    assert b"".join(store.retrieve(blob_ref)) == b"data"
