"""Tests for the filesystem blob store."""

import asyncio

import pytest

from pixperfect.infrastructure.storage import LocalBlobStore, generate_key, sanitize_filename
from pixperfect.modules.assets import BlobStoreError, DeleteOutcome


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(tmp_path / "blobs", public_path="/uploads/")


async def test_put_then_read(store):
    key = await store.put(b"hello", "img.png")
    assert key.endswith("-img.png")
    assert await store.read(key) == b"hello"
    assert (store.root / key).read_bytes() == b"hello"


async def test_concurrent_puts_with_same_name_get_distinct_keys(store):
    payloads = [f"blob-{i}".encode() for i in range(25)]
    keys = await asyncio.gather(*(store.put(data, "img.png") for data in payloads))

    assert len(set(keys)) == len(payloads)
    for key, data in zip(keys, payloads):
        assert await store.read(key) == data


async def test_resolve_builds_public_address(store):
    assert store.resolve("abc-img.png") == "/uploads/abc-img.png"
    assert store.resolve("abc-my photo.png") == "/uploads/abc-my%20photo.png"


async def test_delete_distinguishes_absent_keys(store):
    key = await store.put(b"data", "a.png")

    assert await store.delete(key) is DeleteOutcome.DELETED
    assert await store.delete(key) is DeleteOutcome.NOT_FOUND
    assert not (store.root / key).exists()


async def test_delete_rejects_keys_outside_root(store):
    assert await store.delete("../escape.png") is DeleteOutcome.FAILED


async def test_read_missing_key_raises(store):
    with pytest.raises(BlobStoreError):
        await store.read("missing-key.png")


async def test_put_into_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    store = LocalBlobStore(blocker / "nested")

    with pytest.raises(BlobStoreError):
        await store.put(b"data", "a.png")


class TestKeys:
    def test_sanitize_strips_directories_and_unsafe_characters(self):
        assert sanitize_filename("../../etc/passwd") == "passwd"
        assert sanitize_filename("C:\\photos\\cat pic.png") == "cat_pic.png"
        assert sanitize_filename("") is None
        assert sanitize_filename("...") is None

    def test_generate_key_falls_back_to_default_name(self):
        key = generate_key(None)
        assert key.endswith("-image")

    def test_generate_key_applies_prefix(self):
        assert generate_key("a.png", prefix="images/").startswith("images/")
