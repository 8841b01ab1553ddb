"""Tests for local-disk buckets and the upload helpers."""

import pytest

from socialhub.db.client import delete_file, upload_file
from socialhub.db.errors import StorageError
from socialhub.db.storage import StorageClient


@pytest.fixture
def storage(tmp_path):
    return StorageClient(tmp_path / "storage", "http://testserver", ["drawings", "videos"])


class TestBucket:
    """Tests for Bucket operations."""

    def test_upload_and_download(self, storage):
        bucket = storage.from_("drawings")
        assert bucket.upload("u1/a.png", b"png") == "u1/a.png"
        assert bucket.exists("u1/a.png")
        assert bucket.download("u1/a.png") == b"png"

    def test_upload_existing_needs_upsert(self, storage):
        bucket = storage.from_("drawings")
        bucket.upload("a.png", b"one")
        with pytest.raises(StorageError):
            bucket.upload("a.png", b"two")
        bucket.upload("a.png", b"two", upsert=True)
        assert bucket.download("a.png") == b"two"

    def test_public_url(self, storage):
        url = storage.from_("drawings").get_public_url("u1/a.png")
        assert url == "http://testserver/storage/drawings/u1/a.png"

    @pytest.mark.parametrize("path", ["", "/etc/passwd", "../escape.png", "a/../../b"])
    def test_unsafe_paths_rejected(self, storage, path):
        with pytest.raises(StorageError):
            storage.from_("drawings").upload(path, b"x")

    def test_remove_reports_existing_only(self, storage):
        bucket = storage.from_("drawings")
        bucket.upload("a.png", b"x")
        assert bucket.remove(["a.png", "missing.png"]) == ["a.png"]
        assert not bucket.exists("a.png")

    def test_download_missing(self, storage):
        with pytest.raises(StorageError):
            storage.from_("drawings").download("missing.png")

    def test_unknown_bucket(self, storage):
        with pytest.raises(StorageError):
            storage.from_("secrets")


class TestUploadHelpers:
    """Tests for upload_file / delete_file on the shared client."""

    def test_upload_file_returns_path_and_url(self, data_client):
        path, url = upload_file(data_client, b"data", "chat", "u1/file.txt")
        assert path == "u1/file.txt"
        assert url.endswith("/storage/chat/u1/file.txt")

    def test_upload_file_reraises(self, data_client):
        with pytest.raises(StorageError):
            upload_file(data_client, b"data", "nope", "file.txt")

    def test_delete_file(self, data_client):
        upload_file(data_client, b"data", "chat", "file.txt")
        delete_file(data_client, "chat", "file.txt")
        assert not data_client.storage.from_("chat").exists("file.txt")
