"""File buckets for uploads (avatars, drawing thumbnails, videos...).

Objects live on local disk under ``<root>/<bucket>/<path>`` and are served
by the web app at ``<public_url>/storage/<bucket>/<path>``.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

import structlog

from socialhub.db.errors import StorageError

logger = structlog.get_logger(__name__)

BUCKET_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class Bucket:
    """A named storage area."""

    def __init__(self, name: str, root: Path, public_url: str):
        self.name = name
        self.root = root / name
        self.public_url = public_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        """Map an object path to a file under the bucket root.

        Raises:
            StorageError: For empty, absolute or parent-escaping paths
        """
        pure = PurePosixPath(path)
        if not path or pure.is_absolute() or ".." in pure.parts or "\\" in path:
            raise StorageError(f"Invalid object path: '{path}'")
        return self.root.joinpath(*pure.parts)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def upload(self, path: str, data: bytes, upsert: bool = False) -> str:
        """Store bytes at path.

        Args:
            path: Object path inside the bucket (e.g. "user-id/thumb.png")
            data: File contents
            upsert: Overwrite an existing object instead of failing

        Returns:
            The stored object path

        Raises:
            StorageError: If the object exists and upsert is False
        """
        target = self._resolve(path)
        if target.exists() and not upsert:
            raise StorageError(f"Object already exists: {self.name}/{path}")

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

        logger.debug("storage.uploaded", bucket=self.name, path=path, size=len(data))
        return path

    def download(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise StorageError(f"Object not found: {self.name}/{path}")
        return target.read_bytes()

    def remove(self, paths: list[str]) -> list[str]:
        """Delete objects, returning the paths that existed."""
        removed = []
        for path in paths:
            target = self._resolve(path)
            if target.is_file():
                target.unlink()
                removed.append(path)

        logger.debug("storage.removed", bucket=self.name, removed=len(removed))
        return removed

    def get_public_url(self, path: str) -> str:
        self._resolve(path)
        return f"{self.public_url}/storage/{self.name}/{path}"

    def local_path(self, path: str) -> Path:
        """Filesystem location of an object (for serving it)."""
        return self._resolve(path)


class StorageClient:
    """Entry point to buckets, restricted to the configured names when given."""

    def __init__(self, root: Path, public_url: str, buckets: list[str] | None = None):
        self.root = Path(root)
        self.public_url = public_url
        self.buckets = set(buckets) if buckets else None

    def from_(self, bucket: str) -> Bucket:
        if not BUCKET_NAME_RE.match(bucket or ""):
            raise StorageError(f"Invalid bucket name: '{bucket}'")
        if self.buckets is not None and bucket not in self.buckets:
            raise StorageError(f"Unknown bucket: '{bucket}'")
        return Bucket(bucket, self.root, self.public_url)
