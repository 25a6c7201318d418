"""Local-disk object store for development and single-node deployments.

Blobs live flat under a base directory, with each blob's content type kept in
a file of the same name under ``.meta/``. Keys never start with a dot, so the
metadata directory cannot clash with a blob. Signed URLs point back at this
service's ``/blob/{key}`` route and carry an HMAC over the key and expiry.
"""

import hashlib
import hmac
import re
import secrets
import time
from pathlib import Path
from urllib.parse import quote, urlencode

from sharelink.storage.base import ObjectStore, ObjectStoreError

KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,511}$")
META_DIR = ".meta"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class InvalidSignature(ObjectStoreError):
    pass


class LocalObjectStore(ObjectStore):
    def __init__(self, base_dir: Path, public_base_url: str, signing_secret: str):
        self.base_dir = Path(base_dir)
        self.meta_dir = self.base_dir / META_DIR
        self.meta_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")
        self._secret = signing_secret.encode()

    def _path_for(self, key: str) -> Path:
        if not KEY_PATTERN.match(key):
            raise ObjectStoreError(f"Invalid object key: {key!r}")
        path = (self.base_dir / key).resolve()
        if path.parent != self.base_dir.resolve():
            raise ObjectStoreError(f"Invalid object key: {key!r}")
        return path

    def _meta_path_for(self, key: str) -> Path:
        return self.meta_dir / key

    def _sign(self, key: str, expires: int) -> str:
        message = f"{key}:{expires}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path_for(key)
        try:
            path.write_bytes(data)
            self._meta_path_for(key).write_text(content_type, encoding="utf-8")
        except OSError as e:
            raise ObjectStoreError(f"Failed to write {key}: {e}") from e

    def signed_get_url(self, key: str, ttl_seconds: int) -> str:
        path = self._path_for(key)
        if not path.exists():
            raise ObjectStoreError(f"No such object: {key}")
        expires = int(time.time()) + ttl_seconds
        query = urlencode({"expires": expires, "signature": self._sign(key, expires)})
        return f"{self.public_base_url}/blob/{quote(key)}?{query}"

    def open(self, key: str, expires: int, signature: str) -> tuple[Path, str]:
        """Check a signed URL's parameters; return the blob path and content type."""
        path = self._path_for(key)
        # Compared as bytes: str comparison raises on non-ASCII input
        expected = self._sign(key, expires).encode()
        if not secrets.compare_digest(signature.encode(), expected):
            raise InvalidSignature("Signature mismatch")
        if time.time() >= expires:
            raise InvalidSignature("Signed URL expired")
        if not path.exists():
            raise ObjectStoreError(f"No such object: {key}")

        meta = self._meta_path_for(key)
        content_type = meta.read_text(encoding="utf-8") if meta.exists() else DEFAULT_CONTENT_TYPE
        return path, content_type

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
            self._meta_path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise ObjectStoreError(f"Failed to delete {key}: {e}") from e
