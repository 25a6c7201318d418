"""Object store interface.

The store only knows keys, bytes and content types. It has no idea which
share a blob belongs to; metadata and blobs are always two separate calls.
"""

from abc import ABC, abstractmethod


class ObjectStoreError(Exception):
    """Any failure talking to the blob store."""


class ObjectStore(ABC):
    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        ...

    @abstractmethod
    def signed_get_url(self, key: str, ttl_seconds: int) -> str:
        """Time-limited URL granting direct read access to one blob."""

    @abstractmethod
    def delete(self, key: str) -> None:
        ...
