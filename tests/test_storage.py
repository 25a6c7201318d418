import time
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from tenacity import wait_none

from sharelink.storage import LocalObjectStore, ObjectStoreError, S3ObjectStore
from sharelink.storage.local import InvalidSignature


def _signed_parts(url):
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    return parsed.path.rsplit("/", 1)[1], int(query["expires"][0]), query["signature"][0]


class TestLocalObjectStore:
    def test_signed_url_round_trip(self, store):
        store.put("k1-file.txt", b"hello", "text/plain")

        url = store.signed_get_url("k1-file.txt", 60)
        assert url.startswith("http://testserver/blob/k1-file.txt?")

        path, content_type = store.open(*_signed_parts(url))
        assert path.read_bytes() == b"hello"
        assert content_type == "text/plain"

    def test_tampered_signature(self, store):
        store.put("k1", b"hello", "text/plain")
        key, expires, signature = _signed_parts(store.signed_get_url("k1", 60))

        with pytest.raises(InvalidSignature):
            store.open(key, expires + 3600, signature)
        with pytest.raises(InvalidSignature):
            store.open(key, expires, "0" * len(signature))

    def test_non_ascii_signature_is_rejected(self, store):
        store.put("k1", b"hello", "text/plain")
        key, expires, _ = _signed_parts(store.signed_get_url("k1", 60))

        with pytest.raises(InvalidSignature):
            store.open(key, expires, "é")

    def test_expired_signature(self, store):
        store.put("k1", b"hello", "text/plain")
        expires = int(time.time()) - 1
        with pytest.raises(InvalidSignature):
            store.open("k1", expires, store._sign("k1", expires))

    def test_signature_from_another_secret(self, store, tmp_path):
        store.put("k1", b"hello", "text/plain")
        other = LocalObjectStore(store.base_dir, "http://testserver", "another-secret")
        with pytest.raises(InvalidSignature):
            store.open(*_signed_parts(other.signed_get_url("k1", 60)))

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", ".hidden", ".meta"])
    def test_rejects_unsafe_keys(self, store, key):
        with pytest.raises(ObjectStoreError):
            store.put(key, b"x", "text/plain")

    def test_key_that_looks_like_metadata(self, store):
        store.put("k1.content-type", b"plain bytes", "application/pdf")
        store.put("k1", b"hello", "text/plain")

        path, content_type = store.open(*_signed_parts(store.signed_get_url("k1.content-type", 60)))
        assert path.read_bytes() == b"plain bytes"
        assert content_type == "application/pdf"
        assert store.open(*_signed_parts(store.signed_get_url("k1", 60)))[1] == "text/plain"

    def test_signing_a_missing_blob_fails(self, store):
        with pytest.raises(ObjectStoreError):
            store.signed_get_url("missing", 60)

    def test_delete_is_idempotent(self, store):
        store.put("k1", b"hello", "text/plain")
        store.delete("k1")
        store.delete("k1")
        assert not (store.base_dir / "k1").exists()
        assert not (store.meta_dir / "k1").exists()


class TestS3ObjectStore:
    @pytest.fixture
    def s3_client(self):
        return MagicMock()

    @pytest.fixture
    def s3_store(self, s3_client, monkeypatch):
        monkeypatch.setattr(S3ObjectStore.put.retry, "wait", wait_none())
        return S3ObjectStore(bucket="shares", client=s3_client)

    def test_put(self, s3_store, s3_client):
        s3_store.put("k1", b"hello", "text/plain")
        s3_client.put_object.assert_called_once_with(
            Bucket="shares", Key="k1", Body=b"hello", ContentType="text/plain"
        )

    def test_put_is_retried_then_fails(self, s3_store, s3_client):
        s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "500", "Message": "boom"}}, "PutObject"
        )
        with pytest.raises(ObjectStoreError):
            s3_store.put("k1", b"hello", "text/plain")
        assert s3_client.put_object.call_count == 3

    def test_put_recovers_from_a_transient_error(self, s3_store, s3_client):
        s3_client.put_object.side_effect = [EndpointConnectionError(endpoint_url="http://r2"), {}]
        s3_store.put("k1", b"hello", "text/plain")
        assert s3_client.put_object.call_count == 2

    def test_signed_get_url(self, s3_store, s3_client):
        s3_client.generate_presigned_url.return_value = "https://r2.example/shares/k1?sig"

        assert s3_store.signed_get_url("k1", 3600) == "https://r2.example/shares/k1?sig"
        s3_client.generate_presigned_url.assert_called_once_with(
            "get_object", Params={"Bucket": "shares", "Key": "k1"}, ExpiresIn=3600
        )

    def test_signing_failure(self, s3_store, s3_client):
        s3_client.generate_presigned_url.side_effect = ClientError(
            {"Error": {"Code": "403", "Message": "denied"}}, "GetObject"
        )
        with pytest.raises(ObjectStoreError):
            s3_store.signed_get_url("k1", 3600)

    def test_delete_failure(self, s3_store, s3_client):
        s3_client.delete_object.side_effect = EndpointConnectionError(endpoint_url="http://r2")
        with pytest.raises(ObjectStoreError):
            s3_store.delete("k1")

    def test_bucket_is_required(self):
        with pytest.raises(ValueError):
            S3ObjectStore(bucket="", client=MagicMock())
