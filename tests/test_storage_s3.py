from __future__ import annotations

import io
from urllib.parse import urlparse

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from miniature_tracker.core.storage.base import StorageBackendError, StorageNotFoundError
from miniature_tracker.core.storage.s3 import S3Storage

BUCKET = "miniature-photos"


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="eu-west-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as st:
        yield st
        st.assert_no_pending_responses()


def test_store_uploads_under_sanitized_key(s3_client, stubber):
    stubber.add_response("put_object", {}, {"Bucket": BUCKET, "Key": "miniatures/1/a.png", "Body": b"img"})
    storage = S3Storage(BUCKET, "eu-west-1", client=s3_client)
    assert storage.store(b"img", "/../miniatures/1/a.png") == "miniatures/1/a.png"


def test_retrieve_reads_body(s3_client, stubber):
    body = StreamingBody(io.BytesIO(b"pixels"), len(b"pixels"))
    stubber.add_response("get_object", {"Body": body}, {"Bucket": BUCKET, "Key": "k.png"})
    assert S3Storage(BUCKET, "eu-west-1", client=s3_client).retrieve("k.png") == b"pixels"


def test_retrieve_missing(s3_client, stubber):
    stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
    with pytest.raises(StorageNotFoundError):
        S3Storage(BUCKET, "eu-west-1", client=s3_client).retrieve("k.png")


def test_exists_maps_404_to_false(s3_client, stubber):
    stubber.add_response("head_object", {}, {"Bucket": BUCKET, "Key": "k.png"})
    stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)
    storage = S3Storage(BUCKET, "eu-west-1", client=s3_client)
    assert storage.exists("k.png") is True
    assert storage.exists("k.png") is False


def test_exists_other_errors_raise(s3_client, stubber):
    stubber.add_client_error("head_object", service_error_code="AccessDenied", http_status_code=403)
    with pytest.raises(StorageBackendError):
        S3Storage(BUCKET, "eu-west-1", client=s3_client).exists("k.png")


def test_delete_checks_existence_first(s3_client, stubber):
    stubber.add_response("head_object", {}, {"Bucket": BUCKET, "Key": "k.png"})
    stubber.add_response("delete_object", {}, {"Bucket": BUCKET, "Key": "k.png"})
    stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)
    storage = S3Storage(BUCKET, "eu-west-1", client=s3_client)

    storage.delete("k.png")
    with pytest.raises(StorageNotFoundError):
        storage.delete("k.png")


def test_url_from_base_url(s3_client):
    storage = S3Storage(BUCKET, "eu-west-1", base_url="https://cdn.example.com/", client=s3_client)
    assert storage.get_url("miniatures/1/a.png") == "https://cdn.example.com/miniatures/1/a.png"


def test_presigned_url_without_base_url(s3_client):
    url = S3Storage(BUCKET, "eu-west-1", client=s3_client).get_url("miniatures/1/a.png")
    parsed = urlparse(url)
    assert "miniatures/1/a.png" in parsed.path
    assert "Expires=" in parsed.query
