"""
Tests for presigned image uploads: the endpoint and the S3 signer.
"""

from urllib.parse import parse_qs, urlparse

import boto3
import pytest
from botocore.config import Config
from httpx import AsyncClient, ASGITransport

from events_api.infrastructure.s3_uploads import S3UploadAuthorizer
from events_api.main import create_app


@pytest.mark.asyncio
async def test_upload_url(client: AsyncClient, test_event, memory_store, upload_authorizer):
    response = await client.post(
        f"/events/{test_event.event_id}/upload-url",
        json={"contentType": "image/png"},
    )
    assert response.status_code == 200
    data = response.json()

    assert data["eventId"] == test_event.event_id
    assert data["imageKey"].startswith(f"events/{test_event.event_id}/")
    assert data["method"] == "PUT"
    assert data["expiresIn"] == 300
    assert data["contentType"] == "image/png"
    assert data["uploadUrl"] == f"https://uploads.test/{data['imageKey']}?signature=fake"
    assert upload_authorizer.calls == [(data["imageKey"], "image/png")]

    stored = await memory_store.get(test_event.event_id)
    assert stored.value.image_key == data["imageKey"]
    assert stored.value.updated_at > test_event.updated_at


@pytest.mark.asyncio
async def test_upload_url_fresh_key_each_time(client: AsyncClient, test_event):
    path = f"/events/{test_event.event_id}/upload-url"
    first = await client.post(path, json={"contentType": "image/jpeg"})
    second = await client.post(path, json={"contentType": "image/jpeg"})
    assert first.json()["imageKey"] != second.json()["imageKey"]


@pytest.mark.asyncio
async def test_upload_url_unsupported_content_type(client: AsyncClient, test_event, upload_authorizer):
    response = await client.post(
        f"/events/{test_event.event_id}/upload-url",
        json={"contentType": "application/pdf"},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Unsupported contentType. Allowed: image/jpeg, image/png, image/webp"
    assert data["received"] == "application/pdf"
    assert upload_authorizer.calls == []


@pytest.mark.asyncio
async def test_upload_url_default_content_type_is_rejected(client: AsyncClient, test_event):
    """Without contentType the default application/octet-stream is not an image."""
    response = await client.post(f"/events/{test_event.event_id}/upload-url", json={})
    assert response.status_code == 400
    assert response.json()["received"] == "application/octet-stream"


@pytest.mark.parametrize("content_type", [42, "jpeg", ""])
@pytest.mark.asyncio
async def test_upload_url_invalid_mime(client: AsyncClient, test_event, content_type):
    response = await client.post(
        f"/events/{test_event.event_id}/upload-url",
        json={"contentType": content_type},
    )
    assert response.status_code == 400
    assert response.json()["error"] == 'Field "contentType" must be a valid MIME type (e.g. image/jpeg)'


@pytest.mark.asyncio
async def test_upload_url_event_not_found(client: AsyncClient, memory_store, upload_authorizer):
    response = await client.post("/events/missing/upload-url", json={"contentType": "image/webp"})
    assert response.status_code == 404
    assert response.json() == {"error": "Event not found", "eventId": "missing"}
    assert upload_authorizer.calls == []
    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_upload_url_without_bucket_is_500(settings, memory_store, test_event):
    app = create_app(settings=settings, store=memory_store, upload_authorizer=None)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            f"/events/{test_event.event_id}/upload-url",
            json={"contentType": "image/png"},
        )

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}

    stored = await memory_store.get(test_event.event_id)
    assert stored.value.image_key is None


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="eu-west-3",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        config=Config(signature_version="s3v4"),
    )


@pytest.mark.asyncio
async def test_s3_presigned_put(s3_client):
    authorizer = S3UploadAuthorizer(bucket="events-bucket", expires_in=300, client=s3_client)

    grant = await authorizer.authorize("events/e-1/abc", "image/jpeg")

    assert grant.method == "PUT"
    assert grant.expires_in == 300
    assert grant.key == "events/e-1/abc"

    url = urlparse(grant.url)
    query = parse_qs(url.query)
    assert "events-bucket" in url.netloc + url.path
    assert url.path.endswith("/events/e-1/abc")
    assert query["X-Amz-Expires"] == ["300"]
    assert query["X-Amz-Algorithm"] == ["AWS4-HMAC-SHA256"]


def test_s3_authorizer_requires_bucket(s3_client):
    with pytest.raises(ValueError):
        S3UploadAuthorizer(bucket="", client=s3_client)
