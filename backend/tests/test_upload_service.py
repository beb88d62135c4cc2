"""Tests for the HTTP upload transport."""
import httpx
import pytest

from form_engine.schemas.field import FieldDescriptor
from form_engine.services.upload_service import FilePayload, HttpUploadTransport


def file_field(**upload):
    document = {"name": "resume", "title": "Resume", "type": "file"}
    if upload:
        document["data"] = upload
    return FieldDescriptor.model_validate(document)


@pytest.mark.asyncio
async def test_without_target_keeps_file_name():
    transport = HttpUploadTransport(http_transport=httpx.MockTransport(lambda request: pytest.fail("no request expected")))
    assert await transport.upload(file_field(), FilePayload("cv.pdf")) == "cv.pdf"


@pytest.mark.asyncio
async def test_posts_multipart_to_target():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("X-Key")
        seen["body"] = request.content
        return httpx.Response(201, json={"ok": True})

    transport = HttpUploadTransport(http_transport=httpx.MockTransport(handler))
    field = file_field(url="https://uploads.example.com/files", method="PUT", headers={"X-Key": "secret"})

    value = await transport.upload(field, FilePayload("cv.pdf", b"%PDF-1.7", "application/pdf"))

    assert value == "cv.pdf"
    assert seen["method"] == "PUT"
    assert seen["url"] == "https://uploads.example.com/files"
    assert seen["key"] == "secret"
    assert b'filename="cv.pdf"' in seen["body"]
    assert b"%PDF-1.7" in seen["body"]


@pytest.mark.asyncio
async def test_error_status_raises():
    transport = HttpUploadTransport(http_transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    field = file_field(url="https://uploads.example.com/files")
    with pytest.raises(httpx.HTTPStatusError):
        await transport.upload(field, FilePayload("cv.pdf"))


@pytest.mark.asyncio
async def test_logs_name_of_field_without_target(caplog):
    caplog.set_level("INFO", logger="form_engine.services.upload_service")
    await HttpUploadTransport().upload(file_field(), FilePayload("cv.pdf"))
    assert "No upload target for resume, keeping file name only" in caplog.messages
