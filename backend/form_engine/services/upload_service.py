from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import httpx
import logging

from form_engine.core.config import settings
from form_engine.schemas.field import FieldDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilePayload:
    filename: str
    content: bytes = b''
    content_type: Optional[str] = None


class UploadTransport(ABC):
    @abstractmethod
    async def upload(self, descriptor: FieldDescriptor, file: FilePayload) -> str:
        """Send ``file`` for ``descriptor`` and return the value to store in the form.

        Failures are raised; the interpreter turns them into a field error.
        """


class HttpUploadTransport(UploadTransport):
    """Posts the file as multipart form data to the field's upload target.

    Fields without a target keep just the file name.
    """

    def __init__(self, timeout: float = None, http_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout if timeout is not None else settings.UPLOAD_TIMEOUT
        self.http_transport = http_transport

    async def upload(self, descriptor: FieldDescriptor, file: FilePayload) -> str:
        target = descriptor.upload
        if target is None:
            logger.info(f"No upload target for {descriptor.name}, keeping file name only")
            return file.filename

        logger.info(f"Uploading {file.filename} to {target.method} {target.url}")
        files = {
            "file": (file.filename, file.content, file.content_type or "application/octet-stream")
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.http_transport) as client:
            response = await client.request(
                target.method,
                target.url,
                headers=target.headers,
                files=files,
            )
            response.raise_for_status()

        logger.info(f"Upload of {file.filename} finished with status {response.status_code}")
        return file.filename
