"""Shared fixtures for the form engine tests."""
import pytest

from form_engine.services.interpreter import FormInterpreter
from form_engine.services.schema_registry import SchemaRegistry
from form_engine.services.session import FormSession
from form_engine.services.upload_service import UploadTransport

SCHEMAS = {
    "basic": {
        "title": "Basic",
        "fields": [
            {"name": "full_name", "title": "Full Name", "type": "text", "required": True},
            {"name": "age", "title": "Age", "type": "number", "min": 5, "max": 10},
            {"name": "start", "title": "Start", "type": "date", "min": "2024-01-01"},
        ],
    },
    "nested": [
        {"name": "title", "title": "Title", "type": "text", "required": True},
        {"name": "tags", "title": "Tags", "type": "multiselect", "data": [
            {"id": "a", "title": "A"},
            {"id": "b", "title": "B"},
        ]},
        {"name": "plan", "title": "Plan", "type": "buttons", "value": "free", "data": [
            {"id": "free", "title": "Free"},
            {"id": "pro", "title": "Pro"},
        ]},
        {"name": "resume", "title": "Resume", "type": "file"},
        {"name": "address", "title": "Address", "type": "card", "data": [
            {"name": "city", "title": "City", "type": "text", "required": True},
            {"name": "zip", "title": "ZIP", "type": "text", "validator": "^[0-9]{5}$"},
        ]},
    ],
}


class FakeTransport(UploadTransport):
    """Returns the file name, optionally failing or waiting for ``release``."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.release = None
        self.calls = []

    async def upload(self, descriptor, file):
        self.calls.append((descriptor.name, file.filename))
        if self.release is not None:
            await self.release.wait()
        if self.fail:
            raise RuntimeError("connection reset")
        return file.filename


@pytest.fixture
def registry():
    return SchemaRegistry.from_mapping(SCHEMAS)


@pytest.fixture
def nested_fields(registry):
    return registry.get("nested").fields


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def interpreter(registry, transport):
    return FormInterpreter(registry, transport)


@pytest.fixture
def session(interpreter):
    return interpreter.select_schema(FormSession(), "nested")


def field_named(fields, *names):
    """Walk ``names`` down through group children and return the last descriptor."""
    descriptor = None
    for name in names:
        descriptor = next(f for f in fields if f.name == name)
        fields = descriptor.children or []
    return descriptor
