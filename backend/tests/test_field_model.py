"""Tests for field descriptors and schema loading."""
import json

import pytest
from pydantic import ValidationError

from form_engine.core.config import settings
from form_engine.core.exceptions import UnknownSchemaError
from form_engine.schemas.field import FieldDescriptor, FieldKind, FormSchema
from form_engine.services.schema_registry import SchemaRegistry


class TestUiDocuments:

    def test_card_becomes_group_with_children(self):
        field = FieldDescriptor.model_validate({
            "name": "address",
            "title": "Address",
            "type": "card",
            "data": [{"name": "city", "title": "City", "type": "text"}],
        })
        assert field.kind == FieldKind.GROUP
        assert field.is_group
        assert [child.name for child in field.children] == ["city"]
        assert field.options is None

    def test_option_kinds_read_data_as_options(self):
        field = FieldDescriptor.model_validate({
            "name": "plan",
            "type": "buttons",
            "value": "free",
            "data": [{"id": "free", "title": "Free"}, {"id": 2, "title": "Two"}],
        })
        assert [option.id for option in field.options] == ["free", "2"]
        assert field.default_value == "free"

    def test_validator_error_and_resolution_keys(self):
        field = FieldDescriptor.model_validate({
            "name": "age",
            "type": "number",
            "validator": "[0-9]+",
            "error": "Digits only",
            "resolution": 1,
        })
        assert field.validator_pattern == "[0-9]+"
        assert field.error_message == "Digits only"
        assert field.step == 1

    def test_file_data_is_upload_target(self):
        field = FieldDescriptor.model_validate({
            "name": "resume",
            "type": "file",
            "data": {"url": "https://uploads.example.com", "headers": {"X-Key": "k"}},
        })
        assert field.upload.url == "https://uploads.example.com"
        assert field.upload.method == "POST"

    def test_label_falls_back_to_name(self):
        assert FieldDescriptor(name="nick", kind="text").label == "nick"


class TestAuthoringErrors:

    @pytest.mark.parametrize("document", [
        {"name": "country", "type": "select"},
        {"name": "country", "type": "multiselect", "data": []},
        {"name": "address", "type": "card"},
        {"name": "city", "type": "text", "children": []},
        {"name": "city", "type": "text", "options": [{"id": "a", "title": "A"}]},
        {"name": "a.b", "type": "text"},
        {"name": "", "type": "text"},
        {"name": "zip", "type": "text", "validator": "[0-9"},
        {"name": "tags", "type": "multiselect", "validator": ".*", "data": [{"id": "a", "title": "A"}]},
        {"name": "city", "type": "text", "upload": {"url": "https://x"}},
        {"name": "city", "type": "radio"},
    ])
    def test_rejected(self, document):
        with pytest.raises(ValidationError):
            FieldDescriptor.model_validate(document)

    def test_duplicate_names_in_group(self):
        with pytest.raises(ValidationError, match="Duplicate field name 'city'"):
            FieldDescriptor.model_validate({
                "name": "address",
                "type": "card",
                "data": [
                    {"name": "city", "type": "text"},
                    {"name": "city", "type": "text"},
                ],
            })

    def test_duplicate_names_at_root(self):
        with pytest.raises(ValidationError, match="at the root"):
            FormSchema(id="x", fields=[
                {"name": "email", "type": "email"},
                {"name": "email", "type": "text"},
            ])

    def test_same_name_in_different_groups_is_fine(self):
        schema = FormSchema(id="x", fields=[
            {"name": "home", "type": "card", "data": [{"name": "city", "type": "text"}]},
            {"name": "work", "type": "card", "data": [{"name": "city", "type": "text"}]},
        ])
        assert len(schema.fields) == 2


class TestSchemaRegistry:

    def test_from_mapping_accepts_lists_and_objects(self, registry):
        assert registry.ids() == ["basic", "nested"]
        assert registry.get("basic").title == "Basic"
        assert registry.get("nested").title is None
        assert "nested" in registry

    def test_unknown_schema(self, registry):
        with pytest.raises(UnknownSchemaError):
            registry.get("missing")

    def test_from_file(self, tmp_path):
        path = tmp_path / "schemas.json"
        path.write_text(json.dumps({"contact": [{"name": "email", "type": "email"}]}))
        registry = SchemaRegistry.from_file(path)
        assert registry.get("contact").fields[0].kind == FieldKind.EMAIL

    def test_bundled_schemas_load(self):
        registry = SchemaRegistry.from_file(settings.SCHEMAS_FILE)
        assert settings.DEFAULT_SCHEMA in registry
