import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Union

from form_engine.core.exceptions import UnknownSchemaError
from form_engine.schemas.field import FormSchema

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Named form schemas, read-only once loaded."""

    def __init__(self, schemas: Mapping[str, FormSchema]):
        self._schemas: Dict[str, FormSchema] = dict(schemas)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SchemaRegistry":
        # Each entry is either a bare list of fields or {"title": ..., "fields": [...]}
        schemas = {}
        for schema_id, definition in data.items():
            if isinstance(definition, list):
                definition = {"fields": definition}
            schemas[schema_id] = FormSchema.model_validate({**definition, "id": schema_id})
        return cls(schemas)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SchemaRegistry":
        with open(path, 'r') as f:
            registry = cls.from_mapping(json.load(f))
        logger.info(f"Loaded {len(registry)} form schemas from {path}")
        return registry

    def get(self, schema_id: str) -> FormSchema:
        try:
            return self._schemas[schema_id]
        except KeyError:
            raise UnknownSchemaError(schema_id) from None

    def ids(self) -> List[str]:
        return list(self._schemas)

    def __contains__(self, schema_id: str) -> bool:
        return schema_id in self._schemas

    def __iter__(self) -> Iterator[FormSchema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)
