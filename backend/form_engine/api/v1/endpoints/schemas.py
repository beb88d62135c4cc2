from fastapi import APIRouter, Depends, HTTPException
from typing import List

from form_engine.api.deps import get_schema_registry
from form_engine.core.exceptions import UnknownSchemaError
from form_engine.schemas.field import FormSchema
from form_engine.schemas.form import SchemaSummary
from form_engine.services.schema_registry import SchemaRegistry

router = APIRouter()


@router.get("/", response_model=List[SchemaSummary])
async def list_schemas(registry: SchemaRegistry = Depends(get_schema_registry)):
    return [
        SchemaSummary(id=schema.id, title=schema.title, field_count=len(schema.fields))
        for schema in registry
    ]


@router.get("/{schema_id}", response_model=FormSchema)
async def get_schema(schema_id: str, registry: SchemaRegistry = Depends(get_schema_registry)):
    try:
        return registry.get(schema_id)
    except UnknownSchemaError as e:
        raise HTTPException(status_code=404, detail=str(e))
