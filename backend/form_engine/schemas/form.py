from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from form_engine.services.renderers import Widget


class SchemaSummary(BaseModel):
    id: str
    title: Optional[str] = None
    field_count: int


class SessionCreate(BaseModel):
    schema_id: Optional[str] = None


class SchemaSwitch(BaseModel):
    schema_id: str


class FieldUpdate(BaseModel):
    path: str
    value: Any = None


class SessionView(BaseModel):
    id: str
    schema_id: Optional[str] = None
    generation: int
    data: Dict[str, Any]
    errors: Dict[str, str]
    widgets: List[Widget]
    submitted: bool = False


class FormSubmission(BaseModel):
    id: str
    form_id: str
    submission_data: Dict[str, Any]
    created_at: str

    class Config:
        from_attributes = True
