import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class FieldKind(str, Enum):
    TEXT = 'text'
    EMAIL = 'email'
    TEL = 'tel'
    NUMBER = 'number'
    TEXTAREA = 'textarea'
    DATE = 'date'
    DATETIME = 'datetime'
    SELECT = 'select'
    MULTISELECT = 'multiselect'
    BUTTONS = 'buttons'
    FILE = 'file'
    GROUP = 'group'


OPTION_KINDS = frozenset({FieldKind.SELECT, FieldKind.MULTISELECT, FieldKind.BUTTONS})
MULTI_VALUED_KINDS = frozenset({FieldKind.MULTISELECT})
# Kinds whose value is a single string the pattern can be matched against
PATTERN_KINDS = frozenset({
    FieldKind.TEXT,
    FieldKind.EMAIL,
    FieldKind.TEL,
    FieldKind.NUMBER,
    FieldKind.TEXTAREA,
    FieldKind.DATE,
    FieldKind.DATETIME,
})
CHRONOLOGICAL_KINDS = frozenset({FieldKind.DATE, FieldKind.DATETIME})

# Key names used by the UI schema documents
_UI_KIND_ALIASES = {'card': FieldKind.GROUP.value}
_UI_KEY_ALIASES = {
    'type': 'kind',
    'value': 'default_value',
    'validator': 'validator_pattern',
    'error': 'error_message',
    'resolution': 'step',
}

Bound = Union[int, float, str]


class FieldOption(BaseModel):
    id: str
    title: str

    @field_validator('id', mode='before')
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class UploadTarget(BaseModel):
    url: str
    method: str = 'POST'
    headers: Dict[str, str] = {}


class FieldDescriptor(BaseModel):
    """One node of a form schema.

    Documents written for the UI (``type``/``card``/``data``/``value``/
    ``validator``/``error``) are accepted and normalized to these names.
    Structural defects raise at construction time.
    """

    name: str
    title: str = ''
    kind: FieldKind
    required: bool = False
    default_value: Any = None
    validator_pattern: Optional[str] = None
    min: Optional[Bound] = None
    max: Optional[Bound] = None
    options: Optional[List[FieldOption]] = None
    children: Optional[List['FieldDescriptor']] = None
    error_message: Optional[str] = None

    # Rendering hints, not interpreted by the core
    placeholder: Optional[str] = None
    step: Optional[Bound] = None
    upload: Optional[UploadTarget] = None

    model_config = {'frozen': True}

    @model_validator(mode='before')
    @classmethod
    def _from_ui_document(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for ui_key, key in _UI_KEY_ALIASES.items():
            if ui_key in data and key not in data:
                data[key] = data.pop(ui_key)
        kind = data.get('kind')
        if isinstance(kind, str):
            data['kind'] = _UI_KIND_ALIASES.get(kind, kind)
        if 'data' in data:
            payload = data.pop('data')
            if data.get('kind') == FieldKind.GROUP.value:
                data.setdefault('children', payload)
            elif data.get('kind') == FieldKind.FILE.value:
                data.setdefault('upload', payload)
            else:
                data.setdefault('options', payload)
        return data

    @field_validator('name')
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value:
            raise ValueError("Field name must not be empty")
        if '.' in value:
            raise ValueError(f"Field name '{value}' must not contain '.'")
        return value

    @model_validator(mode='after')
    def _check_structure(self) -> 'FieldDescriptor':
        if self.kind == FieldKind.GROUP:
            if self.children is None:
                raise ValueError(f"Group field '{self.name}' has no children")
            if self.options is not None:
                raise ValueError(f"Group field '{self.name}' cannot have options")
            ensure_unique_names(self.children, self.name)
        elif self.kind in OPTION_KINDS:
            if not self.options:
                raise ValueError(f"Field '{self.name}' of kind {self.kind.value} needs options")
            if self.children is not None:
                raise ValueError(f"Field '{self.name}' of kind {self.kind.value} cannot have children")
        elif self.options is not None or self.children is not None:
            raise ValueError(f"Scalar field '{self.name}' cannot have options or children")

        if self.validator_pattern is not None:
            if self.kind not in PATTERN_KINDS:
                raise ValueError(f"Field '{self.name}' of kind {self.kind.value} cannot have a pattern")
            try:
                re.compile(self.validator_pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern for field '{self.name}': {e}")

        if self.upload is not None and self.kind != FieldKind.FILE:
            raise ValueError(f"Only file fields can have an upload target, not '{self.name}'")
        return self

    @property
    def is_group(self) -> bool:
        return self.kind == FieldKind.GROUP

    @property
    def is_multi_valued(self) -> bool:
        return self.kind in MULTI_VALUED_KINDS

    @property
    def label(self) -> str:
        return self.title or self.name


FieldDescriptor.model_rebuild()


def ensure_unique_names(fields: Iterable[FieldDescriptor], parent: str = '') -> None:
    seen = set()
    for field in fields:
        if field.name in seen:
            where = f" in group '{parent}'" if parent else " at the root"
            raise ValueError(f"Duplicate field name '{field.name}'{where}")
        seen.add(field.name)


class FormSchema(BaseModel):
    id: str
    title: Optional[str] = None
    fields: List[FieldDescriptor] = Field(default_factory=list)

    model_config = {'frozen': True}

    @model_validator(mode='after')
    def _check_root_names(self) -> 'FormSchema':
        ensure_unique_names(self.fields)
        return self
