class FormEngineError(Exception):
    """Base class for programmer errors raised by the form engine core."""


class PathError(FormEngineError, ValueError):
    """A canonical path is malformed, unknown, or runs through a leaf."""


class UnknownSchemaError(FormEngineError, KeyError):
    def __init__(self, schema_id: str):
        super().__init__(schema_id)
        self.schema_id = schema_id

    def __str__(self) -> str:
        return f"Unknown schema: {self.schema_id}"
