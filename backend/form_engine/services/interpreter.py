import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from form_engine.core.paths import assign, join_path
from form_engine.core.state import Group, Leaf, to_plain
from form_engine.schemas.field import FieldDescriptor
from form_engine.services.renderers import RendererRegistry, Widget, default_renderers
from form_engine.services.schema_registry import SchemaRegistry
from form_engine.services.session import FormSession
from form_engine.services.upload_service import FilePayload, UploadTransport
from form_engine.services.validator import (
    UPLOAD_FAILED_MESSAGE,
    ErrorMap,
    validate_field,
    validate_tree,
)

logger = logging.getLogger(__name__)


@dataclass
class SubmitResult:
    ok: bool
    artifact: Optional[Dict[str, Any]] = None
    errors: Optional[ErrorMap] = None


def initial_value(descriptor: FieldDescriptor) -> Any:
    if descriptor.default_value is not None:
        return copy.deepcopy(descriptor.default_value)
    return [] if descriptor.is_multi_valued else ''


def initialize(fields: List[FieldDescriptor]) -> Group:
    """Fresh state for ``fields``: defaults for leaves, nested groups by name."""
    children = {}
    for descriptor in fields:
        if descriptor.is_group:
            children[descriptor.name] = initialize(descriptor.children)
        else:
            children[descriptor.name] = Leaf(initial_value(descriptor))
    return Group(children)


class FormInterpreter:
    """Drives a :class:`FormSession` through schema selection, edits and submission.

    Edits re-validate only the field that changed, so the error map can be
    stale for other fields until the next submit recomputes all of it.
    """

    def __init__(
        self,
        schemas: SchemaRegistry,
        transport: UploadTransport,
        renderers: RendererRegistry = default_renderers,
    ):
        self.schemas = schemas
        self.transport = transport
        self.renderers = renderers

    def select_schema(self, session: FormSession, schema_id: str) -> FormSession:
        schema = self.schemas.get(schema_id)
        session.generation += 1
        session.schema_id = schema_id
        session.fields = schema.fields
        session.state = initialize(schema.fields)
        session.errors = {}
        session.artifact = None
        logger.info(f"Session {session.id} switched to schema '{schema_id}' (generation {session.generation})")
        return session

    def on_field_change(
        self,
        session: FormSession,
        descriptor: FieldDescriptor,
        new_value: Any,
        parent_path: str = '',
    ) -> Optional[str]:
        full_path = join_path(parent_path, descriptor.name)
        session.state = assign(session.state, full_path, new_value)
        error = validate_field(descriptor, new_value, parent_path)
        if error:
            session.errors[full_path] = error
        else:
            session.errors.pop(full_path, None)
        return error

    async def on_file_selected(
        self,
        session: FormSession,
        descriptor: FieldDescriptor,
        file: FilePayload,
        parent_path: str = '',
    ) -> bool:
        """Upload ``file`` and store its display value in the field.

        Returns True when the field was written. A failed upload becomes a
        field error; a completion arriving after the schema was switched is
        dropped.
        """
        full_path = join_path(parent_path, descriptor.name)
        generation = session.generation
        logger.info(f"Uploading {file.filename} for {full_path}")
        try:
            display_value = await self.transport.upload(descriptor, file)
        except Exception as e:
            if session.generation != generation:
                logger.info(f"Ignoring failed upload for {full_path} from generation {generation}")
                return False
            logger.error(f"File upload failed for {full_path}: {str(e)}")
            session.errors[full_path] = UPLOAD_FAILED_MESSAGE
            return False

        if session.generation != generation:
            logger.info(f"Discarding upload for {full_path} from generation {generation}")
            return False
        self.on_field_change(session, descriptor, display_value, parent_path)
        return True

    def submit(self, session: FormSession) -> SubmitResult:
        validation = validate_tree(session.fields, session.state)
        if not validation.is_valid:
            session.errors = validation.errors
            logger.info(f"Submission of '{session.schema_id}' rejected with {len(validation.errors)} errors")
            return SubmitResult(ok=False, errors=dict(validation.errors))

        session.errors = {}
        session.artifact = to_plain(session.state)
        logger.info(f"Submission of '{session.schema_id}' accepted")
        return SubmitResult(ok=True, artifact=to_plain(session.state))

    def render(self, session: FormSession) -> List[Widget]:
        def make_on_change(descriptor: FieldDescriptor, parent_path: str):
            return lambda value: self.on_field_change(session, descriptor, value, parent_path)

        return self.renderers.render_fields(
            session.fields, session.state, session.errors, make_on_change
        )
