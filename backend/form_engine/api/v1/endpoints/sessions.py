from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from typing import Any, Dict
import logging

from form_engine.api.deps import (
    get_interpreter,
    get_session,
    get_session_store,
    get_submission_sink,
)
from form_engine.core.config import settings
from form_engine.core.exceptions import PathError, UnknownSchemaError
from form_engine.core.paths import find_descriptor
from form_engine.core.state import to_plain
from form_engine.schemas.field import FieldKind
from form_engine.schemas.form import (
    FieldUpdate,
    FormSubmission,
    SchemaSwitch,
    SessionCreate,
    SessionView,
)
from form_engine.services.interpreter import FormInterpreter
from form_engine.services.session import FormSession, SessionStore
from form_engine.services.submission_service import SubmissionSink
from form_engine.services.upload_service import FilePayload

logger = logging.getLogger(__name__)

router = APIRouter()


def build_view(interpreter: FormInterpreter, session: FormSession) -> SessionView:
    return SessionView(
        id=session.id,
        schema_id=session.schema_id,
        generation=session.generation,
        data=to_plain(session.state),
        errors=dict(session.errors),
        widgets=interpreter.render(session),
        submitted=session.artifact is not None,
    )


def _locate(session: FormSession, path: str):
    try:
        return find_descriptor(session.fields, path)
    except PathError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", response_model=SessionView, status_code=201)
async def create_session(
    body: SessionCreate,
    interpreter: FormInterpreter = Depends(get_interpreter),
    store: SessionStore = Depends(get_session_store),
):
    schema_id = body.schema_id or settings.DEFAULT_SCHEMA
    if schema_id not in interpreter.schemas:
        raise HTTPException(status_code=404, detail=f"Unknown schema: {schema_id}")
    session = store.create()
    interpreter.select_schema(session, schema_id)
    return build_view(interpreter, session)


@router.get("/{session_id}", response_model=SessionView)
async def get_session_view(
    session: FormSession = Depends(get_session),
    interpreter: FormInterpreter = Depends(get_interpreter),
):
    return build_view(interpreter, session)


@router.delete("/{session_id}")
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "success", "message": "Session deleted"}


@router.put("/{session_id}/schema", response_model=SessionView)
async def switch_schema(
    body: SchemaSwitch,
    session: FormSession = Depends(get_session),
    interpreter: FormInterpreter = Depends(get_interpreter),
):
    try:
        interpreter.select_schema(session, body.schema_id)
    except UnknownSchemaError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return build_view(interpreter, session)


@router.patch("/{session_id}/fields", response_model=SessionView)
async def update_field(
    body: FieldUpdate,
    session: FormSession = Depends(get_session),
    interpreter: FormInterpreter = Depends(get_interpreter),
):
    descriptor, parent_path = _locate(session, body.path)
    if descriptor.kind == FieldKind.FILE:
        raise HTTPException(status_code=400, detail="File fields are set through the upload endpoint")
    interpreter.on_field_change(session, descriptor, body.value, parent_path)
    return build_view(interpreter, session)


@router.post("/{session_id}/files/{path:path}", response_model=SessionView)
async def upload_file(
    path: str,
    file: UploadFile = File(...),
    session: FormSession = Depends(get_session),
    interpreter: FormInterpreter = Depends(get_interpreter),
):
    descriptor, parent_path = _locate(session, path)
    if descriptor.kind != FieldKind.FILE:
        raise HTTPException(status_code=400, detail=f"'{path}' is not a file field")
    payload = FilePayload(
        filename=file.filename or "upload",
        content=await file.read(),
        content_type=file.content_type,
    )
    await interpreter.on_file_selected(session, descriptor, payload, parent_path)
    return build_view(interpreter, session)


@router.post("/{session_id}/submit", response_model=FormSubmission)
async def submit_form(
    session: FormSession = Depends(get_session),
    interpreter: FormInterpreter = Depends(get_interpreter),
    sink: SubmissionSink = Depends(get_submission_sink),
):
    previous_artifact = session.artifact
    result = interpreter.submit(session)
    if not result.ok:
        raise HTTPException(
            status_code=422,
            detail={"message": "Please fix the errors before submitting", "errors": result.errors},
        )
    try:
        return await sink.store(session.schema_id, result.artifact)
    except Exception as e:
        # Only stored submissions count as submitted
        session.artifact = previous_artifact
        logger.error(f"Error storing submission for {session.schema_id}: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to process form submission: {str(e)}"
        )


@router.get("/{session_id}/submission", response_model=Dict[str, Any])
async def get_submission(session: FormSession = Depends(get_session)):
    if session.artifact is None:
        raise HTTPException(status_code=404, detail="Nothing submitted yet")
    return session.artifact
