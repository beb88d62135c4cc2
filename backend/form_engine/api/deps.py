from fastapi import HTTPException, Request

from form_engine.services.interpreter import FormInterpreter
from form_engine.services.schema_registry import SchemaRegistry
from form_engine.services.session import FormSession, SessionStore
from form_engine.services.submission_service import SubmissionSink


def get_interpreter(request: Request) -> FormInterpreter:
    return request.app.state.interpreter


def get_schema_registry(request: Request) -> SchemaRegistry:
    return request.app.state.interpreter.schemas


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_submission_sink(request: Request) -> SubmissionSink:
    return request.app.state.submission_sink


def get_session(session_id: str, request: Request) -> FormSession:
    session = get_session_store(request).get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session
