import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4

from form_engine.core.config import settings
from form_engine.core.state import Group
from form_engine.schemas.field import FieldDescriptor

logger = logging.getLogger(__name__)


@dataclass
class FormSession:
    """Everything one user's form holds between events.

    ``generation`` goes up on every schema selection so late upload
    completions can tell they belong to a form that no longer exists.
    """
    id: str = field(default_factory=lambda: str(uuid4()))
    schema_id: Optional[str] = None
    fields: List[FieldDescriptor] = field(default_factory=list)
    state: Group = field(default_factory=Group)
    errors: Dict[str, str] = field(default_factory=dict)
    artifact: Optional[Dict[str, Any]] = None
    generation: int = 0


class SessionStore:
    """In-memory sessions, oldest evicted first once ``max_sessions`` is reached."""

    def __init__(self, max_sessions: Optional[int] = None):
        self.max_sessions = max_sessions if max_sessions is not None else settings.MAX_SESSIONS
        self._sessions: Dict[str, FormSession] = {}

    def create(self) -> FormSession:
        while self._sessions and len(self._sessions) >= self.max_sessions:
            evicted = next(iter(self._sessions))
            del self._sessions[evicted]
            logger.info(f"Evicted session {evicted}")
        session = FormSession()
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[FormSession]:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
