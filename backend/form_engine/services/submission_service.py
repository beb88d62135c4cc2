from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4
import copy
import logging

from form_engine.core.config import settings
from form_engine.db.supabase import get_supabase_client, supabase_configured
from form_engine.schemas.form import FormSubmission

logger = logging.getLogger(__name__)


def build_submission(schema_id: str, artifact: Dict[str, Any]) -> FormSubmission:
    return FormSubmission(
        id=str(uuid4()),
        form_id=schema_id,
        submission_data=copy.deepcopy(artifact),
        created_at=datetime.now(timezone.utc).isoformat(),
    )


class SubmissionSink(ABC):
    @abstractmethod
    async def store(self, schema_id: str, artifact: Dict[str, Any]) -> FormSubmission:
        ...


class InMemorySubmissionSink(SubmissionSink):
    def __init__(self):
        self.submissions: List[FormSubmission] = []

    async def store(self, schema_id: str, artifact: Dict[str, Any]) -> FormSubmission:
        submission = build_submission(schema_id, artifact)
        self.submissions.append(submission)
        logger.info(f"Stored submission {submission.id} for form {schema_id} in memory")
        return submission


class SupabaseSubmissionSink(SubmissionSink):
    def __init__(self, table: str = None):
        self.table = table or settings.SUBMISSIONS_TABLE

    async def store(self, schema_id: str, artifact: Dict[str, Any]) -> FormSubmission:
        submission = build_submission(schema_id, artifact)
        response = get_supabase_client().table(self.table)\
            .insert(submission.model_dump())\
            .execute()
        if not response.data:
            raise RuntimeError(f"Failed to save submission to {self.table}")
        logger.info(f"Stored submission {submission.id} for form {schema_id} in {self.table}")
        return FormSubmission.model_validate(response.data[0])


def default_sink() -> SubmissionSink:
    if supabase_configured():
        return SupabaseSubmissionSink()
    logger.info("Supabase is not configured, keeping submissions in memory")
    return InMemorySubmissionSink()
