from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from form_engine.api.v1.api import api_router
from form_engine.core.config import settings
from form_engine.services.interpreter import FormInterpreter
from form_engine.services.schema_registry import SchemaRegistry
from form_engine.services.session import SessionStore
from form_engine.services.submission_service import SubmissionSink, default_sink
from form_engine.services.upload_service import HttpUploadTransport, UploadTransport

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Serving {len(app.state.interpreter.schemas)} form schemas")
    yield
    logger.info("Shutting down...")


def create_app(
    schemas: Optional[SchemaRegistry] = None,
    transport: Optional[UploadTransport] = None,
    sink: Optional[SubmissionSink] = None,
) -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.interpreter = FormInterpreter(
        schemas if schemas is not None else SchemaRegistry.from_file(settings.SCHEMAS_FILE),
        transport if transport is not None else HttpUploadTransport(),
    )
    app.state.sessions = SessionStore()
    app.state.submission_sink = sink if sink is not None else default_sink()

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
