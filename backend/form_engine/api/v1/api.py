from fastapi import APIRouter
from form_engine.api.v1.endpoints import schemas, sessions

api_router = APIRouter()
api_router.include_router(schemas.router, prefix="/schemas", tags=["schemas"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
