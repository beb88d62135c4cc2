from pathlib import Path
from pydantic_settings import BaseSettings
from typing import List, Optional

FORM_DEFINITIONS_DIR = Path(__file__).resolve().parent.parent / "form_definitions"

class Settings(BaseSettings):
    PROJECT_NAME: str = "Form Engine API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "API for schema-driven forms"

    LOG_LEVEL: str = "INFO"

    # Schema registry
    SCHEMAS_FILE: Path = FORM_DEFINITIONS_DIR / "schemas.json"
    DEFAULT_SCHEMA: str = "basic"

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Seconds to wait for the upload endpoint of a file field
    UPLOAD_TIMEOUT: float = 30.0

    # Oldest sessions are dropped once this many are held
    MAX_SESSIONS: int = 1000

    # Submissions are kept in memory unless both are set
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    SUBMISSIONS_TABLE: str = "form_submissions"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
