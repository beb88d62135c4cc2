from functools import lru_cache
from supabase import Client, create_client
from form_engine.core.config import settings


def supabase_configured() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_KEY)


@lru_cache
def get_supabase_client() -> Client:
    if not supabase_configured():
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY
    )
