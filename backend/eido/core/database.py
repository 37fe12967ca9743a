"""
Database connections: Supabase client setup.
"""

from functools import lru_cache
from supabase import create_client, Client, ClientOptions

from eido.config import get_settings


def get_user_supabase_client(access_token: str) -> Client:
    """Get a Supabase client acting as the caller.

    Row level security applies to every query made through it, on top of the
    explicit ``user_id`` predicates the services add.
    """
    settings = get_settings()
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=ClientOptions(headers={"Authorization": f"Bearer {access_token}"}),
    )


@lru_cache
def get_supabase_admin_client() -> Client:
    """Get the Supabase admin client (service_role key, bypasses RLS).

    Only use for operations that require elevated privileges, such as writing
    into ``processing_queue`` or the retention job.
    """
    settings = get_settings()
    if not settings.SUPABASE_SERVICE_KEY:
        raise ValueError("SUPABASE_SERVICE_KEY not configured")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
