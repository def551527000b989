from __future__ import annotations

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from quotebook.config import settings
from quotebook.utils.logging import get_logger

logger = get_logger(__name__)


def create_request_supabase_client(bearer_token: str | None = None) -> Client | None:
    """Create a request-scoped Supabase client using the anon key.

    Returns None when Supabase is not configured, which puts the service in
    local-only mode. If a JWT is provided, set it as the PostgREST bearer so
    that RLS policies are enforced for all table operations in this request.
    """
    if not settings.supabase_configured:
        logger.debug("Supabase not configured; running without a remote backend")
        return None

    logger.debug("Creating request-scoped Supabase client")
    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client
