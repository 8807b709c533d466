"""
Supabase Client

Provides the Supabase clients TicketDesk talks to:
- a process-wide anon client (auth calls, public reads)
- per-caller clients that forward the caller's JWT so row-level
  security evaluates as that user

Usage:
    from .supabase_client import get_supabase_client, create_user_client

    client = get_supabase_client()
    result = client.table("tickets").select("*").execute()

    user_client = create_user_client(access_token)
    user_client.table("comments").insert({...}).execute()
"""

import logging
from typing import Optional

from supabase import Client, ClientOptions, create_client

from ..config import get_config
from ..errors import BackendUnavailableError

logger = logging.getLogger(__name__)

# Singleton client
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Optional[Client]:
    """
    Get the Supabase client singleton.

    Returns:
        Supabase client or None if not configured
    """
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    config = get_config()
    if not config.supabase_configured:
        logger.warning("⚠️ Supabase not configured (missing SUPABASE_URL or SUPABASE_KEY)")
        return None

    _supabase_client = create_client(config.supabase_url, config.supabase_key)
    logger.info(f"✅ Connected to Supabase: {config.supabase_url}")
    return _supabase_client


def create_user_client(access_token: str) -> Client:
    """
    Create a client that acts as the caller owning ``access_token``.

    Raises:
        BackendUnavailableError: Supabase is not configured
    """
    config = get_config()
    if not config.supabase_configured:
        raise BackendUnavailableError("Supabase is not configured")

    options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
    return create_client(config.supabase_url, config.supabase_key, options=options)


def require_supabase_client() -> Client:
    """Like get_supabase_client() but raises when Supabase is not configured."""
    client = get_supabase_client()
    if client is None:
        raise BackendUnavailableError("Supabase is not configured")
    return client
