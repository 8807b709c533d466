"""
Infrastructure components for TicketDesk.

Components:
- supabase_client: Supabase clients (anon singleton and caller-scoped)
"""

from .supabase_client import (
    create_user_client,
    get_supabase_client,
    require_supabase_client,
)

__all__ = [
    "create_user_client",
    "get_supabase_client",
    "require_supabase_client",
]
