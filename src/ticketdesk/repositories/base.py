"""
Base Repository - Abstract Interface (Port)

Every TicketDesk repository talks to exactly one Supabase table family.
Adapters receive an explicit client (usually caller-scoped, so RLS
evaluates as the caller) or fall back to the process-wide anon client.

Repositories never catch PostgREST errors: a failed call raises
``postgrest.exceptions.APIError`` to the service layer unchanged.
"""

from abc import ABC
from typing import Any, Dict, List, Optional


class SupabaseRepository(ABC):
    """Shared plumbing for the Supabase adapters."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        """Lazy-load Supabase client."""
        if self._client is None:
            from ..infrastructure.supabase_client import require_supabase_client
            self._client = require_supabase_client()
        return self._client

    @staticmethod
    def _rows(result) -> List[Dict[str, Any]]:
        return list(result.data or [])

    @staticmethod
    def _first(result) -> Optional[Dict[str, Any]]:
        rows = result.data or []
        if isinstance(rows, dict):
            return rows
        return rows[0] if rows else None
