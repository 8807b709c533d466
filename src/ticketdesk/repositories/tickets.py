"""
Ticket Repository - Ports and Adapters

Port: TicketRepository (abstract interface)
Adapters: SupabaseTicketRepository

Covers the tickets table plus the rows hanging off it: comments and the
tickets_labels association table.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, List, Optional

from .base import SupabaseRepository

logger = logging.getLogger(__name__)

# Ticket row plus nested comments and labels, joined through tickets_labels
TICKET_SELECT = (
    "*, "
    "comments:comments(id, body, created_at, author_id), "
    "tickets_labels:tickets_labels(label:labels(id, name))"
)


def search_filter(term: str) -> str:
    """
    Build the PostgREST ``or`` filter matching ``term`` in title or description.

    Values are double-quoted so commas and parentheses in the search text
    do not break the filter syntax.
    """
    escaped = term.replace("\\", "\\\\").replace('"', '\\"')
    pattern = f'"%{escaped}%"'
    return f"title.ilike.{pattern},description.ilike.{pattern}"


class TicketRepository(SupabaseRepository):
    """
    Ticket Repository Port - defines the interface for ticket data access.
    """

    @abstractmethod
    def list(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """Tickets with nested comments and labels, newest first."""
        pass

    @abstractmethod
    def get(self, ticket_id: str) -> Dict[str, Any]:
        """Exactly one ticket with nested comments and labels."""
        pass

    @abstractmethod
    def insert(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def attach_labels(self, ticket_id: str, label_ids: List[str]) -> List[Dict[str, Any]]:
        """Insert one tickets_labels row per label in a single write."""
        pass

    @abstractmethod
    def update_status(self, ticket_id: str, status: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def insert_comment(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pass


# =============================================================================
# SUPABASE ADAPTER
# =============================================================================

class SupabaseTicketRepository(TicketRepository):
    """
    Supabase adapter for ticket repository.
    """

    def list(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        query = self.client.table("tickets").select(TICKET_SELECT)

        if status:
            query = query.eq("status", status)
        if search:
            query = query.or_(search_filter(search))

        result = query.order("created_at", desc=True).execute()
        rows = self._rows(result)
        logger.debug(f"Fetched {len(rows)} ticket rows (status={status!r}, search={search!r})")
        return rows

    def get(self, ticket_id: str) -> Dict[str, Any]:
        result = self.client.table("tickets").select(TICKET_SELECT).eq(
            "id", ticket_id
        ).single().execute()
        return result.data

    def insert(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        result = self.client.table("tickets").insert(data).execute()
        return self._first(result)

    def attach_labels(self, ticket_id: str, label_ids: List[str]) -> List[Dict[str, Any]]:
        rows = [{"ticket_id": ticket_id, "label_id": label_id} for label_id in label_ids]
        result = self.client.table("tickets_labels").insert(rows).execute()
        return self._rows(result)

    def update_status(self, ticket_id: str, status: str) -> Optional[Dict[str, Any]]:
        """Send only the status; ``updated_at`` is maintained by the database."""
        result = self.client.table("tickets").update({"status": status}).eq("id", ticket_id).execute()
        return self._first(result)

    def insert_comment(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        result = self.client.table("comments").insert(data).execute()
        return self._first(result)
