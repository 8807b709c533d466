"""
Repository Layer - Ports and Adapters Pattern

Thin adapters over the Supabase tables TicketDesk reads and writes.
Each factory takes an optional client so callers can pass a
caller-scoped client and have row-level security apply.

Usage:
    from ticketdesk.repositories import get_ticket_repository

    tickets_repo = get_ticket_repository(user_client)
    rows = tickets_repo.list(status="open")
"""

from .base import SupabaseRepository
from .labels import LabelRepository, SupabaseLabelRepository
from .profiles import ProfileRepository, SupabaseProfileRepository
from .tickets import TicketRepository, SupabaseTicketRepository, TICKET_SELECT


def get_ticket_repository(client=None) -> TicketRepository:
    """Get the ticket repository."""
    return SupabaseTicketRepository(client)


def get_label_repository(client=None) -> LabelRepository:
    """Get the label repository."""
    return SupabaseLabelRepository(client)


def get_profile_repository(client=None) -> ProfileRepository:
    """Get the profile repository."""
    return SupabaseProfileRepository(client)


__all__ = [
    "SupabaseRepository",
    # Tickets
    "TicketRepository",
    "SupabaseTicketRepository",
    "TICKET_SELECT",
    "get_ticket_repository",
    # Labels
    "LabelRepository",
    "SupabaseLabelRepository",
    "get_label_repository",
    # Profiles
    "ProfileRepository",
    "SupabaseProfileRepository",
    "get_profile_repository",
]
