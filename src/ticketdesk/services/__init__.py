"""
TicketDesk services - business logic between the HTTP routes and Supabase.
"""

from .profile_resolver import ProfileResolver, distinct_ids
from .ticket_service import (
    TicketService,
    filter_tickets_by_label,
    get_ticket_service,
    normalize_ticket,
)

__all__ = [
    "ProfileResolver",
    "distinct_ids",
    "TicketService",
    "filter_tickets_by_label",
    "get_ticket_service",
    "normalize_ticket",
]
