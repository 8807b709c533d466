"""
TicketDesk error taxonomy.

Remote PostgREST failures are not wrapped: they surface as
``postgrest.exceptions.APIError`` exactly as Supabase raised them.
The classes below cover the failures this codebase detects itself.
"""

from typing import Optional

from postgrest.exceptions import APIError

# PostgREST code for ".single()" matching zero or several rows
SINGLE_ROW_VIOLATION = "PGRST116"

LABEL_PERMISSION_HINT = (
    "You do not have permission to set labels. Make your user an admin "
    "or relax the tickets_labels RLS policy."
)


class TicketDeskError(Exception):
    """Base class for errors raised by TicketDesk itself."""


class BackendUnavailableError(TicketDeskError):
    """Supabase is not configured for this process."""


class AuthenticationRequiredError(TicketDeskError):
    """A write was attempted without an authenticated caller."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class TicketNotFoundError(TicketDeskError):
    def __init__(self, ticket_id: str):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket not found: {ticket_id}")


class LabelNotFoundError(TicketDeskError):
    def __init__(self, label_id: str):
        self.label_id = label_id
        super().__init__(f"Label not found: {label_id}")


class LabelAssignmentError(TicketDeskError):
    """
    Attaching labels to a freshly created ticket failed.

    The ticket insert and the label association insert are two independent
    writes, so the ticket identified by ``ticket_id`` exists even though
    this error was raised.
    """

    def __init__(self, message: str, ticket_id: str, cause: Optional[APIError] = None):
        self.ticket_id = ticket_id
        self.cause = cause
        super().__init__(message)


class LabelPermissionError(LabelAssignmentError):
    """The label association write was rejected by row-level security."""

    def __init__(self, ticket_id: str, cause: Optional[APIError] = None):
        super().__init__(LABEL_PERMISSION_HINT, ticket_id, cause)


def is_row_security_denial(error: APIError) -> bool:
    """True when PostgREST rejected a write because of an RLS policy."""
    return "row-level security" in (error.message or "")


def is_not_found(error: Exception) -> bool:
    """True for our own not-found errors and PostgREST single-row violations."""
    if isinstance(error, (TicketNotFoundError, LabelNotFoundError)):
        return True
    return isinstance(error, APIError) and error.code == SINGLE_ROW_VIOLATION
