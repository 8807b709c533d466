"""
Ticket Service - read-model aggregation over Supabase

Composes ticket queries with nested comments and labels, resolves every
author id through the ProfileResolver in one batched call, and returns the
denormalized ``Ticket`` / ``Comment`` models the HTTP layer serializes.

Writes take the caller explicitly. A write without a caller fails with
AuthenticationRequiredError before anything is sent to Supabase.

Failure policy: PostgREST errors propagate unchanged and abort the whole
operation; nothing is retried and no partial listing is returned.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from postgrest.exceptions import APIError

from ..errors import (
    AuthenticationRequiredError,
    LabelAssignmentError,
    LabelNotFoundError,
    LabelPermissionError,
    TicketNotFoundError,
    TicketDeskError,
    is_row_security_denial,
)
from ..models import (
    Caller,
    Comment,
    CommentAuthor,
    Label,
    ProfileFragment,
    Ticket,
    TicketCreate,
    TicketFilters,
    TicketRecord,
    TicketStatus,
    UNKNOWN_AUTHOR,
    UNKNOWN_PROFILE,
)
from ..repositories import (
    LabelRepository,
    TicketRepository,
    get_label_repository,
    get_profile_repository,
    get_ticket_repository,
)
from .profile_resolver import ProfileResolver

logger = logging.getLogger(__name__)


# =============================================================================
# DENORMALIZATION
# =============================================================================

def collect_author_ids(rows: Iterable[Dict[str, Any]]) -> List[str]:
    """Creator ids of every row followed by every nested comment author id."""
    rows = list(rows)
    ids = [row.get("created_by") for row in rows]
    for row in rows:
        ids.extend(c.get("author_id") for c in row.get("comments") or [])
    return ids


def _comment_author(profiles: Dict[str, ProfileFragment], author_id: Optional[str]) -> CommentAuthor:
    profile = profiles.get(author_id) if author_id else None
    if profile is None:
        return UNKNOWN_AUTHOR
    return CommentAuthor(display_name=profile.display_name)


def normalize_comment(row: Dict[str, Any], profiles: Dict[str, ProfileFragment],
                      ticket_id: Optional[str] = None) -> Comment:
    return Comment(
        id=row["id"],
        ticket_id=row.get("ticket_id") or ticket_id,
        author=_comment_author(profiles, row.get("author_id")),
        body=row.get("body", ""),
        created_at=row.get("created_at"),
    )


def _oldest_first(comments: List[Comment]) -> List[Comment]:
    # PostgREST gives no order for embedded rows; undated comments go last
    return sorted(comments, key=lambda c: (c.created_at is None, c.created_at or datetime.min))


def normalize_ticket(row: Dict[str, Any], profiles: Dict[str, ProfileFragment]) -> Ticket:
    """Build the view model for one joined tickets row. Comments come back oldest first."""
    creator = profiles.get(row.get("created_by")) if row.get("created_by") else None
    labels = [
        Label(**link["label"])
        for link in row.get("tickets_labels") or []
        if link and link.get("label")
    ]
    return Ticket(
        id=row["id"],
        title=row.get("title", ""),
        description=row.get("description") or "",
        status=row.get("status") or TicketStatus.OPEN,
        created_by=creator or UNKNOWN_PROFILE,
        comments=_oldest_first(
            [normalize_comment(c, profiles, row["id"]) for c in row.get("comments") or []]
        ),
        labels=labels,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def filter_tickets_by_label(tickets: List[Ticket], label_name: Optional[str]) -> List[Ticket]:
    """Keep tickets carrying a label named exactly ``label_name``."""
    if not label_name:
        return tickets
    return [t for t in tickets if t.has_label(label_name)]


def require_caller(caller: Optional[Caller]) -> Caller:
    if caller is None or not caller.user_id:
        raise AuthenticationRequiredError()
    return caller


# =============================================================================
# SERVICE
# =============================================================================

class TicketService:
    """Aggregation layer over the ticket, label and profile repositories."""

    def __init__(
        self,
        tickets: Optional[TicketRepository] = None,
        labels: Optional[LabelRepository] = None,
        profiles: Optional[ProfileResolver] = None,
    ):
        self.tickets = tickets or get_ticket_repository()
        self.labels = labels or get_label_repository()
        self.profiles = profiles or ProfileResolver()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_tickets(self, filters: Optional[TicketFilters] = None) -> List[Ticket]:
        """
        List tickets newest first, fully denormalized.

        ``filters.status`` and ``filters.search`` narrow the remote query.
        ``filters.label`` is matched afterwards against the fetched labels.
        """
        filters = filters or TicketFilters()
        status = filters.status.value if filters.status else None

        rows = self.tickets.list(status=status, search=filters.search or None)
        profiles = self.profiles.resolve(collect_author_ids(rows))
        tickets = filter_tickets_by_label(
            [normalize_ticket(row, profiles) for row in rows], filters.label
        )

        logger.info(f"Listed {len(tickets)} of {len(rows)} fetched tickets")
        return tickets

    def get_ticket(self, ticket_id: str) -> Ticket:
        """
        Fetch exactly one ticket.

        Raises:
            APIError: code PGRST116 when zero or several rows match
        """
        row = self.tickets.get(ticket_id)
        profiles = self.profiles.resolve(collect_author_ids([row]))
        return normalize_ticket(row, profiles)

    def list_labels(self) -> List[Label]:
        return [Label(**row) for row in self.labels.get_all()]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_ticket(self, caller: Optional[Caller], data: TicketCreate) -> TicketRecord:
        """
        Insert a ticket, then attach its labels in a second write.

        The two writes are not atomic. When the label write fails the ticket
        is kept and LabelAssignmentError (or LabelPermissionError for an RLS
        denial) is raised carrying the new ticket id.
        """
        caller = require_caller(caller)

        row = self.tickets.insert({
            "title": data.title,
            "description": data.description,
            "created_by": caller.user_id,
        })
        if not row:
            raise TicketDeskError("Ticket insert returned no row")
        ticket = TicketRecord(**row)
        logger.info(f"✅ Created ticket {ticket.id} for {caller.user_id}")

        label_ids = list(dict.fromkeys(data.label_ids))
        if label_ids:
            try:
                self.tickets.attach_labels(ticket.id, label_ids)
            except APIError as e:
                logger.error(f"❌ Label assignment failed for ticket {ticket.id}: {e.message}")
                if is_row_security_denial(e):
                    raise LabelPermissionError(ticket.id, cause=e) from e
                raise LabelAssignmentError(e.message or str(e), ticket.id, cause=e) from e

        return ticket

    def update_ticket_status(self, ticket_id: str, status: TicketStatus) -> TicketRecord:
        """Set the status unconditionally; last writer wins."""
        row = self.tickets.update_status(ticket_id, TicketStatus(status).value)
        if not row:
            raise TicketNotFoundError(ticket_id)
        logger.info(f"Ticket {ticket_id} -> {row.get('status')}")
        return TicketRecord(**row)

    def add_comment(self, caller: Optional[Caller], ticket_id: str, body: str) -> Comment:
        """Insert a comment and return it with the author's display name."""
        caller = require_caller(caller)

        row = self.tickets.insert_comment({
            "ticket_id": ticket_id,
            "author_id": caller.user_id,
            "body": body,
        })
        if not row:
            raise TicketDeskError("Comment insert returned no row")

        profiles = self.profiles.resolve([row.get("author_id")])
        return normalize_comment(row, profiles, ticket_id)

    def create_label(self, name: str) -> Label:
        row = self.labels.create(name.strip())
        if not row:
            raise TicketDeskError("Label insert returned no row")
        return Label(**row)

    def update_label(self, label_id: str, name: str) -> Label:
        row = self.labels.update(label_id, name.strip())
        if not row:
            raise LabelNotFoundError(label_id)
        return Label(**row)

    def get_caller_profile(self, caller: Caller) -> ProfileFragment:
        return self.profiles.resolve([caller.user_id]).get(caller.user_id, UNKNOWN_PROFILE)


def get_ticket_service(client=None) -> TicketService:
    """Build a TicketService whose repositories share ``client``."""
    return TicketService(
        tickets=get_ticket_repository(client),
        labels=get_label_repository(client),
        profiles=ProfileResolver(get_profile_repository(client)),
    )
