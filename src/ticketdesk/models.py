"""
TicketDesk Data Models

Pydantic models for the denormalized read model and for write payloads.
Profiles never leave the service layer except as the small fragments
embedded in tickets and comments.
"""

from typing import Optional, List
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class TicketStatus(str, Enum):
    """Ticket status values. Transitions are manual and bidirectional."""
    OPEN = "open"
    CLOSED = "closed"


class ProfileRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


# =============================================================================
# READ MODEL
# =============================================================================

class ProfileFragment(BaseModel):
    """Display metadata resolved from the profiles table."""
    display_name: str
    role: str = ProfileRole.USER.value


class CommentAuthor(BaseModel):
    """Comment authors only carry a display name."""
    display_name: str


UNKNOWN_PROFILE = ProfileFragment(display_name="Unknown", role=ProfileRole.USER.value)
UNKNOWN_AUTHOR = CommentAuthor(display_name="Unknown")


class Label(BaseModel):
    id: str
    name: str


class Comment(BaseModel):
    """A comment with its author resolved."""
    id: str
    ticket_id: Optional[str] = None
    author: CommentAuthor
    body: str
    created_at: Optional[datetime] = None


class Ticket(BaseModel):
    """A ticket with creator, comments and labels embedded."""
    id: str
    title: str
    description: str = ""
    status: TicketStatus = TicketStatus.OPEN
    created_by: ProfileFragment
    comments: List[Comment] = Field(default_factory=list)
    labels: List[Label] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def has_label(self, name: str) -> bool:
        return any(label.name == name for label in self.labels)


class TicketRecord(BaseModel):
    """A raw tickets row as returned by a write (no joins)."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    description: str = ""
    status: TicketStatus = TicketStatus.OPEN
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Caller(BaseModel):
    """The authenticated user a request acts on behalf of."""
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = Field(default=None, repr=False)


class CallerIdentity(BaseModel):
    """Response for /auth/me."""
    user_id: str
    email: Optional[str] = None
    profile: ProfileFragment


# =============================================================================
# QUERIES AND WRITES
# =============================================================================

class TicketFilters(BaseModel):
    """
    Listing filters.

    ``status`` and ``search`` are pushed to the remote query; ``label`` is
    applied after the fetch.
    """
    status: Optional[TicketStatus] = None
    search: Optional[str] = None
    label: Optional[str] = None


class TicketCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    label_ids: List[str] = Field(default_factory=list)


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1)


class LabelWrite(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class MagicLinkRequest(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
