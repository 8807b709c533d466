"""
Ticket API Routes

List, read, create, status changes and comments.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..models import (
    Caller,
    Comment,
    CommentCreate,
    Ticket,
    TicketCreate,
    TicketFilters,
    TicketRecord,
    TicketStatus,
    TicketStatusUpdate,
)
from ..services import TicketService
from .dependencies import get_optional_caller, get_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("", response_model=List[Ticket])
async def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Case-insensitive match on title or description"),
    label: Optional[str] = Query(None, description="Exact label name"),
    service: TicketService = Depends(get_service),
):
    """List tickets newest first."""
    filters = TicketFilters(status=status_filter, search=search, label=label)
    return service.list_tickets(filters)


@router.get("/{ticket_id}", response_model=Ticket)
async def get_ticket(ticket_id: str, service: TicketService = Depends(get_service)):
    """Get a single ticket. 404 when no row matches."""
    return service.get_ticket(ticket_id)


@router.post("", response_model=TicketRecord, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    data: TicketCreate,
    caller: Optional[Caller] = Depends(get_optional_caller),
    service: TicketService = Depends(get_service),
):
    return service.create_ticket(caller, data)


@router.patch("/{ticket_id}/status", response_model=TicketRecord)
async def update_ticket_status(
    ticket_id: str,
    data: TicketStatusUpdate,
    service: TicketService = Depends(get_service),
):
    """Open or close a ticket."""
    return service.update_ticket_status(ticket_id, data.status)


@router.post("/{ticket_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    ticket_id: str,
    data: CommentCreate,
    caller: Optional[Caller] = Depends(get_optional_caller),
    service: TicketService = Depends(get_service),
):
    return service.add_comment(caller, ticket_id, data.body)
