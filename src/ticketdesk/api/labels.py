"""
Label API Routes

Who may create or rename labels is decided by the Supabase policies.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ..models import Label, LabelWrite
from ..services import TicketService
from .dependencies import get_service

router = APIRouter(prefix="/labels", tags=["labels"])


@router.get("", response_model=List[Label])
async def list_labels(service: TicketService = Depends(get_service)):
    return service.list_labels()


@router.post("", response_model=Label, status_code=status.HTTP_201_CREATED)
async def create_label(data: LabelWrite, service: TicketService = Depends(get_service)):
    return service.create_label(data.name)


@router.put("/{label_id}", response_model=Label)
async def update_label(label_id: str, data: LabelWrite, service: TicketService = Depends(get_service)):
    return service.update_label(label_id, data.name)
