"""
FastAPI dependencies.

The caller is resolved once per request from the bearer token and passed
explicitly to the service; the service's repositories use a client carrying
that token so Supabase evaluates row-level security as the caller.
"""

from typing import Optional

from fastapi import Depends, Header

from .. import auth
from ..errors import AuthenticationRequiredError
from ..infrastructure import supabase_client
from ..models import Caller
from ..services import TicketService, get_ticket_service


def get_access_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    return auth.bearer_token(authorization)


def get_optional_caller(access_token: Optional[str] = Depends(get_access_token)) -> Optional[Caller]:
    if not access_token:
        return None
    return auth.get_current_caller(supabase_client.require_supabase_client(), access_token)


def get_caller(caller: Optional[Caller] = Depends(get_optional_caller)) -> Caller:
    if caller is None:
        raise AuthenticationRequiredError()
    return caller


def get_service(caller: Optional[Caller] = Depends(get_optional_caller)) -> TicketService:
    if caller is not None and caller.access_token:
        client = supabase_client.create_user_client(caller.access_token)
    else:
        client = supabase_client.require_supabase_client()
    return get_ticket_service(client)
