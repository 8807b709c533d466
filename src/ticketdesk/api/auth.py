"""
Authentication routes for TicketDesk.

Sign-in is passwordless: Supabase e-mails a magic link and the front end
keeps the resulting access token, sending it back as a bearer token.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .. import auth
from ..config import get_config
from ..infrastructure import supabase_client
from ..models import Caller, CallerIdentity, MagicLinkRequest
from ..services import TicketService
from .dependencies import get_caller, get_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


def redirect_base_for(request: Request) -> str:
    """
    Where the magic link should land.

    The configured base wins. Otherwise the link returns to the page that
    asked for it (the ``Origin`` header), which differs from this API's own
    base URL when the front end is served from another host or port.
    """
    configured = get_config().auth_redirect_url
    if configured:
        return configured
    origin = request.headers.get("origin")
    if origin and origin != "null":
        return origin.rstrip("/")
    return str(request.base_url).rstrip("/")


@router.post("/magic-link")
async def send_magic_link(data: MagicLinkRequest, request: Request):
    """Send a sign-in link to the given address."""
    client = supabase_client.require_supabase_client()
    redirect_to = auth.send_sign_in_link(client, data.email, redirect_base_for(request))
    return JSONResponse({
        "status": "ok",
        "message": "Check your email for the magic link to sign in.",
        "redirect_to": redirect_to,
    })


@router.get("/me", response_model=CallerIdentity)
async def who_am_i(caller: Caller = Depends(get_caller), service: TicketService = Depends(get_service)):
    return CallerIdentity(
        user_id=caller.user_id,
        email=caller.email,
        profile=service.get_caller_profile(caller),
    )
