"""Caller identity and magic-link sign-in for TicketDesk.

Identity is owned by Supabase Auth. TicketDesk only asks it who a bearer
token belongs to and asks it to e-mail sign-in links.
"""

import logging
from typing import Optional

from supabase import AuthError

from .models import Caller

logger = logging.getLogger(__name__)

# Path the magic link lands on, appended to the redirect base
SIGN_IN_LANDING_PATH = "/tickets"


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_caller(client, access_token: Optional[str]) -> Optional[Caller]:
    """
    Resolve the caller owning ``access_token``.

    Returns None when there is no token or Supabase rejects it.
    """
    if not access_token:
        return None

    try:
        response = client.auth.get_user(access_token)
    except AuthError as e:
        logger.info(f"Rejected access token: {e}")
        return None

    user = getattr(response, "user", None) if response else None
    if user is None:
        return None
    return Caller(user_id=user.id, email=getattr(user, "email", None), access_token=access_token)


def sign_in_redirect_url(redirect_base: str) -> str:
    return f"{redirect_base.rstrip('/')}{SIGN_IN_LANDING_PATH}"


def send_sign_in_link(client, email: str, redirect_base: str) -> str:
    """
    Ask Supabase to e-mail a passwordless sign-in link.

    Args:
        client: Supabase client
        email: Address to send the link to
        redirect_base: Origin the link returns to

    Returns:
        The redirect URL embedded in the link
    """
    redirect_to = sign_in_redirect_url(redirect_base)
    client.auth.sign_in_with_otp({
        "email": email,
        "options": {"email_redirect_to": redirect_to},
    })
    logger.info(f"Sent magic link to {email} (redirect: {redirect_to})")
    return redirect_to
