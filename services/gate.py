import logging
from typing import Optional

from fastapi import Depends, Header, Request

from .config import BEARER_SCHEME
from .errors import InvalidCredential, Unauthorized
from .tokens import TokenService, get_tokens

log = logging.getLogger(__name__)


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        log.debug("Authorization header missing")
        raise Unauthorized("No token provided")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        log.debug("Authorization header rejected, not 'Bearer <token>'")
        raise Unauthorized("Invalid token")
    return parts[1]


async def require_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_tokens),
) -> dict:
    """Guard a route: decode the bearer token and attach the identity."""
    token = bearer_token(authorization)
    try:
        payload = tokens.verify(token)
    except InvalidCredential as e:
        log.info("Rejected token on %s: %s", request.url.path, e)
        raise Unauthorized("Invalid token") from e

    current_user = {
        "userId": payload["userId"],
        "email": payload["email"],
        "role": payload.get("role"),
    }
    request.state.user = current_user
    return current_user
