"""
Cart owner resolution

Signed-in users are identified by a bearer JWT issued by the auth service;
guests by a session id header that the storefront hands out on first use.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Header, HTTPException, Request, Response

from cart_core import generate_session_id

from ..core.config import get_settings

logger = logging.getLogger(__name__)

MAX_SESSION_ID_LENGTH = 128


def issue_token(user_id: str, expires_in: int = 3600) -> str:
    """Sign a short-lived access token (development and tests)"""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    claims = {"sub": user_id, "iat": now, "exp": now + timedelta(seconds=expires_in)}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class BearerUser:
    """
    FastAPI dependency returning the user id from ``Authorization: Bearer``.

    The token's ``sub`` claim is preferred; ``userId`` is accepted for tokens
    minted by the older auth service.
    """

    async def __call__(self, authorization: Optional[str] = Header(None)) -> str:
        if not authorization:
            raise HTTPException(status_code=401, detail="User not authenticated")

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise HTTPException(status_code=401, detail="Expected a Bearer token")

        settings = get_settings()
        try:
            claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            raise HTTPException(status_code=401, detail="Token expired")
        except jwt.InvalidTokenError as exc:
            logger.warning(f"Rejected access token: {exc}")
            raise HTTPException(status_code=401, detail="Invalid token")

        user_id = claims.get("sub") or claims.get("userId")
        if not user_id:
            raise HTTPException(status_code=401, detail="Token has no subject")
        return str(user_id)


def read_guest_session(request: Request) -> str:
    """Guest session id from the request header; empty when absent"""
    session_id = (request.headers.get(get_settings().guest_session_header) or "").strip()
    if len(session_id) > MAX_SESSION_ID_LENGTH:
        raise HTTPException(status_code=400, detail="Guest session id too long")
    return session_id


async def guest_session(request: Request, response: Response) -> str:
    """Guest session id from the request header, or a new one; echoed back on the response"""
    session_id = read_guest_session(request)
    if not session_id:
        session_id = generate_session_id()
        logger.info(f"Started guest session {session_id}")
    response.headers[get_settings().guest_session_header] = session_id
    return session_id


# Dependency instances
require_user = BearerUser()
