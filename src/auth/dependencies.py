"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

import jwt
from fastapi import HTTPException, Request

from src.auth.jwt import verify_token

AUTH_HEADER = "X-Convos-AuthToken"


@dataclass
class CurrentIdentity:
    xmtp_id: str
    installation_id: str | None = None


async def get_current_identity(request: Request) -> CurrentIdentity:
    """FastAPI dependency: authenticate via the X-Convos-AuthToken JWT."""
    token = request.headers.get(AUTH_HEADER)
    if not token:
        raise HTTPException(status_code=401, detail="Missing authentication token")

    try:
        payload = verify_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    inbox_id = payload.get("inboxId")
    if not inbox_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    request.state.xmtp_id = inbox_id
    return CurrentIdentity(xmtp_id=inbox_id, installation_id=payload.get("installationId"))
