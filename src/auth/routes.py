"""Token issuance for XMTP installations."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from src.auth.installation import verify_installation_signature
from src.auth.jwt import create_auth_token

router = APIRouter(prefix="/api/v1/authenticate", tags=["Auth"])


class AuthenticateResponse(BaseModel):
    token: str


@router.post("", response_model=AuthenticateResponse, summary="Issue an auth token", description="Verify the installation signature over the app check token and return a JWT for the inbox.")
async def authenticate(request: Request):
    app_check_token = request.headers.get("X-Firebase-AppCheck")
    installation_id = request.headers.get("X-XMTP-InstallationId")
    inbox_id = request.headers.get("X-XMTP-InboxId")
    signature = request.headers.get("X-XMTP-Signature")

    if not app_check_token or not installation_id or not inbox_id or not signature:
        raise HTTPException(status_code=400, detail="Missing authentication headers")

    if not verify_installation_signature(installation_id, app_check_token, signature):
        raise HTTPException(status_code=401, detail="Invalid installation signature")

    return AuthenticateResponse(token=create_auth_token(inbox_id, installation_id))
