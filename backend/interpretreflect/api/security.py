from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from interpretreflect.services.auth_service import decode_access_token
from interpretreflect.services.credentials import RequestCredentialProvider
from interpretreflect.services.rest_store import PostgrestClient
from interpretreflect.settings import load_store_settings


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    access_token: str


def get_current_user(authorization: str = Header(default="")) -> CurrentUser:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    try:
        payload = decode_access_token(token)
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token") from exc
    user_id = str(payload.get("sub", "")).strip()
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    return CurrentUser(user_id=user_id, access_token=token)


def get_store_client(
    authorization: str = Header(default=""),
    current_user: CurrentUser = Depends(get_current_user),
) -> PostgrestClient:
    """Store client acting with the caller's own session token."""
    return PostgrestClient(
        settings=load_store_settings(),
        credentials=RequestCredentialProvider(authorization),
    )
