import logging

from jose import JWTError
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer

from ..config import settings
from ..utils import create_access_token, decode_token, verify_password

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def authenticate_admin(email: str, password: str) -> str | None:
    """Return an access token when the credentials match the admin account."""
    if not settings.ADMIN_PASSWORD_HASH:
        logger.error("ADMIN_PASSWORD_HASH is not configured; admin login disabled")
        return None
    if email.lower() != settings.ADMIN_EMAIL.lower():
        return None
    if not verify_password(password, settings.ADMIN_PASSWORD_HASH):
        return None
    return create_access_token({"sub": settings.ADMIN_EMAIL, "role": ADMIN_ROLE})


def decode_access_token(token: str) -> dict:
    try:
        return decode_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_admin(token: str | None = Depends(oauth2_scheme)) -> dict:
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(token)

    if "sub" not in payload:
        raise HTTPException(401, "Invalid token payload")
    if payload["sub"].lower() != settings.ADMIN_EMAIL.lower() or payload.get("role") != ADMIN_ROLE:
        raise HTTPException(403, "Forbidden")
    return {"email": payload["sub"], "role": ADMIN_ROLE}
