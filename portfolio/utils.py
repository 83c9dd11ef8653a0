import math
from passlib.context import CryptContext
from jose import jwt
from datetime import datetime, timedelta, timezone
from .config import settings

# pbkdf2 keeps passlib off the bcrypt backend
_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

WORDS_PER_MINUTE = 200


def hash_password(password: str) -> str:
    """Hash a password for ADMIN_PASSWORD_HASH.

        python -c "from portfolio.utils import hash_password; print(hash_password('...'))"
    """
    return _pwd.hash(password)


def verify_password(plain_pw: str, hashed_pw: str) -> bool:
    return _pwd.verify(plain_pw, hashed_pw)


# JWT helpers
def create_access_token(data: dict, minutes: int | None = None) -> str:
    """Return a signed JWT access token with 'sub' claim in data."""
    exp_minutes = minutes if minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=exp_minutes)
    payload = data.copy()
    payload.update({"exp": int(expire.timestamp()), "type": "access"})
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT, raising JWTError on failure."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


# Timestamps
def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render a store timestamp as ISO-8601 UTC with millisecond precision.

    Mongo hands back naive datetimes that are already UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def estimate_read_time(content: str) -> int:
    """Reading time in minutes at ~200 words/min, never below 1."""
    if not content:
        return 1
    return max(1, math.ceil(len(content.split()) / WORDS_PER_MINUTE))
