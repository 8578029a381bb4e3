"""Password hashing, token issuance and bearer token verification."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Header
from jose import jwt, JWTError
from passlib.context import CryptContext

from config import get_settings
from errors import AuthError

_settings = get_settings()

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=_settings.bcrypt_rounds,
)


# ===== PASSWORDS =====
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# ===== TOKENS =====
def create_access_token(user_id: int, issued_at: Optional[datetime] = None) -> str:
    """Mint a signed token for `user_id` valid for the configured window.

    `issued_at` defaults to now; it is exposed so expiry can be exercised
    without waiting.
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=_settings.access_token_expire_minutes)
    to_encode = {"sub": str(user_id), "iat": issued_at, "exp": expire}
    return jwt.encode(to_encode, _settings.jwt_secret, algorithm=_settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    try:
        payload = jwt.decode(token, _settings.jwt_secret, algorithms=[_settings.jwt_algorithm])
    except JWTError:
        raise AuthError("Invalid or expired token")

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise AuthError("Invalid or expired token")


def verify_authorization(authorization: Optional[str]) -> int:
    """Return the user id carried by an ``Authorization: Bearer <token>`` header.

    Raises AuthError when the header is missing, is not a two-part
    ``scheme token`` string with the Bearer scheme, or the token is forged or
    expired.
    """
    if not authorization:
        raise AuthError("No token provided")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthError("Malformed authorization header")

    return decode_access_token(parts[1])


def get_current_user_id(authorization: Optional[str] = Header(None)) -> int:
    return verify_authorization(authorization)
