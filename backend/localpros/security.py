"""
LocalPros Backend — Credentials & Access Tokens
=================================================

What:  Password hashing, signed bearer tokens, and the FastAPI dependencies
       that resolve the current user from the Authorization header.
How:   PBKDF2-SHA256 with a random salt for passwords; HMAC-SHA256 signed
       `payload.signature` tokens (base64url) carrying user id and expiry.
Who:   AccountService (hash/verify, token issue) and every route that needs
       an authenticated user.

Tokens are stateless: logging out means the client discards its token.
"""

import base64
import hashlib
import hmac
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from localpros.config import settings
from localpros.database import get_db_session
from localpros.exceptions import AuthenticationError, PermissionDeniedError
from localpros.models.user import USER_TYPE_PROFESSIONAL, User

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 120_000


# ── Passwords ─────────────────────────────────────────────────────────────
def hash_password(plain: str) -> str:
    """Returns `<salt hex>$<digest hex>` for storage in users.password_hash."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", plain.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(plain: str, stored: str) -> bool:
    try:
        salt_hex, digest_hex = stored.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except (AttributeError, ValueError):
        return False
    actual = hashlib.pbkdf2_hmac("sha256", plain.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(actual, expected)


# ── Tokens ────────────────────────────────────────────────────────────────
def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64urldecode(value: str) -> bytes:
    padding = "=" * ((4 - len(value) % 4) % 4)
    return base64.urlsafe_b64decode((value + padding).encode("ascii"))


def _sign(payload: bytes) -> bytes:
    return hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).digest()


def create_access_token(
    user_id: uuid.UUID,
    expires_in: Optional[timedelta] = None,
) -> Tuple[str, datetime]:
    """
    What:  Issues a signed bearer token for a user.
    Returns: (token, expires_at) where expires_at is timezone-aware UTC.
    """
    lifetime = expires_in if expires_in is not None else timedelta(
        minutes=settings.access_token_expire_minutes
    )
    expires_at = datetime.now(timezone.utc) + lifetime
    payload = f"{user_id}|{int(expires_at.timestamp())}".encode("utf-8")
    token = f"{_b64url(payload)}.{_b64url(_sign(payload))}"
    return token, expires_at


def decode_access_token(token: str) -> Optional[uuid.UUID]:
    """Returns the user id of a valid token, or None if tampered, malformed or expired."""
    try:
        payload_part, sig_part = token.split(".", 1)
        payload = _b64urldecode(payload_part)
        sent_sig = _b64urldecode(sig_part)
    except (AttributeError, ValueError):
        return None

    if not hmac.compare_digest(sent_sig, _sign(payload)):
        return None

    try:
        user_id, expiry_ts = payload.decode("utf-8").split("|", 1)
        if datetime.now(timezone.utc).timestamp() > int(expiry_ts):
            return None
        return uuid.UUID(user_id)
    except (UnicodeDecodeError, ValueError):
        return None


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


# ── Dependencies ──────────────────────────────────────────────────────────
async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    FastAPI dependency resolving the authenticated user.

    Raises AuthenticationError (401) when the header is missing, the token is
    invalid or expired, or the account no longer exists.
    """
    token = parse_bearer_token(authorization)
    if not token:
        raise AuthenticationError("Authentication required")

    user_id = decode_access_token(token)
    if user_id is None:
        raise AuthenticationError("Invalid or expired access token")

    user = await db.get(User, user_id)
    if user is None:
        logger.warning("Token presented for missing user %s", user_id)
        raise AuthenticationError("Invalid or expired access token")
    return user


async def require_professional(user: User = Depends(get_current_user)) -> User:
    if user.user_type != USER_TYPE_PROFESSIONAL:
        raise PermissionDeniedError("Only professionals can perform this action")
    return user
