"""
Security Module
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
import hashlib
import hmac
import secrets
import bcrypt
from lawlens.config.settings import settings

ALGORITHM = "HS256"


def _bcrypt_input(password: str) -> bytes:
    """bcrypt reads at most 72 bytes; longer passwords are pre-hashed with SHA256"""
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        password_bytes = hashlib.sha256(password_bytes).hexdigest().encode('utf-8')
    return password_bytes


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a bcrypt hash"""
    try:
        return bcrypt.checkpw(_bcrypt_input(plain_password), hashed_password.encode('utf-8'))
    except ValueError as e:
        # malformed hash in configuration
        from lawlens.core.logging import logger
        logger.error(f"Password verification error: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt"""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(_bcrypt_input(password), salt).decode('utf-8')


def constant_time_equals(a: str, b: str) -> bool:
    """Compare two strings without leaking the position of the first mismatch"""
    return hmac.compare_digest(a.encode('utf-8'), b.encode('utf-8'))


def generate_session_id() -> str:
    """256 bits of randomness, hex encoded"""
    return secrets.token_hex(32)


def create_access_token(data: dict, issued_at: datetime, expires_delta: timedelta) -> str:
    """Sign a token carrying issuer, audience and expiry claims"""
    to_encode = data.copy()
    to_encode.update({
        "iss": settings.ADMIN_TOKEN_ISSUER,
        "aud": settings.ADMIN_TOKEN_AUDIENCE,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_delta).timestamp()),
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Decode a token; None when the signature, issuer, audience or expiry check fails"""
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            audience=settings.ADMIN_TOKEN_AUDIENCE,
            issuer=settings.ADMIN_TOKEN_ISSUER,
            options={"verify_exp": True}
        )
    except JWTError:
        return None


def utc_from_timestamp(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)
