"""Password hashing and token helpers"""
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from core.config import ACCESS_TOKEN_TTL, JWT_ALGORITHM, JWT_SECRET, REFRESH_TOKEN_TTL
from core.models import User


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def _sign(claims: dict, ttl: int, secret: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + timedelta(seconds=ttl)}
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def create_tokens(user: User, secret: str = JWT_SECRET) -> dict:
    """Access token carries id/email/username, refresh token only the id"""
    access_token = _sign(
        {"id": user.id, "email": user.email, "username": user.username, "type": "access"},
        ACCESS_TOKEN_TTL,
        secret,
    )
    refresh_token = _sign({"id": user.id, "type": "refresh"}, REFRESH_TOKEN_TTL, secret)
    return {"accessToken": access_token, "refreshToken": refresh_token}


def decode_token(token: str, expected_type: str = "access", secret: str = JWT_SECRET) -> dict:
    """Verify signature, expiry and token type; raises jwt.InvalidTokenError"""
    payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    if payload.get("type") != expected_type or "id" not in payload:
        raise jwt.InvalidTokenError(f"Expected a {expected_type} token")
    return payload
