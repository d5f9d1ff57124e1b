"""Auth dependencies for FastAPI"""
import logging
from typing import Optional

import jwt
from fastapi import HTTPException, Request

from .utils import decode_token

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> str:
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Authorization header missing")

    parts = auth_header.split(" ")
    token = parts[1].strip() if len(parts) > 1 else ""
    if not token:
        raise HTTPException(status_code=401, detail="Token missing")
    return token


async def get_current_user(request: Request):
    """Dependency to get the token payload of the authenticated caller"""
    token = _bearer_token(request)
    try:
        payload = decode_token(token)
    except jwt.InvalidTokenError as e:
        logger.info("Rejected token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid token")

    return {"id": str(payload["id"]), "email": payload.get("email"), "username": payload.get("username")}


async def get_optional_user(request: Request) -> Optional[dict]:
    """Like get_current_user but anonymous callers and bad tokens pass through"""
    if not request.headers.get("authorization"):
        return None
    try:
        return await get_current_user(request)
    except HTTPException:
        return None
