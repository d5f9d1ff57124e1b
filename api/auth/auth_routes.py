"""Authentication routes"""
import logging

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request

from core.models import LoginIn, ProfileUpdate, RefreshIn, RegisterIn, utcnow
from core.response import send_success
from .dependencies import get_current_user
from .utils import create_tokens, decode_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")

CLEARABLE_PROFILE_FIELDS = {"bio", "learning_goal"}


@router.post("/register")
async def register(payload: RegisterIn, request: Request):
    """Register a new user"""
    users = request.app.state.users
    if users.find_by_email_or_username(payload.email, payload.username):
        raise HTTPException(status_code=409, detail="User already exists with this email or username")

    user = users.add(
        email=payload.email,
        username=payload.username,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    logger.info("Registered user %s (%s)", user.id, user.username)

    return send_success(
        {"user": user.public(), "tokens": create_tokens(user)},
        "User registered successfully",
        201,
    )


@router.post("/login")
async def login(payload: LoginIn, request: Request):
    """Login user and issue tokens"""
    users = request.app.state.users

    user = users.get_by_email(payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is deactivated")

    user.last_login_at = utcnow()
    return send_success({"user": user.public(), "tokens": create_tokens(user)}, "Login successful")


@router.post("/refresh")
async def refresh(payload: RefreshIn, request: Request):
    """Exchange a refresh token for a new token pair"""
    try:
        claims = decode_token(payload.refresh_token, expected_type="refresh")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = request.app.state.users.get_by_id(str(claims["id"]))
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    return send_success({"tokens": create_tokens(user)}, "Tokens refreshed successfully")


@router.get("/profile")
async def get_profile(request: Request, current=Depends(get_current_user)):
    """Get current user profile"""
    user = request.app.state.users.get_by_id(current["id"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return send_success(user.public(), "Profile retrieved successfully")


@router.put("/profile")
async def update_profile(payload: ProfileUpdate, request: Request, current=Depends(get_current_user)):
    """Update profile fields that were sent"""
    user = request.app.state.users.get_by_id(current["id"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    for field, value in payload.model_dump(exclude_unset=True).items():
        # names are required strings; only bio and learning goal can be cleared
        if value is None and field not in CLEARABLE_PROFILE_FIELDS:
            continue
        setattr(user, field, value)

    return send_success(user.public(), "Profile updated successfully")
