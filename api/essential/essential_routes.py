"""Essential learning content routes"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.auth.dependencies import get_optional_user
from core.response import send_paginated, send_success
from services import essential

router = APIRouter(prefix="/essential", dependencies=[Depends(get_optional_user)])


@router.get("/categories")
async def list_categories():
    """All essential categories"""
    return send_success(essential.get_categories(), "Essential categories retrieved successfully")


@router.get("/categories/{category_id}")
async def get_category(category_id: str):
    category = essential.get_category(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return send_success(category, "Category retrieved successfully")


@router.get("/categories/{category_id}/content")
async def get_category_content(
    category_id: str,
    content_type: Optional[str] = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """Paginated content of a category, optionally filtered by content type"""
    items, total = essential.get_category_content(category_id, content_type, page, limit)
    return send_paginated(items, page, limit, total, "Category content retrieved successfully")


@router.get("/content/{content_id}")
async def get_content(content_id: str):
    content = essential.get_content(content_id)
    if not content:
        raise HTTPException(status_code=404, detail="Content not found")
    return send_success(content, "Content retrieved successfully")
