"""Uniform JSON envelope for every API response"""
import logging
import math
from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import NODE_ENV

logger = logging.getLogger(__name__)


def send_success(data: Any = None, message: Optional[str] = None, status_code: int = 200) -> JSONResponse:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def send_error(error: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def send_paginated(data: List[Any], page: int, limit: int, total: int, message: Optional[str] = None) -> JSONResponse:
    body = {
        "success": True,
        "data": data,
        "message": message,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
    }
    return JSONResponse(status_code=200, content=jsonable_encoder(body))


def send_validation_error(errors: List[str]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "details": errors},
    )


def format_validation_errors(exc: RequestValidationError) -> List[str]:
    """Turn pydantic error entries into '<field>: <reason>' strings"""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return errors


def install_exception_handlers(app: FastAPI):
    """Render framework and unexpected errors in the envelope"""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "error": "Not Found",
                    "message": f"Route {request.method} {request.url.path} not found",
                },
            )
        if isinstance(exc.detail, list):
            return send_validation_error(exc.detail)
        return send_error(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return send_validation_error(format_validation_errors(exc))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal Server Error",
                "message": str(exc) if NODE_ENV == "development" else "Something went wrong",
            },
        )
