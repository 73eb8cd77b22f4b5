"""
Exception handlers that keep error bodies in the ``AuthResponse`` shape.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from auth.schemas import AuthResponse

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """Turn pydantic error dicts into ``"field: message"`` strings."""
    out: List[str] = []
    for err in errors:
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith(_VALUE_ERROR_PREFIX):
            msg = msg[len(_VALUE_ERROR_PREFIX):]
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        out.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return out


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc.errors())
        logger.debug("%s %s — invalid request: %s", request.method, request.url.path, errors)
        body = AuthResponse(success=False, message="Invalid model state", errors=errors)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.to_json())
