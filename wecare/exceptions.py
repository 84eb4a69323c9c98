from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional

class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=status_code, detail=detail)
        self.extra = extra or {}


class ValidationError(APIException):
    """Missing or malformed input, with per-field messages."""

    def __init__(self, detail: str = "Invalid request", fields: Optional[Dict[str, str]] = None):
        super().__init__(400, detail, {"fields": fields or {}})
        self.fields = fields or {}


class AuthorizationError(APIException):
    # Message stays generic so it never reveals another actor's resource
    def __init__(self, detail: str = "Not authorized to perform this action"):
        super().__init__(403, detail)


class NotFoundError(APIException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(404, detail)


class InvalidStateError(APIException):
    def __init__(self, detail: str, current_status: Optional[str] = None):
        super().__init__(409, detail, {"currentStatus": current_status})
        self.current_status = current_status


def create_error_response(error_message: str, status_code: int = 400, extra: Optional[Dict[str, Any]] = None) -> dict:
    """Create a standardized error response"""
    body = {
        "success": False,
        "data": None,
        "error": error_message
    }
    if extra:
        body.update(extra)
    return body

def create_success_response(data: Any) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None
    }

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    # Convert 403 from HTTPBearer to 401 for missing authentication
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return JSONResponse(
            status_code=401,
            content=create_error_response("Authentication required", 401)
        )

    extra = getattr(exc, "extra", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, exc.status_code, extra),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/query parsing failures use the same envelope, keyed by field."""
    fields = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields[".".join(loc) or "body"] = err.get("msg", "Invalid value")
    return JSONResponse(
        status_code=422,
        content=create_error_response("Invalid request", 422, {"fields": fields}),
    )
