"""
HTTP error types raised by the service layer.

Each error carries a machine-readable ``code``; ``error_response`` renders any
HTTP error into the envelope the frontend expects:

    {"error": {"code": "NOT_FOUND", "message": "...", "status": 404}}
"""

from __future__ import annotations

from fastapi import HTTPException
from starlette.responses import JSONResponse

STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    500: "INTERNAL_ERROR",
}


class ApiError(HTTPException):
    status_code_default = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code_default, detail=message)

    @property
    def message(self) -> str:
        return self.detail


class BadRequestError(ApiError):
    status_code_default = 400
    code = "BAD_REQUEST"


class UnauthorizedError(ApiError):
    status_code_default = 401
    code = "UNAUTHORIZED"


class ForbiddenError(ApiError):
    status_code_default = 403
    code = "FORBIDDEN"


class NotFoundError(ApiError):
    status_code_default = 404
    code = "NOT_FOUND"


def error_response(status_code: int, message: str, code: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code or STATUS_CODES.get(status_code, "ERROR"),
                "message": message,
                "status": status_code,
            }
        },
    )
