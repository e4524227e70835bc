"""API error types and their JSON rendering.

Error bodies are `{"error": ...}` with an optional `"details"` field
carrying the underlying library message.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class APIError(Exception):
    """Exception rendered as a JSON error response."""

    def __init__(self, status_code: int, error: str, details: str | None = None):
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(error)

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            content["details"] = self.details
        return content


class ClientInputError(APIError):
    """Missing or malformed request fields."""

    def __init__(self, error: str, details: str | None = None):
        super().__init__(400, error, details)


def describe_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Summarize pydantic errors as "field: message" pairs."""
    parts = []
    for err in errors:
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an application."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request",
                "details": describe_validation_errors(list(exc.errors())),
            },
        )
