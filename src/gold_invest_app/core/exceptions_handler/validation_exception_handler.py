from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form"))
    if location:
        return f"{location}: {error.get('msg')}"
    return str(error.get("msg"))


# Request schema errors are reported as 400 like every other validation failure
async def validation_exception_handler(_: Request, exc: Exception):
    if isinstance(exc, RequestValidationError):
        errors = exc.errors()
        message = "; ".join(_describe(error) for error in errors) or "Invalid request"
        logger.warning(f"Validation Error: {message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": message,
            },
        )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Invalid request"
        }
    )
