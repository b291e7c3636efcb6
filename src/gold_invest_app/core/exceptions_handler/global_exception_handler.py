from fastapi import Request, status
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


# Handler for any unexpected errors
async def global_exception_handler(request: Request, exc: Exception):
    expose_errors = getattr(request.app.state, "expose_errors", False)
    logger.error(f"Global Error Captured on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)

    content = {
        "success": False,
        "message": "Server error",
    }
    if expose_errors:
        content["error_details"] = str(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )
