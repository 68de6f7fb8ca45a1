from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class PortalError(Exception):
    """Base for failures that map to an HTTP status"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PortalError):
    status_code = 404


class ForbiddenError(PortalError):
    status_code = 403


class ExternalServiceError(PortalError):
    status_code = 500


async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(PortalError, portal_error_handler)
