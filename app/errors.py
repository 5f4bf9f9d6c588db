"""
Error taxonomy for user-data-service and the FastAPI handlers that render it.

- InvalidArgument: malformed or missing request fields (400)
- Unauthorized: request without a resolved identity on protected routes (401)
- StoreFailure: any DynamoDB call failed (500, generic message)
"""
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class UserDataError(Exception):
    """Base error carrying the HTTP status and the client-facing message"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(UserDataError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(UserDataError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class StoreFailure(UserDataError):
    """A DynamoDB call failed. The cause is chained and only logged."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def user_data_error_handler(request: Request, exc: UserDataError) -> JSONResponse:
    content = {"error": exc.message}
    if isinstance(exc, StoreFailure):
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            f"{exc.message} ({request.method} {request.url.path}, request_id={request_id}): "
            f"{exc.__cause__!r}",
            exc_info=exc.__cause__,
        )
        content["request_id"] = request_id
    return JSONResponse(status_code=exc.status_code, content=content)


def validation_message(exc: RequestValidationError) -> str:
    """
    Flatten pydantic errors into a single message.

    Model validators raise ValueError with the exact message the API returns,
    pydantic prefixes those with "Value error, " which is stripped here.
    """
    messages = []
    for error in exc.errors():
        msg = str(error.get("msg", "Invalid request"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        else:
            loc = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            if loc:
                msg = f"{loc}: {msg}"
        if msg not in messages:
            messages.append(msg)
    return "; ".join(messages) or "Invalid request"


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body validation failures are reported as InvalidArgument (400), not 422"""
    message = validation_message(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=InvalidArgument.status_code, content={"error": message})


def register_exception_handlers(app) -> None:
    app.add_exception_handler(UserDataError, user_data_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
