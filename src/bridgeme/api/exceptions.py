"""Exception handlers translating pre-stream failures to JSON errors."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bridgeme.core.llm import GenerationUnavailableError, MissingCredentialError

from .models import ErrorResponse

logger = logging.getLogger(__name__)

MESSAGE_REQUIRED = "Message is required."


class EmptyMessageError(Exception):
    """The request carried no usable message."""

    def __init__(self) -> None:
        super().__init__(MESSAGE_REQUIRED)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(EmptyMessageError)
    async def handle_empty_message(
        request: Request, exc: EmptyMessageError
    ) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.debug("Rejected malformed request: %s", exc.errors())
        return _error(400, "Invalid request body.")

    @app.exception_handler(MissingCredentialError)
    async def handle_missing_credential(
        request: Request, exc: MissingCredentialError
    ) -> JSONResponse:
        logger.error("%s; rejecting chat request.", exc)
        return _error(
            500,
            f"Missing {exc.env_name}. Set it in .env and restart the server.",
        )

    @app.exception_handler(GenerationUnavailableError)
    async def handle_generation_unavailable(
        request: Request, exc: GenerationUnavailableError
    ) -> JSONResponse:
        return _error(500, str(exc))
