"""FastAPI adapter exposing the spam check pipeline over HTTP.

Routes stay thin: every decision lives in the core processor, and error
mapping is centralized in the exception handlers below.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional, Sequence

from fastapi import FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from adapters.http_schemas import ErrorResponse, HistoryItem, SpamCheckRequest, SpamCheckResponse
from core.errors import InvalidInput, PersistenceError
from core.processor import SpamCheckProcessor

LOGGER = logging.getLogger(__name__)

API_VERSION = "1.0.0"
SERVER_ERROR = "Server error"
TEXT_REQUIRED = "Text is required"
INVALID_REQUEST = "Invalid request"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _is_text_error(request: Request, exc: RequestValidationError) -> bool:
    """True when a /check body fails on its text or as a whole."""

    if not request.url.path.endswith("/check"):
        return False
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        # ("body", "<field>") pins a single field; anything shorter is the body itself.
        if len(loc) >= 2 and isinstance(loc[1], str) and loc[1] != "text":
            return False
    return True


def setup_exception_handlers(app: FastAPI) -> None:
    """Map pipeline errors onto the {message} error body."""

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc) or TEXT_REQUIRED)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.debug("Rejected body on %s: %s", request.url.path, exc.errors())
        message = TEXT_REQUIRED if _is_text_error(request, exc) else INVALID_REQUEST
        return _error(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        LOGGER.error("Error in %s: %s", request.url.path, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR)

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error in %s", request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR)


def create_app(
    processor: SpamCheckProcessor,
    cors_origins: Sequence[str] = ("*",),
) -> FastAPI:
    """Build the FastAPI application around an already-wired processor."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        yield
        # Let in-flight alerts finish before the loop goes away.
        await processor.drain()

    app = FastAPI(title="Spam Detector API", version=API_VERSION, lifespan=lifespan)
    app.state.processor = processor
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Spam Detector API is running"

    @app.post(
        "/api/spam/check",
        response_model=SpamCheckResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def check_spam(payload: SpamCheckRequest) -> SpamCheckResponse:
        record = await processor.submit(payload.text, payload.notifyEmail)
        return SpamCheckResponse.from_record(record)

    @app.get(
        "/api/spam/history",
        response_model=List[HistoryItem],
        responses={500: {"model": ErrorResponse}},
    )
    async def spam_history(limit: Optional[int] = Query(None)) -> List[HistoryItem]:
        return [HistoryItem.from_entry(entry) for entry in processor.history(limit)]

    return app
