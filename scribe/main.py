"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from scribe.api.v1 import router as v1_router
from scribe.core.config import settings
from scribe.core.errors import ScribeError, StoreError, Unauthenticated

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"

app = FastAPI(
    title="Scribe API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_PREFIX)


def _envelope(
    status_code: int,
    message: str,
    error: str,
    headers: dict[str, str] | None = None,
    detail: str | None = None,
) -> JSONResponse:
    content = {"success": False, "message": message, "error": error}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _internal_detail(exc: BaseException) -> str | None:
    """Underlying error text, exposed only outside production."""
    return str(exc) if settings.APP_ENV == "dev" else None


@app.exception_handler(ScribeError)
async def handle_scribe_error(_: Request, exc: ScribeError) -> JSONResponse:
    if isinstance(exc, StoreError):
        return _envelope(
            exc.status_code,
            exc.message if settings.APP_ENV == "dev" else GENERIC_ERROR_MESSAGE,
            exc.code,
            detail=_internal_detail(exc.cause) if exc.cause is not None else None,
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return _envelope(exc.status_code, exc.message, exc.code, headers)


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database error" if settings.APP_ENV == "dev" else GENERIC_ERROR_MESSAGE,
        StoreError.code,
        detail=_internal_detail(exc),
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return _envelope(
        status.HTTP_400_BAD_REQUEST,
        "Validation error: " + "; ".join(problems),
        "validation_error",
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Something went wrong!",
        ScribeError.code,
        detail=_internal_detail(exc),
    )


@app.get("/")
def root() -> dict[str, object]:
    """Root route; minimal payload for discovery."""
    return {
        "message": "Scribe API",
        "endpoints": {
            "auth": f"{settings.API_PREFIX}/auth",
            "blogs": f"{settings.API_PREFIX}/blogs",
        },
    }
