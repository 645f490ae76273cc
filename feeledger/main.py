import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from feeledger.api.v1.auth.router import router as auth_router
from feeledger.api.v1.dashboard.router import router as dashboard_router
from feeledger.api.v1.fees.router import router as fees_router
from feeledger.api.v1.students.router import router as students_router
from feeledger.core.config import settings
from feeledger.core.exceptions import ServiceError
from feeledger.core.logging import configure_logging
from feeledger.core.schemas import ErrorEnvelope
from feeledger.db.session import get_db

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, error=None, headers=None) -> JSONResponse:
    body = ErrorEnvelope(message=message, error=error if settings.debug else None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        # Drop the leading "body"/"path"/"query" segment
        loc = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as {success: false, message, error?}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message, error=exc.error_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            error=str(exc),
        )


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Fee Ledger Backend")

    # CORS: the mobile client calls from arbitrary origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/api", tags=["health"])
    async def health(db: AsyncSession = Depends(get_db)) -> dict:
        """Diagnostics for the client: API up, database reachable."""
        try:
            await db.execute(text("SELECT 1"))
            database = "connected"
        except SQLAlchemyError:
            logger.exception("Database health check failed")
            database = "unavailable"
        return {"success": True, "message": "Fee management API running", "database": database}

    # Routers
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(dashboard_router)
    app.include_router(fees_router)

    return app


app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
