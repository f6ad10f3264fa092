"""FastAPI application factory for CSE Whiteboard."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cse_whiteboard.common.config import get_settings
from cse_whiteboard.common.exceptions import ValidationError, WhiteboardError
from cse_whiteboard.common.logging import setup_logging
from cse_whiteboard.common.schemas import ErrorResponse, HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from cse_whiteboard.deps import get_db, get_summary_client
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        client = get_summary_client()
        if client is not None:
            await client.close()
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WhiteboardError)
    async def whiteboard_error_handler(request: Request, exc: WhiteboardError):
        body = ErrorResponse(
            error=type(exc).__name__,
            code=exc.code,
            detail=exc.message,
            field=exc.field if isinstance(exc, ValidationError) else None,
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from cse_whiteboard.customers.router import router as customer_router
    from cse_whiteboard.notes.router import router as note_router
    from cse_whiteboard.todos.router import router as todo_router
    from cse_whiteboard.audit.router import router as audit_router
    from cse_whiteboard.reports.router import router as report_router

    prefix = settings.api_prefix
    app.include_router(customer_router, prefix=prefix, tags=["customers"])
    app.include_router(note_router, prefix=prefix, tags=["notes"])
    app.include_router(todo_router, prefix=prefix, tags=["todos"])
    app.include_router(audit_router, prefix=prefix, tags=["audit"])
    app.include_router(report_router, prefix=prefix, tags=["reports"])

    return app
