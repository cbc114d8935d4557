"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dataroom import __version__
from dataroom.api.v1.api import api_router
from dataroom.components.workspace import PersistenceError, Workspace, create_workspace
from dataroom.settings import settings
from dataroom.utils import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(workspace: Workspace | None = None) -> FastAPI:
    """Build the application.

    Args:
        workspace: Pre-built workspace to serve; when omitted one is created
            from settings and its database schema is initialized on startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging("dataroom")
        active = workspace
        if active is None:
            if not settings.use_memory_store:
                from dataroom.db import init_db

                init_db()
            active = create_workspace()
        await active.service.initialize()
        app.state.workspace = active
        logger.info(f"DataRoom API started ({settings.environment})")
        yield
        if workspace is None and not settings.use_memory_store:
            from dataroom.db import close_db

            close_db()
        logger.info("DataRoom API stopped")

    app = FastAPI(
        title="DataRoom API",
        description="Rooms, folders and PDF documents",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        """Service banner."""
        return {"status": "ok", "service": "DataRoom API", "version": __version__}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        if settings.use_memory_store:
            return {"status": "healthy"}

        from dataroom.db import check_connection

        database_ok = check_connection()
        return {"status": "healthy" if database_ok else "degraded", "database": database_ok}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "dataroom.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
