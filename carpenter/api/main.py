"""Carpenter API - serves registered tables over HTTP.

- GET /v1/tables               list registered tables
- GET /v1/tables/{name}        HTML rendering
- GET /v1/tables/{name}/csv    CSV export
- GET /v1/tables/{name}/data   JSON payload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carpenter import __version__
from carpenter.api.routes import tables
from carpenter.carpenter import Carpenter
from carpenter.config import load_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def bootstrap_carpenter() -> Carpenter:
    """Create a Carpenter from CARPENTER_CONFIG and load its tables file."""
    config = load_config()
    carpenter = Carpenter(config)
    if config.tables.location:
        carpenter.load_tables()
    return carpenter


def create_app(carpenter: Optional[Carpenter] = None) -> FastAPI:
    """Create the API application.

    Args:
        carpenter: Pre-built registry. When omitted, one is bootstrapped
                   from configuration at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if app.state.carpenter is None:
            logger.info("Loading table definitions...")
            app.state.carpenter = bootstrap_carpenter()
        logger.info(f"Carpenter API ready: {app.state.carpenter.count()} tables")
        yield
        logger.info("Shutting down Carpenter API")

    app = FastAPI(
        title="Carpenter API",
        description="Paginated, sortable data tables rendered as HTML, CSV or JSON.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.carpenter = carpenter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tables.router, prefix="/v1")

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "service": "Carpenter API",
            "version": __version__,
            "docs": "/docs",
            "endpoints": {
                "tables": "/v1/tables",
            },
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        registry = app.state.carpenter
        return {
            "status": "healthy",
            "tables_loaded": registry.count() if registry is not None else 0,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "carpenter.api.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
    )
