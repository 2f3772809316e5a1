"""
Lookups API Server
Core functionality: countries, devices and educational institutions kept in
sync across the primary store and the search index
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import API_VERSION, ALLOWED_ORIGINS, LOG_LEVEL, PAGINATION_HEADERS
from api.routes import health, countries, devices, educational_institutions
from services.container import ServiceContainer, create_container
from utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        container: Pre-built services; when None the lifespan connects to the real stores
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        owned = container is None
        app.state.container = await create_container() if owned else container
        yield
        if owned:
            await app.state.container.close()

    app = FastAPI(
        title="Lookups API",
        description="Lookup data (countries, devices, educational institutions) with search index and primary store sync",
        version="1.0.0",
        lifespan=lifespan
    )
    if container is not None:
        app.state.container = container

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=PAGINATION_HEADERS + ["Link"],
    )

    # Setup centralized error handling
    setup_error_handling(app)

    # Include API routes
    app.include_router(health.router, prefix=API_VERSION, tags=["Health"])
    app.include_router(countries.router, prefix=f"{API_VERSION}/lookups/countries", tags=["Countries"])
    app.include_router(devices.router, prefix=f"{API_VERSION}/lookups/devices", tags=["Devices"])
    app.include_router(
        educational_institutions.router,
        prefix=f"{API_VERSION}/lookups/educationalInstitutions",
        tags=["Educational Institutions"]
    )
    return app


# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
app = create_app()
