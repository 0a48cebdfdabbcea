"""Main FastAPI application for the cross-chain tracker."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import get_registry, set_registry
from api.models import HealthResponse
from api.routes import operations, websocket
from registry import OperationRegistry
from service import TrackerService, load_service

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(
    service: Optional[TrackerService] = None,
    registry: Optional[OperationRegistry] = None,
) -> FastAPI:
    """Create the API application.

    Args:
        service: Service to run; built from the environment when omitted
        registry: Use this registry instead of starting a service
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle."""
        logger.info("Starting cross-chain tracker API...")

        running_service = None
        active = registry
        if active is None:
            running_service = service or load_service()
            await running_service.start()
            active = running_service.registry

        active.add_listener(websocket.broadcast_operation_update)
        set_registry(active)
        logger.info("Cross-chain tracker API started successfully")

        yield

        logger.info("Stopping cross-chain tracker API...")
        set_registry(None)
        if running_service is not None:
            await running_service.stop()
        else:
            active.shutdown()
        logger.info("Cross-chain tracker API stopped")

    app = FastAPI(
        title="Cross-Chain Tracker API",
        description="Progress of LayerZero messages and CCTP transfers",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Enable CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify your frontend domain
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(operations.router)
    app.include_router(websocket.router)

    @app.get("/", response_model=HealthResponse)
    async def root():
        """API health check."""
        return HealthResponse(
            status="online",
            service="Cross-Chain Tracker API",
            version=VERSION,
            operations=len(get_registry()),
        )

    @app.get("/health")
    async def health_check():
        """Simple health check for monitoring."""
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info"
    )
