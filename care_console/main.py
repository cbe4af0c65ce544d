"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from care_console.api.client import ConsoleApiClient
from care_console.api.routes import router
from care_console.config import get_settings
from care_console.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("application_starting")

    store = ConsoleApiClient()
    await store.connect()
    app.state.store = store
    logger.info("api_client_initialized")

    yield

    logger.info("application_shutting_down")
    await store.disconnect()


app = FastAPI(
    title="Customer Care Console",
    description="Loyalty points, vouchers and customer history for the care team",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "customer-care-console"}


app.include_router(router, prefix="/api/v1", tags=["customers"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "care_console.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )
