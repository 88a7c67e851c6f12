"""FastAPI main application."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.middleware import setup_middleware
from api.routes import health, loads, shipments
from api.schemas import error_envelope
from config import get_settings
from exceptions import LoadBridgeException, ValidationError
from integrations import ShipmentClient, TokenManager
from logging_config import get_logger, setup_logging

settings = get_settings()
setup_logging(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info("Starting TMS Load Bridge API")

    # Fails startup with ConfigError if any credential is missing
    credentials = settings.tms_credentials()

    http_client = httpx.AsyncClient(timeout=settings.tms_request_timeout)
    token_manager = TokenManager(credentials, http_client)
    app.state.token_manager = token_manager
    app.state.shipment_client = ShipmentClient(credentials, token_manager, http_client)

    logger.info("TMS client initialized", base_url=credentials.base_url)

    yield

    await http_client.aclose()
    logger.info("Shutting down TMS Load Bridge API")


app = FastAPI(
    title="TMS Load Bridge",
    description="Creates and lists TMS shipments from canonical freight loads",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
)
setup_middleware(app)


# Exception handlers
@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle malformed caller input."""
    logger.warning("Invalid request", error=str(exc))
    return error_envelope(400, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request bodies and parameters FastAPI could not parse."""
    logger.warning("Invalid request data", errors=len(exc.errors()))
    return error_envelope(400, f"Invalid request data: {exc.errors()}")


@app.exception_handler(LoadBridgeException)
async def load_bridge_exception_handler(request: Request, exc: LoadBridgeException):
    """Handle auth, upstream, decode and transport failures."""
    logger.error("Request failed", error=str(exc), error_type=type(exc).__name__)
    return error_envelope(500, str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    return error_envelope(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), exc_info=True)
    return error_envelope(500, "Internal server error")


app.include_router(health.router, tags=["Health"])
app.include_router(loads.router, prefix="/api", tags=["Loads"])
app.include_router(shipments.router, prefix="/api", tags=["Shipments"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "TMS Load Bridge",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.is_development,
    )
