"""WarrantyWatch Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from warrantywatch import __version__
from warrantywatch.config import settings
from warrantywatch.connectors import default_manufacturer_connectors, default_platform_connectors
from warrantywatch.database import create_store
from warrantywatch.errors import AuthenticationRequiredError, ValidationError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the device store and connector registries on startup."""
    app.state.settings = settings
    app.state.store = create_store(settings)
    app.state.manufacturer_connectors = default_manufacturer_connectors()
    app.state.platform_connectors = default_platform_connectors()
    logger.info("%s started in %s mode", settings.server_name, settings.deployment_mode)

    yield

    app.state.store.close()


app = FastAPI(
    title="WarrantyWatch",
    description="Device pool reconciliation and warranty sync for MSPs",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthenticationRequiredError)
async def authentication_required_handler(request: Request, exc: AuthenticationRequiredError):
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# --- Register API routers ---
from warrantywatch.api.devices import router as devices_router  # noqa: E402
from warrantywatch.api.sync import router as sync_router  # noqa: E402

API_PREFIX = "/api/v1"

app.include_router(sync_router, prefix=API_PREFIX)
app.include_router(devices_router, prefix=API_PREFIX)


@app.get("/")
def root():
    """Health check / server info."""
    return {
        "name": settings.server_name,
        "mode": settings.deployment_mode,
        "version": __version__,
        "status": "running",
    }


@app.get("/api/v1/health")
def health():
    return {"status": "ok"}
