"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from QBMCP import __version__
from QBMCP.utils.logging import get_logger, setup_logging
from backend.api.routes import tools
from backend.config import ConfigurationError, settings
from backend.dependencies import get_quickbase_client
from backend.models.responses import HealthResponse

setup_logging(level=settings.qb_log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    policy = settings.to_policy()
    logger.info(
        f"QuickBase HTTP API ready (read_only={policy.read_only}, "
        f"allow_destructive={policy.allow_destructive})"
    )
    yield
    # Only close the client if a request ever built it
    if get_quickbase_client.cache_info().currsize:
        await get_quickbase_client().aclose()
    logger.info("QuickBase HTTP API shutting down")


app = FastAPI(
    title=settings.api_title,
    version=__version__,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(tools.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Cannot serve {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="healthy")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, workers=1)
