import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from feedback_intel.api.router import api_router
from feedback_intel.api.v1.meta import API_DESCRIPTION, health_payload
from feedback_intel.config import settings
from feedback_intel.core.database import init_db


def setup_logging() -> None:
    """Configure application logging."""
    # Format: timestamp - level - logger name - message
    log_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    # Request logging is done by the middleware below
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    from feedback_intel.services.scheduler import scheduler

    # Startup
    setup_logging()
    logger.info("Feedback Intelligence API starting up")
    if settings.debug:
        await init_db()
    if not settings.llm_enabled:
        logger.warning("ANTHROPIC_API_KEY not set; classification endpoints will return 503")
    scheduler.start()
    yield
    # Shutdown
    scheduler.stop()
    logger.info("Feedback Intelligence API shutting down")


app = FastAPI(
    title="Feedback Intelligence API",
    description="Classifies and routes user feedback and produces PM summaries",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log failed requests and the LLM-backed endpoints."""
    if request.method == "OPTIONS" or request.url.path == "/health":
        return await call_next(request)

    response = await call_next(request)

    path = request.url.path
    if response.status_code >= 400 or any(
        keyword in path for keyword in ["classify", "summary", "themes", "ingest", "seed"]
    ):
        logger.info(f"{request.method} {path} -> {response.status_code}")

    return response


app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return health_payload()


@app.get("/api")
async def describe_api() -> dict[str, Any]:
    """Describe the API, classification axes and default routing thresholds."""
    return API_DESCRIPTION
