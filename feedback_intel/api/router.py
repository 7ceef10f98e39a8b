from fastapi import APIRouter

from feedback_intel.api.v1 import (
    classify,
    config,
    dashboard,
    feedback,
    ingest,
    meta,
    seed,
    summary,
    themes,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(ingest.router)
api_router.include_router(classify.router)
api_router.include_router(feedback.router)
api_router.include_router(dashboard.router)
api_router.include_router(summary.router)
api_router.include_router(themes.router)
api_router.include_router(config.router)
api_router.include_router(seed.router)
api_router.include_router(meta.router)
