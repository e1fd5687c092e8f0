"""Health check routes"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import logging

from adapters import mongo_adapter
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("recipeshare.api.health")


@router.get("/health-check")
def health_check():
    """Basic health check endpoint"""
    return {"status": "ok", "service": settings.app_name, "version": settings.app_version}


@router.get("/health/db")
def database_health():
    """Report whether MongoDB answers a ping."""
    if mongo_adapter.ping():
        return {"status": "ok", "database": "mongodb"}
    logger.warning("database_health_failed database=mongodb")
    return JSONResponse(
        status_code=503, content={"status": "unavailable", "database": "mongodb"}
    )
