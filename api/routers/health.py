# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: health.py
# -----------------------------------------------------------------------------
import logging
from fastapi import APIRouter, Depends, HTTPException

from api.schemas.health import HealthResponse, DeepHealthResponse
from api.dependencies import get_health_service
from services.EtwHealthService import EtwHealthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health_check():
    return HealthResponse(status="ok", message="ETW Vector API running")


@router.get("/deep", response_model=DeepHealthResponse)
def deep_health_check(
    svc: EtwHealthService = Depends(get_health_service),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called")
    try:
        result = svc.deep_health()
        logger.info("GET /health/deep completed successfully")
        return result
    except Exception as e:
        logger.error("GET /health/deep failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Health check failed: {e}")
