"""
Health Check Endpoints

Provides health status of the API and its ledger deployment.
"""
from fastapi import APIRouter
from datetime import datetime

from app.api.schemas import HealthCheckResponse
from app.config import settings
from app.core.ledger_service import get_deployment

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """
    Health check endpoint

    Reports unhealthy when the ledger holds no reward tokens to pay out.
    """
    funded = get_deployment().ledger.reward_balance() > 0
    return HealthCheckResponse(
        status="healthy" if funded else "unhealthy",
        version=settings.API_VERSION,
        timestamp=datetime.utcnow()
    )
