"""
Health check API route
"""

from fastapi import APIRouter

from config.settings import SERVICE_NAME
from models.guestbook import HealthResponse

router = APIRouter()

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness check - does not touch the database"""
    return HealthResponse(status="ok", service=SERVICE_NAME)
