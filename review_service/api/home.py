"""
Home/Root API endpoints
"""

from fastapi import APIRouter

from review_service.core.config import config

router = APIRouter()


@router.get("/")
async def root():
    """Service information"""
    return {
        "service": config.service_name,
        "version": config.service_version,
        "environment": config.environment,
        "message": "Review Service is running",
    }


@router.get("/version")
def get_version():
    return {"version": config.service_version}
