from fastapi import APIRouter

from app.core.config.scoring import get_scoring_value

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy", "scoring_config_version": str(get_scoring_value("version", "unknown"))}
