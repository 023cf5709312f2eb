"""Client configuration served before login."""

from fastapi import APIRouter

from src.config.settings import get_settings

router = APIRouter(prefix="/api/v1/app-config", tags=["App Config"])


@router.get("", summary="Get app config")
def app_config():
    settings = get_settings()
    return {
        "minimumAppVersion": {
            "ios": settings.MIN_APP_VERSION_IOS,
            "android": settings.MIN_APP_VERSION_ANDROID,
        }
    }
