from fastapi import APIRouter

from graph_calendar.config import is_configured, settings
from graph_calendar.routes.dto import HealthResponse

router = APIRouter()


@router.get("/")
def health_check():
    return {"status": "ok"}


@router.get("/config", response_model=HealthResponse)
def config_health_check():
    """
    Report which app registration settings are configured, without exposing values.
    """
    components = {
        "tenant_id": "configured" if is_configured(settings.AZURE_TENANT_ID) else "missing",
        "client_id": "configured" if is_configured(settings.AZURE_CLIENT_ID) else "missing",
        "client_secret": "configured" if is_configured(settings.AZURE_CLIENT_SECRET) else "missing",
    }
    status = "healthy" if all(value == "configured" for value in components.values()) else "degraded"

    return HealthResponse(status=status, service="calendar", components=components)
