"""Dashboard Routes."""

from fastapi import APIRouter, Depends

from backoffice.api.dependencies import get_dashboard_handlers
from backoffice.handlers.handle_operations import DashboardHandlers
from backoffice.schemas.dashboard import DashboardOverview

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/overview", response_model=DashboardOverview)
async def dashboard_overview(
    handlers: DashboardHandlers = Depends(get_dashboard_handlers),
):
    return await handlers.overview()
