# metrics_routes.py - Estadísticas del panel calculadas en cada petición
import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from config import Settings
from models.analytics import DashboardMetrics
from routes.dependencies import get_clock, get_repository, get_settings
from services.analytics import dashboard_metrics
from services.errors import StoreFailure
from services.report_repository import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Metrics"])


@router.get("", response_model=DashboardMetrics)
def get_metrics(
    repository: ReportRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
    clock: Callable = Depends(get_clock),
):
    try:
        reports = repository.list_reports()
    except StoreFailure:
        logger.exception("Error obteniendo datos de analítica")
        raise HTTPException(status_code=500, detail="Failed to get analytics data")

    return dashboard_metrics(reports, clock(), settings.timezone)
