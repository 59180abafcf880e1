from pydantic import BaseModel
from typing import Dict

# Estadísticas derivadas de la colección de reportes (no se guardan)
class AnalyticsSnapshot(BaseModel):
    total_reports: int
    reports_by_status: Dict[str, int]
    reports_by_category: Dict[str, int]
    reports_by_priority: Dict[str, int]
    average_resolution_time: int  # Días enteros
    reports_this_month: int
    reports_last_month: int

# Respuesta del endpoint de métricas del panel
class DashboardMetrics(BaseModel):
    snapshot: AnalyticsSnapshot
    monthly_growth: float
    active_reports: int
    pending_share: int  # Porcentaje entero
