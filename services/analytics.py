import math
from collections import Counter
from datetime import datetime
from typing import List, Optional

import pytz

from models.analytics import AnalyticsSnapshot, DashboardMetrics
from models.enums import IssueCategory, IssuePriority, IssueStatus
from models.report import IssueReport
from utils.formatting import as_utc

SECONDS_PER_DAY = 60 * 60 * 24

ACTIVE_STATUSES = (IssueStatus.REPORTED, IssueStatus.ACKNOWLEDGED, IssueStatus.IN_PROGRESS)


def month_boundaries(now: datetime, tz_name: str = "UTC"):
    """
    Devuelve (inicio del mes actual, inicio del mes anterior) en UTC,
    calculados en la zona horaria configurada.
    """
    tz = pytz.timezone(tz_name)
    local_now = as_utc(now).astimezone(tz)

    start_of_month = tz.localize(datetime(local_now.year, local_now.month, 1))
    if local_now.month == 1:
        start_of_last_month = tz.localize(datetime(local_now.year - 1, 12, 1))
    else:
        start_of_last_month = tz.localize(datetime(local_now.year, local_now.month - 1, 1))

    return as_utc(start_of_month), as_utc(start_of_last_month)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def aggregate(reports: List[IssueReport], now: datetime, tz_name: str = "UTC") -> AnalyticsSnapshot:
    start_of_month, start_of_last_month = month_boundaries(now, tz_name)

    status_counts = Counter()
    category_counts = Counter()
    priority_counts = Counter()
    reports_this_month = 0
    reports_last_month = 0
    resolution_seconds = []

    # --- CICLO ÚNICO ---
    for report in reports:
        meta = report.metadata
        created_at = as_utc(report.created_at)

        status_counts[(meta.status or IssueStatus.REPORTED).value] += 1
        category_counts[(meta.category or IssueCategory.OTHER).value] += 1
        priority_counts[(meta.priority or IssuePriority.MEDIUM).value] += 1

        if created_at >= start_of_month:
            reports_this_month += 1
        elif created_at >= start_of_last_month:
            reports_last_month += 1

        if meta.status == IssueStatus.RESOLVED and meta.actual_resolution_date:
            elapsed = as_utc(meta.actual_resolution_date) - created_at
            resolution_seconds.append(elapsed.total_seconds())

    average_resolution_time = 0
    if resolution_seconds:
        average_days = sum(resolution_seconds) / len(resolution_seconds) / SECONDS_PER_DAY
        average_resolution_time = _round_half_up(average_days)

    return AnalyticsSnapshot(
        total_reports=len(reports),
        reports_by_status=dict(status_counts),
        reports_by_category=dict(category_counts),
        reports_by_priority=dict(priority_counts),
        average_resolution_time=average_resolution_time,
        reports_this_month=reports_this_month,
        reports_last_month=reports_last_month,
    )


def monthly_growth(this_month: int, last_month: int) -> float:
    if last_month > 0:
        return (this_month - last_month) / last_month * 100
    return 100.0 if this_month > 0 else 0.0


def active_reports(snapshot: AnalyticsSnapshot) -> int:
    return sum(snapshot.reports_by_status.get(status.value, 0) for status in ACTIVE_STATUSES)


def pending_share(snapshot: AnalyticsSnapshot) -> int:
    # Porcentaje de reportes que aún esperan acción
    return _round_half_up(active_reports(snapshot) / max(snapshot.total_reports, 1) * 100)


def dashboard_metrics(reports: List[IssueReport], now: datetime,
                      tz_name: Optional[str] = None) -> DashboardMetrics:
    snapshot = aggregate(reports, now, tz_name or "UTC")
    return DashboardMetrics(
        snapshot=snapshot,
        monthly_growth=round(monthly_growth(snapshot.reports_this_month, snapshot.reports_last_month), 1),
        active_reports=active_reports(snapshot),
        pending_share=pending_share(snapshot),
    )
