# Búsqueda, filtros y orden en memoria para el panel y el mapa
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from models.enums import DateRange, IssueCategory, IssuePriority, IssueStatus, SortOrder
from models.report import IssueReport, MapMarker
from services.rules import PRIORITY_ORDER, category_color
from utils.formatting import as_utc
from utils.geo import haversine_distance_km

RANGE_DAYS = {
    DateRange.LAST_7_DAYS: 7,
    DateRange.LAST_30_DAYS: 30,
    DateRange.LAST_90_DAYS: 90,
}


def _matches_search(report: IssueReport, term: str) -> bool:
    term = term.lower()
    meta = report.metadata
    return (
        term in report.title.lower()
        or term in (meta.description or "").lower()
        or term in meta.category.value
    )


def filter_reports(
    reports: Iterable[IssueReport],
    search: Optional[str] = None,
    status: Optional[IssueStatus] = None,
    categories: Optional[List[IssueCategory]] = None,
    priorities: Optional[List[IssuePriority]] = None,
    date_range: DateRange = DateRange.ALL,
    near: Optional[Tuple[float, float]] = None,
    radius_km: Optional[float] = None,
    now: Optional[datetime] = None,
) -> List[IssueReport]:
    now = as_utc(now or datetime.now(timezone.utc))
    cutoff = None
    if date_range in RANGE_DAYS:
        cutoff = now - timedelta(days=RANGE_DAYS[date_range])

    filtered = []
    for report in reports:
        meta = report.metadata
        if search and not _matches_search(report, search):
            continue
        if status and meta.status != status:
            continue
        if categories and meta.category not in categories:
            continue
        if priorities and meta.priority not in priorities:
            continue
        if cutoff and as_utc(report.created_at) < cutoff:
            continue
        if near and radius_km is not None:
            latitude, longitude = meta.location_coordinates
            if haversine_distance_km(near[0], near[1], latitude, longitude) > radius_km:
                continue
        filtered.append(report)

    return filtered


def sort_reports(reports: Iterable[IssueReport], order: SortOrder = SortOrder.NEWEST) -> List[IssueReport]:
    if order == SortOrder.OLDEST:
        return sorted(reports, key=lambda r: as_utc(r.created_at))
    if order == SortOrder.PRIORITY:
        return sorted(reports, key=lambda r: PRIORITY_ORDER.get(r.metadata.priority, 2), reverse=True)
    return sorted(reports, key=lambda r: as_utc(r.created_at), reverse=True)


def to_map_markers(reports: Iterable[IssueReport]) -> List[MapMarker]:
    markers = []
    for report in reports:
        meta = report.metadata
        if not meta.location_coordinates or len(meta.location_coordinates) != 2:
            continue
        markers.append(
            MapMarker(
                id=report.id,
                slug=report.slug,
                position=meta.location_coordinates,
                title=report.title,
                description=meta.description,
                category=meta.category,
                status=meta.status,
                priority=meta.priority,
                color=category_color(meta.category),
                created_at=report.created_at,
            )
        )
    return markers
