from datetime import datetime, timedelta, timezone

import pytest

from conftest import NOW, report_metadata
from models.report import IssueReport
from services.analytics import (
    _round_half_up,
    active_reports,
    aggregate,
    dashboard_metrics,
    month_boundaries,
    monthly_growth,
    pending_share,
)


def make_report(created_at, **overrides):
    return IssueReport(
        id=f"r-{created_at.isoformat()}",
        slug="r",
        title="Report",
        created_at=created_at,
        metadata=report_metadata(**overrides),
    )


def test_empty_collection():
    snapshot = aggregate([], NOW)

    assert snapshot.total_reports == 0
    assert snapshot.average_resolution_time == 0
    assert snapshot.reports_by_status == {}
    assert snapshot.reports_by_category == {}
    assert snapshot.reports_by_priority == {}
    assert snapshot.reports_this_month == 0
    assert snapshot.reports_last_month == 0


def test_average_resolution_time_in_days():
    created = NOW - timedelta(days=40)
    reports = [
        make_report(created, status="resolved", actual_resolution_date=created + timedelta(days=2)),
        make_report(NOW - timedelta(days=10)),
    ]

    snapshot = aggregate(reports, NOW)

    assert snapshot.total_reports == 2
    assert snapshot.average_resolution_time == 2


def test_resolution_time_ignores_unstamped_and_other_statuses():
    created = NOW - timedelta(days=20)
    reports = [
        make_report(created, status="resolved"),
        make_report(created, status="closed", actual_resolution_date=created + timedelta(days=9)),
        make_report(created, status="resolved", actual_resolution_date=created + timedelta(days=2)),
        make_report(created, status="resolved", actual_resolution_date=created + timedelta(days=3)),
    ]

    # (2 + 3) / 2 = 2.5 se redondea hacia arriba
    assert aggregate(reports, NOW).average_resolution_time == 3


def test_group_by_counts_and_defaults():
    reports = [
        make_report(NOW, status="reported", category="potholes", priority="high"),
        make_report(NOW, status="reported", category="graffiti", priority="medium"),
        make_report(NOW, status="closed", category="potholes", priority="high"),
    ]
    # Un objeto guardado sin estado/categoría/prioridad usa los valores por omisión
    bare = report_metadata()
    for key in ("status", "category", "priority"):
        bare.pop(key)
    reports.append(IssueReport(id="bare", slug="bare", title="Bare", created_at=NOW, metadata=bare))

    snapshot = aggregate(reports, NOW)

    assert snapshot.reports_by_status == {"reported": 3, "closed": 1}
    assert snapshot.reports_by_category == {"potholes": 2, "graffiti": 1, "other": 1}
    assert snapshot.reports_by_priority == {"high": 2, "medium": 2}


def test_month_windows():
    reports = [
        make_report(datetime(2024, 6, 1, 0, 0, tzinfo=timezone.utc)),     # este mes
        make_report(datetime(2024, 6, 14, tzinfo=timezone.utc)),           # este mes
        make_report(datetime(2024, 5, 1, tzinfo=timezone.utc)),            # mes pasado
        make_report(datetime(2024, 5, 31, 23, 59, tzinfo=timezone.utc)),   # mes pasado (último día)
        make_report(datetime(2024, 4, 30, 23, 59, tzinfo=timezone.utc)),   # anterior
    ]

    snapshot = aggregate(reports, NOW)

    assert snapshot.reports_this_month == 2
    assert snapshot.reports_last_month == 2


def test_month_boundaries_across_year_and_timezone():
    start, previous = month_boundaries(datetime(2024, 1, 10, tzinfo=timezone.utc))
    assert start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert previous == datetime(2023, 12, 1, tzinfo=timezone.utc)

    # 2024-07-01 02:00 UTC todavía es junio en Guayaquil (UTC-5)
    start, previous = month_boundaries(datetime(2024, 7, 1, 2, 0, tzinfo=timezone.utc), "America/Guayaquil")
    assert start == datetime(2024, 6, 1, 5, 0, tzinfo=timezone.utc)
    assert previous == datetime(2024, 5, 1, 5, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "this_month, last_month, expected",
    [(0, 0, 0.0), (3, 0, 100.0), (6, 4, 50.0), (2, 4, -50.0)],
)
def test_monthly_growth(this_month, last_month, expected):
    assert monthly_growth(this_month, last_month) == expected


def test_dashboard_metrics():
    reports = [
        make_report(NOW, status="reported"),
        make_report(NOW, status="in-progress"),
        make_report(NOW, status="resolved", actual_resolution_date=NOW),
    ]

    metrics = dashboard_metrics(reports, NOW)

    assert metrics.active_reports == 2
    assert metrics.pending_share == 67
    assert metrics.monthly_growth == 100.0
    assert active_reports(metrics.snapshot) == 2
    assert pending_share(aggregate([], NOW)) == 0


def test_half_values_round_towards_positive_infinity():
    assert _round_half_up(2.5) == 3
    assert _round_half_up(-2.5) == -2
    assert _round_half_up(-2.6) == -3
