"""
Scoring for LLM check results: pass rate, severity-weighted risk score, trend and summaries.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from api.responses import (
    Pagination,
    QualityCheck,
    QualityReport,
    QualitySummary,
    QualityTypeSummary,
    SecurityCheck,
    SecurityReport,
    SecuritySummary,
    SecurityTypeSummary,
    Trend,
)
from config import settings
from engine.enums import CheckLocation, QualityCheckType, SecurityCheckType, Severity, TrendDirection
from engine.normalize.fields import to_seconds

_C = TypeVar("_C", QualityCheck, SecurityCheck)


def _timestamp(check: Any) -> float:
    seconds = to_seconds(check.timestamp)
    return 0.0 if seconds is None else seconds


def pass_rate(checks: Sequence[QualityCheck]) -> float:
    if not checks:
        return 0.0
    return round(sum(1 for c in checks if c.passed) / len(checks), 4)


def detection_rate(checks: Sequence[SecurityCheck]) -> float:
    if not checks:
        return 0.0
    return sum(1 for c in checks if c.detected) / len(checks)


def risk_score(checks: Sequence[SecurityCheck]) -> int:
    """Severity-weighted detections per check, scaled to 0..100."""
    raw = sum(c.severity.weight() for c in checks if c.detected)
    return min(100, round(raw / max(1, len(checks)) * 100))


def trend(
    checks: Sequence[_C],
    rate: Callable[[Sequence[_C]], float],
    higher_is_better: bool = True,
    stable_band_pct: Optional[float] = None,
    negative: TrendDirection = TrendDirection.declining,
) -> Trend:
    """Compare ``rate`` over the older and newer halves of the time-ordered checks.

    ``percent_change`` is the difference in percentage points. ``negative``
    names the direction reported when the rate moves the wrong way.
    """
    band = settings.trend_stable_band_pct if stable_band_pct is None else stable_band_pct
    if len(checks) < 2:
        return Trend()
    ordered = sorted(checks, key=_timestamp)
    middle = len(ordered) // 2
    change = round((rate(ordered[middle:]) - rate(ordered[:middle])) * 100, 1)
    if abs(change) <= band:
        return Trend(direction=TrendDirection.stable, percent_change=change)
    improving = change > 0 if higher_is_better else change < 0
    return Trend(
        direction=TrendDirection.improving if improving else negative,
        percent_change=change,
    )


def _severity_counts(checks: Sequence[Any]) -> Dict[str, int]:
    counts = {s.value: 0 for s in Severity}
    for c in checks:
        counts[c.severity.value] += 1
    return counts


def quality_summary(checks: Sequence[QualityCheck]) -> QualitySummary:
    grouped: Dict[QualityCheckType, List[QualityCheck]] = defaultdict(list)
    for c in checks:
        grouped[c.check_type].append(c)

    by_type = {}
    for check_type in QualityCheckType:
        group = grouped.get(check_type)
        if not group:
            continue
        passed = sum(1 for c in group if c.passed)
        by_type[check_type.value] = QualityTypeSummary(
            total=len(group),
            passed=passed,
            failed=len(group) - passed,
            avg_score=round(sum(c.score for c in group) / len(group), 4),
        )

    passed_total = sum(1 for c in checks if c.passed)
    return QualitySummary(
        total_checks=len(checks),
        passed_checks=passed_total,
        failed_checks=len(checks) - passed_total,
        pass_rate=pass_rate(checks),
        by_type=by_type,
        by_severity=_severity_counts(checks),
        trend=trend(checks, pass_rate, higher_is_better=True),
    )


def security_summary(checks: Sequence[SecurityCheck]) -> SecuritySummary:
    detected = [c for c in checks if c.detected]

    by_type = {}
    for check_type in SecurityCheckType:
        group = [c for c in checks if c.check_type == check_type]
        if not group:
            continue
        by_type[check_type.value] = SecurityTypeSummary(
            total=len(group),
            detected=sum(1 for c in group if c.detected),
            blocked=sum(1 for c in group if c.blocked),
        )

    by_location = {loc.value: 0 for loc in CheckLocation}
    for c in detected:
        by_location[c.location.value] += 1

    return SecuritySummary(
        total_checks=len(checks),
        detected_issues=len(detected),
        blocked_requests=sum(1 for c in checks if c.blocked),
        by_type=by_type,
        by_severity=_severity_counts(detected),
        by_location=by_location,
        risk_score=risk_score(checks),
        trend=trend(checks, detection_rate, higher_is_better=False, negative=TrendDirection.worsening),
    )


def filter_checks(checks: Sequence[_C], **filters: Any) -> List[_C]:
    """Keep checks whose attributes equal every non-None filter value."""
    active = {k: v for k, v in filters.items() if v is not None}
    return [c for c in checks if all(getattr(c, k, None) == v for k, v in active.items())]


def paginate(items: Sequence[_C], limit: int, offset: int) -> Tuple[List[_C], Pagination]:
    limit = max(0, limit)
    offset = max(0, offset)
    total = len(items)
    return list(items[offset:offset + limit]), Pagination(
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
    )


def build_quality_report(
    checks: Sequence[QualityCheck],
    limit: Optional[int] = None,
    offset: int = 0,
    filters: Optional[Dict[str, Any]] = None,
) -> QualityReport:
    filters = dict(filters or {})
    selected = filter_checks(checks, **filters)
    selected.sort(key=_timestamp, reverse=True)
    page, pagination = paginate(selected, settings.checks_default_limit if limit is None else limit, offset)
    return QualityReport(
        checks=page,
        summary=quality_summary(selected),
        pagination=pagination,
        filters=filters,
    )


def build_security_report(
    checks: Sequence[SecurityCheck],
    limit: Optional[int] = None,
    offset: int = 0,
    filters: Optional[Dict[str, Any]] = None,
) -> SecurityReport:
    filters = dict(filters or {})
    selected = filter_checks(checks, **filters)
    # newest first; most severe first within the same instant
    selected.sort(key=lambda c: (_timestamp(c), c.severity.rank()), reverse=True)
    page, pagination = paginate(selected, settings.checks_default_limit if limit is None else limit, offset)
    return SecurityReport(
        checks=page,
        summary=security_summary(selected),
        pagination=pagination,
        filters=filters,
    )
