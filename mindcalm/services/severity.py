"""0-10 severity meter bands shared by the dashboard, check-ins and breathing."""

from __future__ import annotations

from mindcalm.schemas.checkin import SeverityReading


def severity_label(level: int) -> str:
    if level == 0:
        return "None"
    if level <= 3:
        return "Mild"
    if level <= 7:
        return "Moderate"
    return "Severe"


def severity_tone(level: int) -> str:
    if level <= 3:
        return "emerald"
    if level <= 7:
        return "amber"
    return "rose"


def read_severity(level: int, previous: int | None = None) -> SeverityReading:
    level = max(0, min(10, level))
    return SeverityReading(
        level=level,
        label=severity_label(level),
        tone=severity_tone(level),
        previous=previous,
        trend=None if previous is None else level - previous,
    )
