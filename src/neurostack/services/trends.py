"""Aggregations behind the trends chart and the consistency heatmap."""

from dataclasses import dataclass
from datetime import date
from zoneinfo import ZoneInfo

from neurostack.domain.entries import LogEntry
from neurostack.domain.pharmacy import DoseLog

HIGH_ANXIETY = 7
TREND_DAYS = 30


@dataclass(frozen=True)
class HeatmapDay:
    """One calendar cell: number of logs and a 1-4 intensity level."""

    date: str
    count: int
    level: int


@dataclass(frozen=True)
class TrendPoint:
    """Daily averages of the 1-10 ratings and the summed numeric dose."""

    date: str
    anxiety: float
    functionality: float
    total_dose: float


@dataclass(frozen=True)
class SentimentPoint:
    """Daily average sentiment for schema-based log entries."""

    day: date
    average_sentiment: float | None
    entries: int


def activity_heatmap(logs: list[DoseLog]) -> list[HeatmapDay]:
    """Group dose logs by date and grade each day.

    High average anxiety marks the day at level 1 whatever the
    functionality; otherwise the level follows average functionality.
    """
    cells = []
    for day, day_logs in _group_by_date(logs).items():
        avg_anxiety = sum(log.anxiety for log in day_logs) / len(day_logs)
        avg_functionality = sum(log.functionality for log in day_logs) / len(
            day_logs
        )
        cells.append(
            HeatmapDay(
                date=day,
                count=len(day_logs),
                level=_heatmap_level(avg_anxiety, avg_functionality),
            )
        )
    return cells


def daily_trends(logs: list[DoseLog], days: int = TREND_DAYS) -> list[TrendPoint]:
    """Return per-day averages, oldest first, limited to the last ``days``."""
    points = []
    for day, day_logs in sorted(_group_by_date(logs).items()):
        count = len(day_logs)
        points.append(
            TrendPoint(
                date=day,
                anxiety=round(sum(log.anxiety for log in day_logs) / count, 1),
                functionality=round(
                    sum(log.functionality for log in day_logs) / count, 1
                ),
                total_dose=round(
                    sum(item.dose for log in day_logs for item in log.dose_items), 2
                ),
            )
        )
    return points[-days:] if days > 0 else []


def sentiment_trend(
    entries: list[LogEntry], timezone_name: str = "UTC"
) -> list[SentimentPoint]:
    """Average sentiment per local day; unscored entries count but don't average."""
    tz = ZoneInfo(timezone_name)
    by_day: dict[date, list[LogEntry]] = {}
    for entry in entries:
        by_day.setdefault(entry.occurred_at.astimezone(tz).date(), []).append(entry)
    points = []
    for day in sorted(by_day):
        scores = [
            entry.sentiment_score
            for entry in by_day[day]
            if entry.sentiment_score is not None
        ]
        points.append(
            SentimentPoint(
                day=day,
                average_sentiment=round(sum(scores) / len(scores), 2)
                if scores
                else None,
                entries=len(by_day[day]),
            )
        )
    return points


def _group_by_date(logs: list[DoseLog]) -> dict[str, list[DoseLog]]:
    grouped: dict[str, list[DoseLog]] = {}
    for log in logs:
        grouped.setdefault(log.date, []).append(log)
    return grouped


def _heatmap_level(avg_anxiety: float, avg_functionality: float) -> int:
    if avg_anxiety > HIGH_ANXIETY:
        return 1
    if avg_functionality >= 8:  # noqa: PLR2004
        return 4
    if avg_functionality >= 6:  # noqa: PLR2004
        return 3
    if avg_functionality >= 4:  # noqa: PLR2004
        return 2
    return 1
