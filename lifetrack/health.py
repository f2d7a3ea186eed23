"""Health metrics: BMI, weight trend and goal progress."""
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple

from lifetrack.dates import parse_date
from lifetrack.domain import WEIGHT, HealthLog, Settings
from lifetrack.filters import by_type
from lifetrack.functional import Maybe, Nothing, Some
from lifetrack.lazy import iter_records

UNDERWEIGHT = "Underweight"
NORMAL = "Normal"
OVERWEIGHT = "Overweight"
OBESE = "Obese"


@dataclass(frozen=True)
class WeightSummary:
    current: Optional[float]
    change: float            # latest vs the entry before it
    total_change: float      # latest vs the first entry ever logged
    bmi: Maybe
    category: Maybe
    trend: float
    projected: Optional[float]
    target: Optional[float] = None


@dataclass(frozen=True)
class GoalLog:
    log: HealthLog
    progress: Optional[int]
    reached: bool


def bmi(weight_kg: float, height_cm: float) -> Maybe[float]:
    if not weight_kg or not height_cm or weight_kg <= 0 or height_cm <= 0:
        return Nothing()
    meters = height_cm / 100
    return Some(weight_kg / (meters ** 2))


def bmi_category(value: float) -> str:
    if value < 18.5:
        return UNDERWEIGHT
    if value < 25:
        return NORMAL
    if value < 30:
        return OVERWEIGHT
    return OBESE


def logs_of_type(logs: Iterable[HealthLog], type_: str) -> Tuple[HealthLog, ...]:
    """Logs of one type, newest first."""
    return tuple(sorted(iter_records(logs, by_type(type_)), key=lambda l: l.date, reverse=True))


def weight_logs(logs: Iterable[HealthLog]) -> Tuple[HealthLog, ...]:
    return logs_of_type(logs, WEIGHT)


def weight_trend(logs: Iterable[HealthLog], window_size: int = 4) -> float:
    """Average change per entry over the most recent window of weigh-ins."""
    if window_size < 2:
        return 0.0
    window = weight_logs(logs)[:window_size]
    if len(window) < 2:
        return 0.0
    return (window[0].value - window[-1].value) / window_size


def projected_weight(latest: float, trend: float, periods: int) -> float:
    return latest + trend * periods


def goal_progress(value: float, target: Optional[float]) -> Optional[int]:
    if not target or target <= 0:
        return None
    # half-up
    return int(math.floor(value * 100 / target + 0.5))


def goal_logs(logs: Iterable[HealthLog], type_: str, target: Optional[float]) -> Tuple[GoalLog, ...]:
    return tuple(
        GoalLog(log=l, progress=goal_progress(l.value, target), reached=bool(target) and l.value >= target)
        for l in logs_of_type(logs, type_)
    )


def weight_summary(
    logs: Iterable[HealthLog], settings: Settings, *, window_size: int = 4, periods: int = 4
) -> WeightSummary:
    ordered = weight_logs(logs)
    if not ordered:
        return WeightSummary(None, 0.0, 0.0, Nothing(), Nothing(), 0.0, None, settings.target_weight)

    current = ordered[0].value
    previous = ordered[1].value if len(ordered) > 1 else current
    trend = weight_trend(ordered, window_size)
    value = bmi(current, settings.height_cm)
    return WeightSummary(
        current=current,
        change=current - previous,
        total_change=current - ordered[-1].value,
        bmi=value,
        category=value.map(bmi_category),
        trend=trend,
        projected=projected_weight(current, trend, periods),
        target=settings.target_weight,
    )


def days_since_last_weight(logs: Iterable[HealthLog], today: date) -> Optional[int]:
    for log in weight_logs(logs):
        logged = parse_date(log.date)
        if logged is not None:
            return (today - logged).days
    return None


def health_status(days: Optional[int]) -> str:
    if days is None:
        return "bad"
    if days < 7:
        return "good"
    if days < 14:
        return "neutral"
    return "bad"
