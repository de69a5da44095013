#!/usr/bin/env python3
"""
Salary Scoring - Compare the posting's pay range with the worker's expectation.

Postings carry salary either as structured min/max columns or as free text
("800-1200 PHP", "₱500+/day", "up to 15,000 monthly", "400"). Both are
parsed into a (min, max) range before comparison. Anything unparseable is
treated as absent and scores neutral.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Optional, Tuple, Union

from kindmatch.models import JobPosting, SalaryRange, WorkerProfile
from kindmatch.utils import clamp_score

if TYPE_CHECKING:
    from kindmatch.config_loader import SalaryConfig

logger = logging.getLogger(__name__)

Range = Tuple[float, float]

HOURLY = "hourly"
DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"

# Where the posting's pay sits relative to the worker's expectation
ABOVE = "above"
BELOW = "below"

# Pay-period spellings seen in postings and profile rows
UNIT_ALIASES = {
    "hour": HOURLY, "hourly": HOURLY, "hr": HOURLY, "/hr": HOURLY, "per hour": HOURLY,
    "day": DAILY, "daily": DAILY, "per day": DAILY, "/day": DAILY,
    "week": WEEKLY, "weekly": WEEKLY, "per week": WEEKLY, "/wk": WEEKLY, "/week": WEEKLY,
    "month": MONTHLY, "monthly": MONTHLY, "per month": MONTHLY, "/mo": MONTHLY, "/month": MONTHLY,
    "year": YEARLY, "yearly": YEARLY, "annual": YEARLY, "annually": YEARLY,
    "per year": YEARLY, "/yr": YEARLY, "/year": YEARLY,
}

_NUMBER = r"(\d+(?:\.\d+)?)\s*(k\b)?"
_RANGE_RE = re.compile(_NUMBER + r"\s*(?:-|–|—|to)\s*" + _NUMBER)
_PLUS_RE = re.compile(_NUMBER + r"\s*\+")
_UPPER_RE = re.compile(r"(?:<|up to|upto|under|below|max(?:imum)?|less than)\s*" + _NUMBER)
_SINGLE_RE = re.compile(_NUMBER)
_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}\b)")
_CURRENCY_RE = re.compile(r"[₱$€£]|\bphp\b|\bpesos?\b")
# Working hours, shift times and durations ("9-5 shift", "8am", "6 days a week")
_SCHEDULE_RE = re.compile(
    r"(?<![\d.])\d+(?:[.:]\d+)?\s*(?:am|pm)\b"
    r"|(?<![\d.])\d+\s*(?:-|–|—|to)\s*\d+(?=\s*(?:shifts?|days?|hours?|hrs?|am|pm)\b)"
    r"|(?<![\d.])\d+(?:\.\d+)?\s*(?:shifts?|days?|hours?|weeks?|months?|years?|yrs?)\b"
)
_UNIT_RE = re.compile(
    r"(/\s*(?:hr|day|wk|week|mo|month|yr|year)\b"
    r"|\bper\s+(?:hour|day|week|month|year)\b"
    r"|\b(?:hourly|daily|weekly|monthly|yearly|annually|annual)\b)"
)


def _to_number(digits: str, suffix: Optional[str]) -> float:
    value = float(digits)
    return value * 1000 if suffix else value


def normalize_unit(unit: Optional[str]) -> Optional[str]:
    if not unit:
        return None
    key = re.sub(r"\s+", " ", unit.strip().lower().replace("/ ", "/"))
    return UNIT_ALIASES.get(key)


def detect_unit(text: str) -> Optional[str]:
    """Find a pay period mentioned in free text, e.g. '/day' or 'per month'."""
    match = _UNIT_RE.search(text.lower())
    return normalize_unit(match.group(1)) if match else None


def parse_salary_text(text: Optional[str]) -> Optional[Range]:
    """
    Parse a free-text salary into a (min, max) range.

    Rules:
    - "min-max" / "min to max" → (min, max)
    - "N+" → (N, 2N)
    - "<N", "up to N", "under N" → (0, N)
    - bare "N" → (0.8N, 1.2N)
    Shift times and durations ("9-5 shift", "6 days a week") are dropped first.
    Returns None when nothing usable is found or the amount is zero.
    """
    if not text:
        return None
    s = _CURRENCY_RE.sub(" ", _THOUSANDS_RE.sub("", str(text).lower()))
    s = _SCHEDULE_RE.sub(" ", s)

    match = _RANGE_RE.search(s)
    if match:
        low = _to_number(match.group(1), match.group(2))
        high = _to_number(match.group(3), match.group(4))
        low, high = min(low, high), max(low, high)
        return (low, high) if high > 0 else None

    match = _PLUS_RE.search(s)
    if match:
        n = _to_number(match.group(1), match.group(2))
        return (n, 2 * n) if n > 0 else None

    match = _UPPER_RE.search(s)
    if match:
        n = _to_number(match.group(1), match.group(2))
        return (0.0, n) if n > 0 else None

    match = _SINGLE_RE.search(s)
    if match:
        n = _to_number(match.group(1), match.group(2))
        return (0.8 * n, 1.2 * n) if n > 0 else None

    return None


def range_from_structured(salary: SalaryRange) -> Optional[Range]:
    low, high = salary.min, salary.max
    if not low and not high:
        return None
    if high is None or high == 0:
        return (float(low), float(low))
    if low is None:
        return (0.0, float(high))
    return (float(min(low, high)), float(max(low, high)))


def parse_salary(salary: Union[SalaryRange, str, None]) -> Tuple[Optional[Range], Optional[str]]:
    """Return (range, unit) for either salary representation."""
    if salary is None:
        return None, None
    if isinstance(salary, SalaryRange):
        return range_from_structured(salary), normalize_unit(salary.unit)
    return parse_salary_text(salary), detect_unit(str(salary))


def per_day_factor(unit: str, config: SalaryConfig) -> float:
    """Multiplier that turns an amount in `unit` into a daily amount."""
    if unit == HOURLY:
        return config.hours_per_day
    if unit == WEEKLY:
        return 1.0 / config.days_per_week
    if unit == MONTHLY:
        return 1.0 / config.days_per_month
    if unit == YEARLY:
        return 1.0 / (config.days_per_month * config.months_per_year)
    return 1.0


def convert_range(rng: Range, from_unit: Optional[str], to_unit: Optional[str],
                  config: SalaryConfig) -> Range:
    """Convert a range between pay periods; unchanged unless both units are known."""
    if not from_unit or not to_unit or from_unit == to_unit:
        return rng
    factor = per_day_factor(from_unit, config) / per_day_factor(to_unit, config)
    return (rng[0] * factor, rng[1] * factor)


def job_salary_range(job: JobPosting) -> Optional[Range]:
    rng, _ = parse_salary(job.salary)
    return rng


def compare_ranges(job_range: Range, worker_range: Range, config: SalaryConfig) -> int:
    jmin, jmax = job_range
    wmin, wmax = worker_range

    if wmin <= jmin and jmax <= wmax:
        return config.contained_score

    overlap = min(jmax, wmax) - max(jmin, wmin)
    if overlap > 0:
        union = max(jmax, wmax) - min(jmin, wmin)
        return clamp_score(100 * overlap / union)

    # No overlap: the ranges at most touch
    pays_more = jmax > wmax
    gap = max(0.0, jmin - wmax if pays_more else wmin - jmax)
    threshold = max(wmin * config.near_threshold_ratio, config.near_threshold_floor)
    if gap <= threshold:
        return config.near_above_score if pays_more else config.near_below_score
    return config.far_above_score if pays_more else config.far_below_score


def comparable_ranges(
    worker: WorkerProfile, job: JobPosting, config: SalaryConfig
) -> Optional[Tuple[Range, Range]]:
    """(job range, worker range) in the worker's pay period, or None if either is absent."""
    worker_range, worker_unit = parse_salary(worker.salary_expectation)
    job_range, job_unit = parse_salary(job.salary)
    if worker_range is None or job_range is None:
        return None

    if worker_unit and job_unit and worker_unit != job_unit:
        logger.debug(f"Converting job {job.id} salary from {job_unit} to {worker_unit}")
        job_range = convert_range(job_range, job_unit, worker_unit, config)
    return job_range, worker_range


def score_salary(worker: WorkerProfile, job: JobPosting, config: SalaryConfig) -> int:
    ranges = comparable_ranges(worker, job, config)
    if ranges is None:
        return config.neutral_score
    return compare_ranges(*ranges, config)


def salary_position(worker: WorkerProfile, job: JobPosting, config: SalaryConfig) -> Optional[str]:
    """
    Which side of the worker's expectation the posting's pay falls on.

    ABOVE or BELOW when the job range sticks out on one side only. None when
    it is contained or straddles the expectation, and when either is unknown.
    """
    ranges = comparable_ranges(worker, job, config)
    if ranges is None:
        return None
    (jmin, jmax), (wmin, wmax) = ranges
    sticks_out_above = jmax > wmax
    sticks_out_below = jmin < wmin
    if sticks_out_above and not sticks_out_below:
        return ABOVE
    if sticks_out_below and not sticks_out_above:
        return BELOW
    return None
