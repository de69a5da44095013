#!/usr/bin/env python3
"""
Posting Priority - Composite score for how much a posting should be promoted.

Starts from a base of 50 and adds:
- +30 while a boost is active
- freshness: age under 1/3/7/14 days → +20/+15/+10/+5
- salary magnitude: average of the range above 1000 → +10, above 500 → +5
- urgency: expiring in under 3 days → +15, under 7 → +10
The total is capped at 100.
"""

from datetime import datetime
from typing import List, Tuple

from kindmatch.models import JobPosting
from kindmatch.scorer.salary import job_salary_range
from kindmatch.utils import days_between

BASE_PRIORITY = 50
BOOST_BONUS = 30

FRESHNESS_TIERS: List[Tuple[float, int]] = [(1, 20), (3, 15), (7, 10), (14, 5)]
SALARY_TIERS: List[Tuple[float, int]] = [(1000, 10), (500, 5)]
URGENCY_TIERS: List[Tuple[float, int]] = [(3, 15), (7, 10)]


def _first_below(value: float, tiers: List[Tuple[float, int]]) -> int:
    for limit, bonus in tiers:
        if value < limit:
            return bonus
    return 0


def score_priority(job: JobPosting, now: datetime) -> int:
    priority = BASE_PRIORITY

    if job.boost_active(now):
        priority += BOOST_BONUS

    priority += _first_below(days_between(job.created_at, now), FRESHNESS_TIERS)

    salary_range = job_salary_range(job)
    if salary_range:
        average = (salary_range[0] + salary_range[1]) / 2
        for threshold, bonus in SALARY_TIERS:
            if average > threshold:
                priority += bonus
                break

    if job.expires_at is not None:
        priority += _first_below(days_between(now, job.expires_at), URGENCY_TIERS)

    return min(priority, 100)
