#!/usr/bin/env python3
"""
Availability Scoring - Is the worker free on the day the ranking runs?

`now` is always passed in by the caller; this module never reads the clock.
"""

from datetime import datetime

from kindmatch.models import Weekday, WorkerProfile

NO_SCHEDULE_SCORE = 50


def score_availability(worker: WorkerProfile, now: datetime) -> int:
    """
    - Available on now's weekday → 100
    - Available on some other weekday → 50
    - Schedule given but no available day → 0
    - No schedule at all → 50
    """
    schedule = worker.availability_schedule
    if not schedule:
        return NO_SCHEDULE_SCORE

    if worker.is_available_on(Weekday.from_datetime(now)):
        return 100
    if any(day.available for day in schedule.values()):
        return 50
    return 0
