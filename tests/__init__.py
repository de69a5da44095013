#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the slower concurrency tests
    python -m pytest tests/ -v -m "not slow"

    # Using unittest
    python -m unittest discover tests -v

The factories below build canonical WorkerProfile / JobPosting objects with
sensible defaults, so each test only spells out the fields it cares about.
Every time-sensitive test uses FIXED_NOW instead of the wall clock.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from kindmatch.models import Coordinates, JobPosting, SalaryRange, WorkerProfile

# Wednesday
FIXED_NOW = datetime(2024, 6, 12, 10, 0, 0, tzinfo=timezone.utc)

CEBU_CITY = Coordinates(lat=10.3157, lng=123.8854)
MANDAUE = Coordinates(lat=10.3236, lng=123.9223)


def make_worker(**overrides: Any) -> WorkerProfile:
    """Caregiver in Cebu City expecting 300-500 a day."""
    data = dict(
        id="worker-1",
        desired_job_titles=frozenset({"caregiver"}),
        desired_job_types=frozenset({"caregiver"}),
        desired_locations=("Cebu City",),
        salary_expectation=SalaryRange(min=300, max=500, unit="daily"),
        skills=("cooking", "cleaning"),
        preferred_languages=("Cebuano", "English"),
        experience_years=2,
        availability_schedule={"wednesday": {"available": True}},
    )
    data.update(overrides)
    return WorkerProfile(**data)


def make_job(job_id: str = "job-a", **overrides: Any) -> JobPosting:
    """Active caregiver posting in Cebu City paying 400, created a week before FIXED_NOW."""
    data = dict(
        id=job_id,
        title="Caregiver",
        description="Looking for a caregiver for an elderly parent.",
        job_type="caregiver",
        location="Cebu City",
        salary="400",
        required_skills=("cooking",),
        created_at=FIXED_NOW - timedelta(days=8),
    )
    data.update(overrides)
    return JobPosting(**data)
