#!/usr/bin/env python3
"""
Record Normalizer - Convert raw catalog rows into canonical engine types.

Two posting schemas exist in the catalog:

- structured pay: ``title`` / ``description`` with numeric ``salary_min``,
  ``salary_max`` and ``salary_type`` columns
- free-text pay: ``job_title`` / ``job_description`` with a ``salary`` string

Both become one JobPosting here, so the engine never branches on schema
shape. Worker data arrives split across the preference row, the worker
profile row and the user row; normalize_worker_profile merges them.

Malformed optional fields are logged and dropped rather than raised, so a
single bad column degrades one dimension score instead of losing the record.
"""

import json
import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from pydantic import ValidationError

from kindmatch.exceptions import InvalidInputError
from kindmatch.models import (
    Coordinates, DaySchedule, JobPosting, JobStatus, SalaryRange, Weekday, WorkerProfile,
)
from kindmatch.scorer.salary import parse_salary_text, detect_unit
from kindmatch.utils import ensure_utc

logger = logging.getLogger(__name__)

# Epoch values at or above this are milliseconds (the catalog stores ms)
EPOCH_MILLIS_THRESHOLD = 1e11

_POINT_RE = re.compile(r"^\(\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*\)$")


def _first(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Value of the first key present with a non-empty value."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return default


def parse_timestamp(value: Any, field_name: str = "timestamp") -> Optional[datetime]:
    """
    Parse epoch seconds/milliseconds, ISO-8601 strings or datetimes into UTC.

    Returns None (and logs) when the value cannot be understood.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool):
        logger.warning(f"Ignoring boolean {field_name}: {value!r}")
        return None

    if isinstance(value, str):
        text = value.strip()
        try:
            value = float(text)
        except ValueError:
            try:
                return ensure_utc(date_parser.isoparse(text))
            except ValueError:
                pass
            try:
                return ensure_utc(date_parser.parse(text))
            except (ValueError, OverflowError) as e:
                logger.warning(f"Could not parse {field_name} {value!r}: {e}")
                return None

    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if abs(value) >= EPOCH_MILLIS_THRESHOLD else float(value)
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            logger.warning(f"Could not parse {field_name} {value!r}: {e}")
            return None

    logger.warning(f"Unsupported {field_name} type {type(value).__name__}: {value!r}")
    return None


def parse_coordinates(value: Any) -> Optional[Coordinates]:
    """
    Parse coordinates from a {lat, lng} mapping, its JSON text, or a
    PostGIS point string "(lng,lat)".
    """
    if value is None or value == "":
        return None
    if isinstance(value, Coordinates):
        return value

    if isinstance(value, str):
        text = value.strip()
        match = _POINT_RE.match(text)
        if match:
            # PostGIS points are (x, y) = (lng, lat)
            value = {"lng": float(match.group(1)), "lat": float(match.group(2))}
        else:
            try:
                value = json.loads(text)
            except ValueError:
                logger.warning(f"Could not parse coordinates {text!r}")
                return None

    if not isinstance(value, Mapping):
        logger.warning(f"Unsupported coordinates value: {value!r}")
        return None

    lat = _first(value, "lat", "latitude")
    lng = _first(value, "lng", "lon", "longitude")
    if lat is None or lng is None:
        logger.warning(f"Coordinates missing lat/lng: {value!r}")
        return None
    try:
        return Coordinates(lat=float(lat), lng=float(lng))
    except (TypeError, ValueError, ValidationError) as e:
        logger.warning(f"Invalid coordinates {value!r}: {e}")
        return None


def parse_string_list(value: Any, field_name: str = "list") -> Tuple[str, ...]:
    """Accept a list of strings or a comma-separated string."""
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        logger.warning(f"Ignoring {field_name} of type {type(value).__name__}")
        return ()
    return tuple(str(item).strip() for item in items if item is not None and str(item).strip())


def parse_number(value: Any, field_name: str = "number") -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Could not parse {field_name} {value!r}")
        return None
    return number


def parse_status(value: Any) -> JobStatus:
    if value is None or value == "":
        return JobStatus.ACTIVE
    try:
        return JobStatus(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown job status {value!r}, treating posting as closed")
        return JobStatus.CLOSED


def parse_salary_field(raw: Mapping[str, Any]) -> Optional[Any]:
    """
    Structured columns win when they carry an amount; otherwise the free-text
    salary string is kept as-is for the salary scorer to parse.
    """
    salary_min = parse_number(raw.get("salary_min"), "salary_min")
    salary_max = parse_number(raw.get("salary_max"), "salary_max")
    unit = _first(raw, "salary_type", "salary_unit")

    if (salary_min and salary_min > 0) or (salary_max and salary_max > 0):
        try:
            return SalaryRange(
                min=salary_min if salary_min and salary_min > 0 else None,
                max=salary_max if salary_max and salary_max > 0 else None,
                unit=unit,
            )
        except ValidationError as e:
            logger.warning(f"Invalid structured salary {salary_min!r}-{salary_max!r}: {e}")

    salary = raw.get("salary")
    if isinstance(salary, Mapping):
        return parse_salary_field({
            "salary_min": salary.get("min"),
            "salary_max": salary.get("max"),
            "salary_type": salary.get("unit") or unit,
        })
    if salary is None or str(salary).strip() in ("", "0"):
        return None
    return str(salary).strip()


def normalize_job_posting(raw: Mapping[str, Any]) -> JobPosting:
    """
    Convert a raw posting row (either schema) into a JobPosting.

    Raises:
        InvalidInputError: the row has no id or no usable creation time
    """
    job_id = _first(raw, "id", "_id")
    if job_id is None:
        raise InvalidInputError("Job posting row has no id")

    created_at = parse_timestamp(_first(raw, "created_at", "_creationTime"), "created_at")
    if created_at is None:
        created_at = parse_timestamp(raw.get("updated_at"), "updated_at")
    if created_at is None:
        raise InvalidInputError(f"Job posting {job_id} has no usable created_at")

    required_years = parse_number(
        _first(raw, "required_experience_years", "required_years_of_experience"),
        "required_years_of_experience",
    )
    if required_years is not None and required_years < 0:
        logger.warning(f"Job {job_id}: negative required experience {required_years}, ignoring")
        required_years = None

    return JobPosting(
        id=str(job_id),
        title=str(_first(raw, "title", "job_title", default="")),
        description=str(_first(raw, "description", "job_description", default="")),
        job_type=_first(raw, "job_type"),
        location=str(_first(raw, "location", default="")),
        province=_first(raw, "province"),
        region=_first(raw, "region"),
        coordinates=parse_coordinates(_first(raw, "coordinates", "location_coordinates")),
        salary=parse_salary_field(raw),
        required_skills=parse_string_list(raw.get("required_skills"), "required_skills"),
        preferred_languages=parse_string_list(raw.get("preferred_languages"), "preferred_languages"),
        required_experience_years=required_years,
        is_boosted=bool(raw.get("is_boosted") or False),
        boost_expires_at=parse_timestamp(raw.get("boost_expires_at"), "boost_expires_at"),
        created_at=created_at,
        expires_at=parse_timestamp(raw.get("expires_at"), "expires_at"),
        status=parse_status(raw.get("status")),
    )


def normalize_job_postings(rows: Iterable[Mapping[str, Any]]) -> List[JobPosting]:
    """Normalize many rows, skipping (and logging) rows that cannot become postings."""
    postings: List[JobPosting] = []
    for row in rows:
        try:
            postings.append(normalize_job_posting(row))
        except (InvalidInputError, ValidationError) as e:
            logger.warning(f"Skipping job posting row: {e}")
    return postings


def parse_availability(value: Any) -> Dict[Weekday, DaySchedule]:
    """
    Accepts {"monday": {"available": true, "hours": ["08:00", "17:00"]}, ...},
    {"monday": true, ...} or a list of available day names.
    """
    if not value:
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            value = value.split(",")

    schedule: Dict[Weekday, DaySchedule] = {}
    if isinstance(value, (list, tuple)):
        value = {day: True for day in value}
    if not isinstance(value, Mapping):
        logger.warning(f"Unsupported availability schedule: {value!r}")
        return {}

    for day_name, entry in value.items():
        try:
            day = Weekday(str(day_name).strip().lower())
        except ValueError:
            logger.warning(f"Ignoring unknown weekday {day_name!r} in availability schedule")
            continue

        if isinstance(entry, bool):
            schedule[day] = DaySchedule(available=entry)
            continue
        if not isinstance(entry, Mapping):
            logger.warning(f"Ignoring availability for {day_name!r}: {entry!r}")
            continue

        hours = entry.get("hours")
        if hours is None and entry.get("start") and entry.get("end"):
            hours = (entry["start"], entry["end"])
        try:
            schedule[day] = DaySchedule(
                available=bool(entry.get("available", True)),
                hours=tuple(hours) if hours else None,
            )
        except (TypeError, ValidationError) as e:
            logger.warning(f"Invalid availability for {day_name!r}: {e}")
            schedule[day] = DaySchedule(available=bool(entry.get("available", True)))

    return schedule


def total_experience_years(experiences: Iterable[Mapping[str, Any]], now: Optional[datetime] = None) -> float:
    """
    Sum work experience entries in years (1 decimal).

    Current jobs and entries without an end date run until `now`.
    """
    now = ensure_utc(now) if now else datetime.now(timezone.utc)
    total_months = 0
    for entry in experiences or []:
        start = parse_timestamp(entry.get("start_date"), "start_date")
        if start is None:
            continue
        end = None if entry.get("is_current_job") else parse_timestamp(entry.get("end_date"), "end_date")
        diff = relativedelta(end or now, start)
        total_months += max(0, diff.years * 12 + diff.months)
    return round(total_months / 12, 1)


def _salary_expectation(preferences: Mapping[str, Any], profile: Mapping[str, Any]) -> SalaryRange:
    low = parse_number(preferences.get("salary_range_min"), "salary_range_min")
    high = parse_number(preferences.get("salary_range_max"), "salary_range_max")
    unit = _first(preferences, "salary_type", "salary_unit")
    if low or high:
        return SalaryRange(min=low or None, max=high or None, unit=unit)

    text = profile.get("expected_salary_range")
    parsed = parse_salary_text(text)
    if parsed:
        return SalaryRange(min=parsed[0], max=parsed[1], unit=unit or detect_unit(str(text)))
    return SalaryRange(unit=unit)


def normalize_worker_profile(
    preferences: Optional[Mapping[str, Any]],
    profile: Optional[Mapping[str, Any]] = None,
    user: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> WorkerProfile:
    """
    Merge the worker's preference row, profile row and user row.

    Preference values win over profile values where both exist (languages).

    Raises:
        InvalidInputError: no worker id could be found in any of the rows
    """
    preferences = preferences or {}
    profile = profile or {}
    user = user or {}

    worker_id = (
        _first(preferences, "kindtao_user_id", "worker_id", "user_id")
        or _first(profile, "user_id", "id")
        or _first(user, "id", "_id")
    )
    if worker_id is None:
        raise InvalidInputError("Worker rows carry no user id")

    radius = parse_number(
        _first(preferences, "desired_job_location_radius", "preferred_work_radius_km"),
        "desired_job_location_radius",
    )

    experience_years = parse_number(profile.get("experience_years"), "experience_years")
    if experience_years is None and profile.get("work_experiences"):
        experience_years = total_experience_years(profile["work_experiences"], now)

    rating = parse_number(profile.get("rating"), "rating")
    if rating is not None and not 0 <= rating <= 5:
        logger.warning(f"Worker {worker_id}: rating {rating} out of range, ignoring")
        rating = None

    return WorkerProfile(
        id=str(worker_id),
        desired_job_titles=frozenset(parse_string_list(
            _first(preferences, "desired_jobs", "desired_job_titles"), "desired_jobs"
        )),
        desired_job_types=frozenset(parse_string_list(
            preferences.get("desired_job_types"), "desired_job_types"
        )),
        desired_locations=parse_string_list(preferences.get("desired_locations"), "desired_locations"),
        coordinates=parse_coordinates(_first(user, "location_coordinates", "coordinates")),
        preferred_work_radius_km=radius if radius is not None and radius >= 0 else 10.0,
        salary_expectation=_salary_expectation(preferences, profile),
        skills=parse_string_list(profile.get("skills"), "skills"),
        preferred_languages=parse_string_list(
            _first(preferences, "desired_languages", "preferred_languages")
            or profile.get("languages"),
            "languages",
        ),
        experience_years=max(0.0, experience_years or 0.0),
        availability_schedule=parse_availability(profile.get("availability_schedule")),
        rating=rating,
        last_active_at=parse_timestamp(_first(user, "last_seen_at", "last_active_at"), "last_seen_at"),
    )
