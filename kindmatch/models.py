#!/usr/bin/env python3
"""
Matching Models - Canonical input and output types.

WorkerProfile and JobPosting are immutable snapshots handed to the engine by
the surrounding service. The engine never mutates them. MatchResult is built
fresh for every ranking call and owned by the caller.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple, Union, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kindmatch.utils import ensure_utc


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_datetime(cls, value: datetime) -> "Weekday":
        return list(cls)[value.weekday()]


class JobStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class SalaryRange(BaseModel):
    """A pay range. `unit` is the pay period (hourly, daily, weekly, monthly, yearly)."""
    model_config = ConfigDict(frozen=True)

    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = None


class DaySchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    available: bool = False
    hours: Optional[Tuple[str, str]] = None


class WorkerProfile(BaseModel):
    """Job-seeker preferences and profile data."""
    model_config = ConfigDict(frozen=True)

    id: str
    desired_job_titles: FrozenSet[str] = frozenset()
    desired_job_types: FrozenSet[str] = frozenset()
    desired_locations: Tuple[str, ...] = ()
    coordinates: Optional[Coordinates] = None
    preferred_work_radius_km: float = Field(default=10.0, ge=0)
    salary_expectation: SalaryRange = Field(default_factory=SalaryRange)
    skills: Tuple[str, ...] = ()
    preferred_languages: Tuple[str, ...] = ()
    experience_years: float = Field(default=0.0, ge=0)
    availability_schedule: Dict[Weekday, DaySchedule] = Field(default_factory=dict)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    last_active_at: Optional[datetime] = None

    @field_validator('availability_schedule', mode='before')
    @classmethod
    def _lowercase_weekdays(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                (k.strip().lower() if isinstance(k, str) else k): v
                for k, v in value.items()
            }
        return value

    @field_validator('last_active_at')
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def is_available_on(self, day: Weekday) -> bool:
        schedule = self.availability_schedule.get(day)
        return bool(schedule and schedule.available)


class JobPosting(BaseModel):
    """
    Canonical job posting.

    `salary` is either free text ("800-1200 PHP", "500+", "400") or a
    structured SalaryRange. Raw rows are converted into this shape by
    kindmatch.ingest before they reach the engine.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    description: str = ""
    job_type: Optional[str] = None
    location: str = ""
    province: Optional[str] = None
    region: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    salary: Optional[Union[SalaryRange, str]] = None
    required_skills: Tuple[str, ...] = ()
    preferred_languages: Tuple[str, ...] = ()
    required_experience_years: Optional[float] = Field(default=None, ge=0)
    is_boosted: bool = False
    boost_expires_at: Optional[datetime] = None
    created_at: datetime
    expires_at: Optional[datetime] = None
    status: JobStatus = JobStatus.ACTIVE

    @field_validator('boost_expires_at', 'created_at', 'expires_at')
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def boost_active(self, now: datetime) -> bool:
        """A boost counts only while its expiry lies strictly in the future."""
        return bool(
            self.is_boosted
            and self.boost_expires_at is not None
            and self.boost_expires_at > ensure_utc(now)
        )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= ensure_utc(now)

    def is_open(self, now: datetime) -> bool:
        return self.status == JobStatus.ACTIVE and not self.is_expired(now)


@dataclass
class MatchResult:
    """Ranked match for one posting."""
    job_id: str
    score: int
    breakdown: Dict[str, int] = field(default_factory=dict)
    reasons: List[str] = field(default_factory=list)

    # Explainability
    contributions: Dict[str, float] = field(default_factory=dict)
    boosted: bool = False
    profile: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchResult":
        return cls(
            job_id=data['job_id'],
            score=int(data['score']),
            breakdown={k: int(v) for k, v in data.get('breakdown', {}).items()},
            reasons=list(data.get('reasons', [])),
            contributions={k: float(v) for k, v in data.get('contributions', {}).items()},
            boosted=bool(data.get('boosted', False)),
            profile=data.get('profile', ""),
        )
