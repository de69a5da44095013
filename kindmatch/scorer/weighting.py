#!/usr/bin/env python3
"""
Weighting Profiles - Named dimension → weight configurations.

Two presets mirror the two scoring schemes the marketplace has used:

- ``profile``: profile-centric scheme built around the worker's helper profile
  (job type, location, salary, skills, experience, availability, rating,
  recency).
- ``preferences``: preference-centric scheme built around the worker's saved
  job preferences (job title, job type, location, salary, languages, skills,
  posting priority). This scheme also applies the hard title/skills gate.

Callers always pick a profile by name; nothing is inferred from data shape.
"""

from enum import Enum
from typing import Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kindmatch.exceptions import UnknownProfileError

WEIGHT_SUM_TOLERANCE = 0.01


class Dimension(str, Enum):
    """Scored axes, in the order reasons are generated."""
    JOB_TITLE = "job_title"
    JOB_TYPE = "job_type"
    LOCATION = "location"
    SALARY = "salary"
    LANGUAGES = "languages"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    AVAILABILITY = "availability"
    RATING = "rating"
    RECENCY = "recency"
    PRIORITY = "priority"


class WeightingProfile(BaseModel):
    """Immutable weights for one scoring scheme; weights sum to 1.0."""
    model_config = ConfigDict(frozen=True)

    name: str
    weights: Dict[Dimension, float]
    hard_gate: bool = False
    job_type_default: int = Field(default=60, ge=0, le=100)

    @field_validator('weights')
    @classmethod
    def _normalize_weights(cls, weights: Dict[Dimension, float]) -> Dict[Dimension, float]:
        if not weights:
            raise ValueError("A weighting profile needs at least one dimension")
        if any(w < 0 for w in weights.values()):
            raise ValueError("Weights must be non-negative")

        total = sum(weights.values())
        # Percent-style weights (25, 20, ...) are accepted and scaled down
        if abs(total - 100.0) < 100.0 * WEIGHT_SUM_TOLERANCE:
            return {d: w / 100.0 for d, w in weights.items()}
        if abs(total - 1.0) >= WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Weights must sum to 1.0 (got {total})")
        return dict(weights)

    @property
    def dimensions(self) -> List[Dimension]:
        """Dimensions scored under this profile, in declaration order."""
        return [d for d in Dimension if d in self.weights]


PROFILE_CENTRIC = WeightingProfile(
    name="profile",
    weights={
        Dimension.JOB_TYPE: 0.25,
        Dimension.LOCATION: 0.20,
        Dimension.SALARY: 0.15,
        Dimension.SKILLS: 0.15,
        Dimension.EXPERIENCE: 0.10,
        Dimension.AVAILABILITY: 0.10,
        Dimension.RATING: 0.03,
        Dimension.RECENCY: 0.02,
    },
    hard_gate=False,
)

PREFERENCE_CENTRIC = WeightingProfile(
    name="preferences",
    weights={
        Dimension.JOB_TITLE: 0.40,
        Dimension.JOB_TYPE: 0.20,
        Dimension.LOCATION: 0.15,
        Dimension.SALARY: 0.08,
        Dimension.LANGUAGES: 0.02,
        Dimension.SKILLS: 0.10,
        Dimension.PRIORITY: 0.05,
    },
    hard_gate=True,
)


def default_profiles() -> Dict[str, WeightingProfile]:
    return {
        PROFILE_CENTRIC.name: PROFILE_CENTRIC,
        PREFERENCE_CENTRIC.name: PREFERENCE_CENTRIC,
    }


def get_profile(profiles: Mapping[str, WeightingProfile], name: str) -> WeightingProfile:
    """Look up a profile by name; unknown names are an input error."""
    key = (name or "").strip().lower()
    profile = profiles.get(key)
    if profile is None:
        raise UnknownProfileError(name, profiles.keys())
    return profile
