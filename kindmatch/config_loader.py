import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from kindmatch.exceptions import ConfigurationError
from kindmatch.scorer.weighting import WeightingProfile, default_profiles

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


class LocationConfig(BaseModel):
    """Scores used by the LocationMatcher, in priority order."""
    exact_score: int = 100
    radius_max_score: int = 100
    radius_floor_score: int = 60  # score exactly at the radius boundary
    outside_radius_score: int = 30
    region_score: int = 80  # desired location lies in the posting's region
    same_region_score: int = 85  # desired location and posting province share a region
    fuzzy_score: int = 90
    default_score: int = 50

    # Extra place → region aliases merged over the built-in table
    region_overrides: Dict[str, str] = Field(default_factory=dict)


class SalaryConfig(BaseModel):
    neutral_score: int = 50
    contained_score: int = 100

    # Ranges that miss each other by at most max(worker_min * ratio, floor)
    near_threshold_ratio: float = 0.2
    near_threshold_floor: float = 100.0
    near_above_score: int = 80
    near_below_score: int = 70
    far_above_score: int = 40
    far_below_score: int = 30

    # Pay-period conversion when both sides state a unit
    hours_per_day: float = 8.0
    days_per_week: float = 6.0
    days_per_month: float = 26.0
    months_per_year: float = 12.0


class ScorerConfig(BaseModel):
    """
    Configuration for the ScoringService.

    Handles dimension scoring, boost handling and reason generation.
    """
    boost_factor: float = Field(default=1.5, ge=1.0)

    experience_keywords: List[str] = Field(default_factory=lambda: [
        "experienced", "senior", "expert", "professional", "skilled",
    ])

    # Job title / job type synonym groups, e.g. caregiver ~ yaya ~ housekeeper
    title_synonyms: List[List[str]] = Field(default_factory=lambda: [
        ["caregiver", "yaya", "nanny", "housekeeper", "kasambahay"],
        ["driver", "chauffeur"],
        ["cook", "chef"],
        ["gardener", "landscaper"],
        ["plumber", "tubero"],
        ["laundry", "labandera"],
        ["elderly care", "companion"],
    ])
    job_type_synonyms: List[List[str]] = Field(default_factory=lambda: [
        ["full-time", "fulltime", "full time"],
        ["part-time", "parttime", "part time"],
        ["stay-in", "live-in"],
        ["stay-out", "live-out"],
        ["contract", "project-based"],
    ])

    location: LocationConfig = Field(default_factory=LocationConfig)
    salary: SalaryConfig = Field(default_factory=SalaryConfig)


class RankingConfig(BaseModel):
    """Configuration for the RankingPipeline."""
    default_profile: str = "preferences"
    default_limit: int = Field(default=20, ge=0)

    # Thread pool scoring kicks in from this many candidates
    max_workers: int = Field(default=4, ge=1)
    parallel_threshold: int = Field(default=500, ge=1)

    # Use a bounded heap when offset + limit is below this fraction of the candidates
    heap_select_ratio: float = Field(default=0.25, gt=0, le=1)


class CacheConfig(BaseModel):
    enabled: bool = False
    redis_url: str = "redis://localhost:6379/0"
    password: Optional[str] = None
    ttl_seconds: int = Field(default=300, ge=1)


class MatchingConfig(BaseModel):
    """
    Top-level matching configuration.
    """
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    profiles: Dict[str, WeightingProfile] = Field(default_factory=default_profiles)

    @model_validator(mode='before')
    @classmethod
    def _merge_profiles(cls, data):
        # Configured profiles extend the presets rather than replace them
        if isinstance(data, dict) and data.get('profiles'):
            merged = {name: p for name, p in default_profiles().items()}
            for name, raw in data['profiles'].items():
                key = str(name).strip().lower()
                if isinstance(raw, dict):
                    raw = {**raw, 'name': key}
                merged[key] = raw
            data = {**data, 'profiles': merged}
        return data

    @model_validator(mode='after')
    def _check_default_profile(self):
        if self.ranking.default_profile not in self.profiles:
            raise ValueError(
                f"ranking.default_profile '{self.ranking.default_profile}' is not a configured profile"
            )
        return self


def load_config(config_path: Optional[str] = None) -> MatchingConfig:
    """
    Load matching configuration from YAML.

    Falls back to the repository's config.yaml, and to built-in defaults if
    that does not exist either. Environment variables override file values:
    REDIS_URL, KINDMATCH_DEFAULT_PROFILE, KINDMATCH_MAX_WORKERS.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    data: Dict = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config must be a mapping: {path}")
    elif config_path:
        raise ConfigurationError(f"Config file not found: {path}")
    else:
        logger.info(f"No config file at {path}, using built-in defaults")

    # Allow env var override for Redis URL
    env_redis_url = os.environ.get("REDIS_URL")
    if env_redis_url:
        data['cache'] = data.get('cache') or {}
        data['cache']['redis_url'] = env_redis_url

    env_profile = os.environ.get("KINDMATCH_DEFAULT_PROFILE")
    if env_profile:
        data['ranking'] = data.get('ranking') or {}
        data['ranking']['default_profile'] = env_profile.strip().lower()

    env_workers = os.environ.get("KINDMATCH_MAX_WORKERS")
    if env_workers:
        data['ranking'] = data.get('ranking') or {}
        data['ranking']['max_workers'] = env_workers

    try:
        return MatchingConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid matching config in {path}: {e}") from e
