#!/usr/bin/env python3
"""
Scoring Service - Score one (worker, posting) pair under a weighting profile.

Builds the per-dimension breakdown, applies the hard title/skills gate for
profiles that enable it, combines the breakdown into a bounded score and
attaches reasons.

The service holds only read-only collaborators (location matcher, synonym
tables, combiner, reason table), so a single instance can score postings
from several threads at once.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Dict, Optional

from kindmatch.matcher import OUTSIDE_RADIUS, LocationMatcher, RegionLookup
from kindmatch.models import JobPosting, MatchResult, WorkerProfile
from kindmatch.scorer.availability import score_availability
from kindmatch.scorer.combiner import ScoreCombiner
from kindmatch.scorer.engagement import score_rating, score_recency
from kindmatch.scorer.experience import score_experience
from kindmatch.scorer.priority import score_priority
from kindmatch.scorer.reasons import ReasonGenerator
from kindmatch.scorer.salary import salary_position, score_salary
from kindmatch.scorer.skills import score_languages, score_skills
from kindmatch.scorer.titles import SynonymTable, score_job_title, score_job_type
from kindmatch.scorer.weighting import Dimension, WeightingProfile

if TYPE_CHECKING:
    from kindmatch.config_loader import ScorerConfig

logger = logging.getLogger(__name__)

DimensionScorer = Callable[[WorkerProfile, JobPosting, WeightingProfile, datetime], int]


class ScoringService:
    """
    Service for scoring postings against a worker.

    Usage:
        service = ScoringService(config.scorer)
        result = service.score_posting(worker, job, profile, now)
    """

    def __init__(self, config: ScorerConfig, regions: Optional[RegionLookup] = None):
        self.config = config
        self.location_matcher = LocationMatcher(config.location, regions)
        self.title_synonyms = SynonymTable(config.title_synonyms)
        self.job_type_synonyms = SynonymTable(config.job_type_synonyms)
        self.combiner = ScoreCombiner(config.boost_factor)
        self.reason_generator = ReasonGenerator()

        self._scorers: Dict[Dimension, DimensionScorer] = {
            Dimension.JOB_TITLE: lambda w, j, p, now: score_job_title(w, j, self.title_synonyms),
            Dimension.JOB_TYPE: lambda w, j, p, now: score_job_type(
                w, j, self.job_type_synonyms, p.job_type_default
            ),
            Dimension.LOCATION: lambda w, j, p, now: self.location_matcher.match(w, j),
            Dimension.SALARY: lambda w, j, p, now: score_salary(w, j, self.config.salary),
            Dimension.LANGUAGES: lambda w, j, p, now: score_languages(w, j),
            Dimension.SKILLS: lambda w, j, p, now: score_skills(w, j),
            Dimension.EXPERIENCE: lambda w, j, p, now: score_experience(
                w, j, self.config.experience_keywords
            ),
            Dimension.AVAILABILITY: lambda w, j, p, now: score_availability(w, now),
            Dimension.RATING: lambda w, j, p, now: score_rating(w),
            Dimension.RECENCY: lambda w, j, p, now: score_recency(w, now),
            Dimension.PRIORITY: lambda w, j, p, now: score_priority(j, now),
        }

    def score_dimension(
        self,
        dimension: Dimension,
        worker: WorkerProfile,
        job: JobPosting,
        profile: WeightingProfile,
        now: datetime,
    ) -> int:
        return self._scorers[dimension](worker, job, profile, now)

    def build_breakdown(
        self,
        worker: WorkerProfile,
        job: JobPosting,
        profile: WeightingProfile,
        now: datetime,
    ) -> Dict[str, int]:
        """Pre-weight score for every dimension the profile weights."""
        return {
            dimension.value: self.score_dimension(dimension, worker, job, profile, now)
            for dimension in profile.dimensions
        }

    def build_qualifiers(
        self,
        worker: WorkerProfile,
        job: JobPosting,
        breakdown: Dict[str, int],
    ) -> Dict[str, Optional[str]]:
        """Direction of a miss for dimensions whose low scores are ambiguous."""
        qualifiers: Dict[str, Optional[str]] = {}
        if Dimension.SALARY.value in breakdown:
            qualifiers[Dimension.SALARY.value] = salary_position(worker, job, self.config.salary)
        if Dimension.LOCATION.value in breakdown and self.location_matcher.is_outside_radius(worker, job):
            qualifiers[Dimension.LOCATION.value] = OUTSIDE_RADIUS
        return qualifiers

    def is_gated(
        self,
        worker: WorkerProfile,
        job: JobPosting,
        profile: WeightingProfile,
        now: datetime,
        breakdown: Optional[Dict[str, int]] = None,
    ) -> bool:
        """
        Hard category exclusion: neither the title nor the skills match at all.

        Only applies to profiles with hard_gate enabled. Scores already in the
        breakdown are reused.
        """
        if not profile.hard_gate:
            return False

        breakdown = breakdown or {}
        for dimension in (Dimension.JOB_TITLE, Dimension.SKILLS):
            score = breakdown.get(dimension.value)
            if score is None:
                score = self.score_dimension(dimension, worker, job, profile, now)
            if score > 0:
                return False
        return True

    def score_posting(
        self,
        worker: WorkerProfile,
        job: JobPosting,
        profile: WeightingProfile,
        now: datetime,
    ) -> Optional[MatchResult]:
        """
        Score a single posting.

        Returns None when the posting is dropped by the hard gate.
        """
        breakdown = self.build_breakdown(worker, job, profile, now)

        if self.is_gated(worker, job, profile, now, breakdown):
            logger.debug(f"Job {job.id} gated: title and skills do not match worker {worker.id}")
            return None

        combined = self.combiner.combine(breakdown, profile, job.boost_active(now))
        reasons = self.reason_generator.generate(breakdown, self.build_qualifiers(worker, job, breakdown))

        logger.debug(
            f"Job {job.id}: score={combined.score} (base={combined.base_score}, "
            f"boosted={combined.boosted}) breakdown={breakdown}"
        )

        return MatchResult(
            job_id=job.id,
            score=combined.score,
            breakdown=breakdown,
            reasons=reasons,
            contributions=combined.contributions,
            boosted=combined.boosted,
            profile=profile.name,
        )
