#!/usr/bin/env python3
"""
Ranking Pipeline - Rank candidate postings for one worker.

Stages:
1. Validate the request (worker, paging, profile name)
2. Filter to open postings not in the exclusion set, dedupe by id
3. Score each posting (hard gate first for profiles that enable it)
4. Sort deterministically and paginate

Sort order: score desc, then boosted-active first, then newer created_at,
then smaller id. Identical inputs always produce identical pages.
"""

from __future__ import annotations

import heapq
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import TYPE_CHECKING, Collection, Dict, Iterable, List, Mapping, Optional, Tuple

from kindmatch.exceptions import InvalidInputError
from kindmatch.models import JobPosting, MatchResult, WorkerProfile
from kindmatch.scorer import ScoringService, WeightingProfile, default_profiles, get_profile
from kindmatch.utils import ensure_aware, utc_now

if TYPE_CHECKING:
    from kindmatch.config_loader import MatchingConfig, RankingConfig

logger = logging.getLogger(__name__)

SortKey = Tuple[int, bool, float, str]


def sort_key(result: MatchResult, job: JobPosting) -> SortKey:
    return (-result.score, not result.boosted, -job.created_at.timestamp(), job.id)


def dedupe_postings(postings: Iterable[JobPosting]) -> List[JobPosting]:
    """Keep one posting per id: the newest created_at, first seen on ties."""
    by_id: Dict[str, JobPosting] = {}
    for job in postings:
        kept = by_id.get(job.id)
        if kept is None or job.created_at > kept.created_at:
            by_id[job.id] = job
    return list(by_id.values())


class RankingPipeline:
    """
    Rank postings for a worker under a named weighting profile.

    Usage:
        pipeline = RankingPipeline.from_config(load_config())
        results = pipeline.rank(worker, postings, exclusion, "profile", limit=20, offset=0)
    """

    def __init__(
        self,
        scoring_service: ScoringService,
        profiles: Optional[Mapping[str, WeightingProfile]] = None,
        config: Optional[RankingConfig] = None,
    ):
        self.scoring_service = scoring_service
        self.profiles = dict(profiles) if profiles else default_profiles()
        self.max_workers = config.max_workers if config else 1
        self.parallel_threshold = config.parallel_threshold if config else 500
        self.heap_select_ratio = config.heap_select_ratio if config else 0.25
        self.default_profile = config.default_profile if config else "preferences"

    @classmethod
    def from_config(cls, config: MatchingConfig) -> "RankingPipeline":
        return cls(
            scoring_service=ScoringService(config.scorer),
            profiles=config.profiles,
            config=config.ranking,
        )

    def rank(
        self,
        worker: Optional[WorkerProfile],
        candidates: Iterable[JobPosting],
        exclusion: Optional[Collection[str]] = None,
        profile_name: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
        now: Optional[datetime] = None,
    ) -> List[MatchResult]:
        """
        Return the page [offset, offset + limit) of ranked matches.

        profile_name defaults to the configured default profile.

        Raises:
            InvalidInputError: worker is None, or limit/offset is negative
            UnknownProfileError: profile_name is not configured
        """
        profile = self.validate_request(worker, profile_name or self.default_profile, limit, offset)

        if limit == 0:
            return []

        # Keep the caller's timezone: availability reads the local weekday
        now = ensure_aware(now) if now is not None else utc_now()
        excluded = frozenset(exclusion or ())

        candidates = list(candidates or [])
        eligible = self.filter_candidates(candidates, excluded, now)

        scored = self.score_candidates(worker, eligible, profile, now)
        gated = len(eligible) - len(scored)

        page = self.select_page(scored, limit, offset)

        logger.info(
            f"Ranked worker {worker.id} with profile '{profile.name}': "
            f"{len(candidates)} candidates, {len(candidates) - len(eligible)} filtered, "
            f"{gated} gated, {len(page)} returned (offset={offset}, limit={limit})"
        )
        return page

    def validate_request(
        self,
        worker: Optional[WorkerProfile],
        profile_name: str,
        limit: int,
        offset: int,
    ) -> WeightingProfile:
        """Fail fast on requests that cannot be served; returns the resolved profile."""
        if worker is None:
            raise InvalidInputError("worker is required")
        if limit is None or limit < 0:
            raise InvalidInputError(f"limit must be >= 0 (got {limit})")
        if offset is None or offset < 0:
            raise InvalidInputError(f"offset must be >= 0 (got {offset})")
        return get_profile(self.profiles, profile_name)

    def filter_candidates(
        self,
        candidates: Iterable[JobPosting],
        excluded: Collection[str],
        now: datetime,
    ) -> List[JobPosting]:
        open_postings = [
            job for job in candidates
            if job.is_open(now) and job.id not in excluded
        ]
        return dedupe_postings(open_postings)

    def score_candidates(
        self,
        worker: WorkerProfile,
        postings: List[JobPosting],
        profile: WeightingProfile,
        now: datetime,
    ) -> List[Tuple[MatchResult, JobPosting]]:
        """Score postings, dropping gated ones. Output order is not significant."""
        def score_one(job: JobPosting) -> Optional[Tuple[MatchResult, JobPosting]]:
            result = self.scoring_service.score_posting(worker, job, profile, now)
            return (result, job) if result is not None else None

        if self.max_workers > 1 and len(postings) >= self.parallel_threshold:
            logger.debug(f"Scoring {len(postings)} postings with {self.max_workers} threads")
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(score_one, postings))
        else:
            outcomes = [score_one(job) for job in postings]

        return [outcome for outcome in outcomes if outcome is not None]

    def select_page(
        self,
        scored: List[Tuple[MatchResult, JobPosting]],
        limit: int,
        offset: int,
    ) -> List[MatchResult]:
        wanted = offset + limit
        if wanted < self.heap_select_ratio * len(scored):
            top = heapq.nsmallest(wanted, scored, key=lambda pair: sort_key(*pair))
        else:
            top = sorted(scored, key=lambda pair: sort_key(*pair))
        return [result for result, _ in top[offset:wanted]]
