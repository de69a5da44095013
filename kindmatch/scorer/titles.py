#!/usr/bin/env python3
"""
Job Title / Job Type Scoring - Match a posting's title and type against what the worker wants.

Both dimensions share one rule:

1. Direct match with a desired value → 100
2. Otherwise a synonym group that covers the posting value scores by how much
   of the group the worker named: round(100 * named / group size)
3. Otherwise a fallback (0 for titles, the profile's job_type_default for types)
"""

import logging
from typing import Iterable, List, Sequence

from kindmatch.models import JobPosting, WorkerProfile
from kindmatch.utils import clamp_score, normalize_all, normalize_text

logger = logging.getLogger(__name__)


class SynonymTable:
    """Read-only synonym groups, e.g. caregiver ~ yaya ~ nanny ~ housekeeper."""

    def __init__(self, groups: Iterable[Sequence[str]]):
        self.groups: List[List[str]] = [g for g in (normalize_all(group) for group in groups) if g]

    def groups_for(self, value: str) -> List[List[str]]:
        """Groups with a member that equals or is contained in the value."""
        n = normalize_text(value)
        if not n:
            return []
        return [g for g in self.groups if any(_term_matches(member, n) for member in g)]

    def score(self, value: str, desired: Sequence[str]) -> int:
        """Best group coverage for the value; 0 when no group covers it."""
        best = 0
        for group in self.groups_for(value):
            named = sum(1 for member in group if any(_term_matches(member, d) for d in desired))
            if named:
                best = max(best, clamp_score(100 * named / len(group)))
        return best


def _term_matches(term: str, text: str) -> bool:
    return term == text or term in text


def _direct_match(value: str, desired: Sequence[str]) -> bool:
    return any(value == d or value in d or d in value for d in desired)


def score_job_title(worker: WorkerProfile, job: JobPosting, synonyms: SynonymTable) -> int:
    title = normalize_text(job.title)
    desired = normalize_all(worker.desired_job_titles)
    if not title or not desired:
        return 0

    if _direct_match(title, desired):
        return 100
    return synonyms.score(title, desired)


def score_job_type(
    worker: WorkerProfile,
    job: JobPosting,
    synonyms: SynonymTable,
    default: int = 60,
) -> int:
    """
    Score the posting's job type.

    A missing type on either side resolves to the default, as does a type
    no synonym group relates to the worker's choices.
    """
    job_type = normalize_text(job.job_type)
    desired = normalize_all(worker.desired_job_types)
    if not job_type or not desired:
        return default

    if job_type in desired:
        return 100

    synonym_score = synonyms.score(job_type, desired)
    if synonym_score:
        return synonym_score
    return default

