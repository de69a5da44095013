#!/usr/bin/env python3
"""
Skills and Languages Scoring - Coverage of what the posting asks for.

Calculates what percentage of the posting's required skills (or preferred
languages) the worker covers.
"""

import logging
from typing import Sequence

from kindmatch.models import JobPosting, WorkerProfile
from kindmatch.utils import clamp_score, normalize_all

logger = logging.getLogger(__name__)

NO_REQUIREMENTS_SCORE = 50

# Languages
NO_LANGUAGE_PREFERENCE_SCORE = 100
WORKER_LANGUAGES_UNKNOWN_SCORE = 100
NO_LANGUAGE_OVERLAP_SCORE = 40
# Partial overlap maps onto 60-80
PARTIAL_LANGUAGE_BASE = 60
PARTIAL_LANGUAGE_SPAN = 20


def _covers(worker_skill: str, required: str) -> bool:
    # "cooking" covers "filipino cooking" and the other way round
    return worker_skill in required or required in worker_skill


def count_matched_skills(worker_skills: Sequence[str], required_skills: Sequence[str]) -> int:
    return sum(
        1 for required in required_skills
        if any(_covers(skill, required) for skill in worker_skills)
    )


def score_skills(worker: WorkerProfile, job: JobPosting) -> int:
    """
    Score skill coverage.

    - Posting requires nothing → 50
    - Worker lists no skills → 0
    - Otherwise round(100 * matched / required), matching by substring either way
    """
    required = normalize_all(job.required_skills)
    if not required:
        return NO_REQUIREMENTS_SCORE

    skills = normalize_all(worker.skills)
    if not skills:
        return 0

    matched = count_matched_skills(skills, required)
    return clamp_score(100 * matched / len(required))


def score_languages(worker: WorkerProfile, job: JobPosting) -> int:
    """
    - Posting prefers no language, or worker names none → 100
    - Every preferred language spoken → 100
    - Some spoken → 60 + 20 * share spoken
    - None spoken → 40
    """
    wanted = normalize_all(job.preferred_languages)
    if not wanted:
        return NO_LANGUAGE_PREFERENCE_SCORE

    spoken = set(normalize_all(worker.preferred_languages))
    if not spoken:
        return WORKER_LANGUAGES_UNKNOWN_SCORE

    overlap = sum(1 for language in wanted if language in spoken)
    if overlap == 0:
        return NO_LANGUAGE_OVERLAP_SCORE
    if overlap == len(wanted):
        return 100
    return clamp_score(PARTIAL_LANGUAGE_BASE + PARTIAL_LANGUAGE_SPAN * overlap / len(wanted))
