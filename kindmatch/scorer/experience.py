#!/usr/bin/env python3
"""
Experience Scoring - Tiered years-of-experience fit.

A posting only asks for experience when its title or description uses one of
the configured signal words, or when it states required years. Postings that
do neither score neutral.
"""

import logging
import re
from typing import Iterable

from kindmatch.models import JobPosting, WorkerProfile

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50

# (minimum years, score), checked top-down
EXPERIENCE_TIERS = [
    (5, 100),
    (3, 80),
    (1, 60),
]
BELOW_TIERS_SCORE = 30


def has_experience_signal(job: JobPosting, keywords: Iterable[str]) -> bool:
    if job.required_experience_years and job.required_experience_years > 0:
        return True

    text = f"{job.title} {job.description}".lower()
    for keyword in keywords:
        if re.search(rf"\b{re.escape(keyword.lower())}\b", text):
            return True
    return False


def tier_score(years: float) -> int:
    for min_years, score in EXPERIENCE_TIERS:
        if years >= min_years:
            return score
    return BELOW_TIERS_SCORE


def score_experience(worker: WorkerProfile, job: JobPosting, keywords: Iterable[str]) -> int:
    if not has_experience_signal(job, keywords):
        return NEUTRAL_SCORE

    required = job.required_experience_years
    if required and worker.experience_years >= required:
        return 100
    return tier_score(worker.experience_years)
