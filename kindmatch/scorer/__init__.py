#!/usr/bin/env python3
"""
Scoring Module - Per-dimension scoring, weighting and combination.

Public API:
- ScoringService: Scores one (worker, posting) pair under a weighting profile
- WeightingProfile / Dimension: Named, immutable dimension → weight maps

Modules:

- titles.py: Job title and job type matching (direct + synonym groups)
- salary.py: Salary parsing, pay-period conversion and range comparison
- skills.py: Skill and language coverage
- experience.py: Experience signal detection and tiers
- availability.py: Weekday availability
- engagement.py: Worker rating and recent activity
- priority.py: Posting priority (boost, freshness, pay, urgency)
- weighting.py: Weighting profiles and presets
- combiner.py: Weighted sum, boost and clamp
- reasons.py: Threshold-driven match reasons
- service.py: ScoringService orchestrator
"""

from kindmatch.scorer.weighting import (
    Dimension, WeightingProfile, PROFILE_CENTRIC, PREFERENCE_CENTRIC,
    default_profiles, get_profile,
)
from kindmatch.scorer.combiner import CombinedScore, ScoreCombiner
from kindmatch.scorer.reasons import ReasonGenerator
from kindmatch.scorer.service import ScoringService

__all__ = [
    'ScoringService', 'ScoreCombiner', 'CombinedScore', 'ReasonGenerator',
    'Dimension', 'WeightingProfile', 'PROFILE_CENTRIC', 'PREFERENCE_CENTRIC',
    'default_profiles', 'get_profile',
]
