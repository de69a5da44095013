#!/usr/bin/env python3
"""
Score Combiner - Weighted sum of dimension scores, boost, clamp.

Formula: round(sum(breakdown[d] * weight[d])), multiplied by the boost factor
and rounded again while the posting's boost is active, then clamped to [0, 100].
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping

from kindmatch.scorer.weighting import WeightingProfile
from kindmatch.utils import clamp, clamp_score, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_BOOST_FACTOR = 1.5


@dataclass
class CombinedScore:
    score: int
    base_score: int
    contributions: Dict[str, float] = field(default_factory=dict)
    boosted: bool = False


class ScoreCombiner:
    def __init__(self, boost_factor: float = DEFAULT_BOOST_FACTOR):
        self.boost_factor = boost_factor

    def combine(
        self,
        breakdown: Mapping[str, int],
        profile: WeightingProfile,
        boost_active: bool = False,
    ) -> CombinedScore:
        """
        Combine a per-dimension breakdown under a weighting profile.

        Dimensions the profile weights but the breakdown lacks count as 0.
        The final score is always within [0, 100], boost or not.
        """
        contributions: Dict[str, float] = {}
        total = 0.0
        for dimension, weight in profile.weights.items():
            value = breakdown.get(dimension.value, 0) * weight
            total += value
            contributions[dimension.value] = round(clamp(value, 0.0, 100.0), 2)

        base_score = round_half_up(total)
        score = base_score
        if boost_active:
            score = round_half_up(base_score * self.boost_factor)

        return CombinedScore(
            score=clamp_score(score),
            base_score=clamp_score(base_score),
            contributions=contributions,
            boosted=boost_active,
        )
