#!/usr/bin/env python3
"""
Reason Generator - Human-readable explanations for a score breakdown.

Each dimension has a threshold table checked top-down; the first threshold
the dimension's score reaches contributes its sentence. Dimensions are
visited in Dimension declaration order, so the same breakdown always yields
the same reasons.

Low scores only produce a sentence when the service also reports a
qualifier (salary above or below the expectation, location outside the
radius), since the score alone does not say which way the dimension missed.
"""

from typing import Dict, List, Mapping, Optional, Tuple

from kindmatch.matcher.location import OUTSIDE_RADIUS
from kindmatch.scorer.salary import ABOVE, BELOW
from kindmatch.scorer.weighting import Dimension

ReasonRules = List[Tuple[int, str]]

REASON_RULES: Dict[Dimension, ReasonRules] = {
    Dimension.JOB_TITLE: [
        (100, "Job title matches your preferences"),
        (1, "Job title is related to your preferences"),
    ],
    Dimension.JOB_TYPE: [
        (100, "Work arrangement matches your preferences"),
        (60, "Work arrangement is close to your preferences"),
    ],
    Dimension.LOCATION: [
        (100, "Location matches your preferences"),
        (60, "Location is near your preferred areas"),
    ],
    Dimension.SALARY: [
        (80, "Salary meets your expectations"),
        (60, "Salary is close to your expectations"),
    ],
    Dimension.LANGUAGES: [
        (80, "Language requirements match your skills"),
        (30, "Some language requirements may not match"),
    ],
    Dimension.SKILLS: [
        (80, "Your skills match the job requirements"),
        (60, "Most of your skills match the job requirements"),
        (40, "Some of your skills match the job requirements"),
        (1, "Few of your skills match the job requirements"),
    ],
    Dimension.EXPERIENCE: [
        (80, "Your experience fits the role"),
        (60, "You have some of the experience asked for"),
    ],
    Dimension.AVAILABILITY: [
        (100, "You are available today"),
        (50, "You are available this week"),
    ],
    Dimension.RATING: [
        (80, "Your rating makes you a strong candidate"),
    ],
    Dimension.RECENCY: [],
    Dimension.PRIORITY: [
        (80, "High priority job"),
        (60, "Good priority job"),
    ],
}


# Below every threshold, keyed by the qualifier the scorer reported
QUALIFIED_REASONS: Dict[Dimension, Dict[str, str]] = {
    Dimension.LOCATION: {
        OUTSIDE_RADIUS: "Location is outside your preferred areas",
    },
    Dimension.SALARY: {
        ABOVE: "Salary is above your expectations",
        BELOW: "Salary is below your expectations",
    },
}


class ReasonGenerator:
    def __init__(
        self,
        rules: Optional[Mapping[Dimension, ReasonRules]] = None,
        qualified: Optional[Mapping[Dimension, Mapping[str, str]]] = None,
    ):
        self.rules = dict(rules) if rules is not None else REASON_RULES
        self.qualified = dict(qualified) if qualified is not None else QUALIFIED_REASONS

    def generate(
        self,
        breakdown: Mapping[str, int],
        qualifiers: Optional[Mapping[str, Optional[str]]] = None,
    ) -> List[str]:
        """
        `qualifiers` maps a dimension value to a scorer-supplied qualifier such
        as "above" / "below" for salary or "outside" for location.
        """
        qualifiers = qualifiers or {}
        reasons: List[str] = []
        for dimension in Dimension:
            if dimension.value not in breakdown:
                continue
            reason = self._threshold_reason(dimension, breakdown[dimension.value])
            if reason is None:
                qualifier = qualifiers.get(dimension.value)
                reason = self.qualified.get(dimension, {}).get(qualifier) if qualifier else None
            if reason is not None:
                reasons.append(reason)
        return reasons

    def _threshold_reason(self, dimension: Dimension, score: int) -> Optional[str]:
        for threshold, text in self.rules.get(dimension, []):
            if score >= threshold:
                return text
        return None
