#!/usr/bin/env python3
"""
Location Matcher - Score how well a posting's location fits a worker.

Checks run in priority order and the first one that applies wins:

1. Exact membership of the posting location in the worker's desired locations
2. Geo distance against the worker's preferred radius (both coordinates known)
3. Region fallback (desired location and posting province share a region)
4. Fuzzy containment between a desired location and the posting location
5. Neutral default
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from kindmatch.matcher.geo import haversine_km
from kindmatch.matcher.regions import RegionLookup
from kindmatch.models import JobPosting, WorkerProfile
from kindmatch.utils import clamp_score, normalize_all, normalize_text

if TYPE_CHECKING:
    from kindmatch.config_loader import LocationConfig

logger = logging.getLogger(__name__)

# Qualifier for postings beyond the worker's travel radius
OUTSIDE_RADIUS = "outside"


class LocationMatcher:
    """Score posting locations against worker location preferences (0-100)."""

    def __init__(self, config: LocationConfig, regions: Optional[RegionLookup] = None):
        self.config = config
        self.regions = regions or RegionLookup(config.region_overrides)

    def match(self, worker: WorkerProfile, job: JobPosting) -> int:
        desired = normalize_all(worker.desired_locations)
        job_location = normalize_text(job.location)

        if job_location and job_location in desired:
            return self.config.exact_score

        distance_score = self.calculate_distance_match(worker, job)
        if distance_score is not None:
            return distance_score

        region_score = self.calculate_region_match(worker, job)
        if region_score is not None:
            return region_score

        if self.calculate_fuzzy_match(desired, job_location):
            return self.config.fuzzy_score

        return self.config.default_score

    def calculate_distance_match(self, worker: WorkerProfile, job: JobPosting) -> Optional[int]:
        """
        Score by great-circle distance; None when distance cannot be used.

        Inside the radius the score falls linearly from radius_max_score at
        distance 0 to radius_floor_score at the boundary. Outside the radius it
        is a flat outside_radius_score.
        """
        radius = worker.preferred_work_radius_km
        if worker.coordinates is None or job.coordinates is None or radius <= 0:
            return None

        distance = haversine_km(worker.coordinates, job.coordinates)
        if distance > radius:
            logger.debug(f"Job {job.id} is {distance:.1f}km away, outside {radius}km radius")
            return self.config.outside_radius_score

        top = self.config.radius_max_score
        floor = self.config.radius_floor_score
        score = max(floor, top - (distance / radius) * (top - floor))
        return clamp_score(score)

    def is_outside_radius(self, worker: WorkerProfile, job: JobPosting) -> bool:
        """True only when both coordinates are known and the posting lies beyond the radius."""
        radius = worker.preferred_work_radius_km
        if worker.coordinates is None or job.coordinates is None or radius <= 0:
            return False
        return haversine_km(worker.coordinates, job.coordinates) > radius

    def calculate_region_match(self, worker: WorkerProfile, job: JobPosting) -> Optional[int]:
        """Region fallback; the posting's province falls back to its location text."""
        if not worker.desired_locations:
            return None

        job_region = self.regions.region_for(job.region) if job.region else None
        job_place = job.province or job.location

        for desired in worker.desired_locations:
            desired_region = self.regions.region_for(desired)
            if desired_region is None:
                continue
            if job_region is not None and desired_region == job_region:
                return self.config.region_score
            if job_place and self.regions.same_region(desired, job_place):
                return self.config.same_region_score

        return None

    @staticmethod
    def calculate_fuzzy_match(desired, job_location: str) -> bool:
        """Case-insensitive containment in either direction."""
        if not job_location:
            return False
        return any(d in job_location or job_location in d for d in desired)
