"""Ingest Module - Normalize raw catalog rows into canonical engine types."""
from kindmatch.ingest.normalizer import (
    normalize_job_posting, normalize_job_postings, normalize_worker_profile,
    parse_coordinates, parse_timestamp, parse_availability, total_experience_years,
)

__all__ = [
    'normalize_job_posting', 'normalize_job_postings', 'normalize_worker_profile',
    'parse_coordinates', 'parse_timestamp', 'parse_availability', 'total_experience_years',
]
