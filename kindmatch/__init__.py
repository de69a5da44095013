"""
kindmatch - Worker ↔ job posting matching and ranking engine.

Public API:
- RankingPipeline: rank candidate postings for one worker
- ScoringService: score one (worker, posting) pair
- load_config / MatchingConfig: YAML configuration
"""

from kindmatch.config_loader import MatchingConfig, load_config
from kindmatch.exceptions import (
    ConfigurationError, InvalidInputError, MatchingException, UnknownProfileError,
)
from kindmatch.models import JobPosting, JobStatus, MatchResult, WorkerProfile
from kindmatch.ranking import RankingPipeline
from kindmatch.scorer import Dimension, ScoringService, WeightingProfile

__version__ = "0.1.0"

__all__ = [
    'RankingPipeline', 'ScoringService', 'WeightingProfile', 'Dimension',
    'WorkerProfile', 'JobPosting', 'JobStatus', 'MatchResult',
    'MatchingConfig', 'load_config',
    'MatchingException', 'InvalidInputError', 'UnknownProfileError', 'ConfigurationError',
]
