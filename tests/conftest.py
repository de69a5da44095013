"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest

from kindmatch.config_loader import MatchingConfig
from kindmatch.ranking import RankingPipeline
from kindmatch.scorer import ScoringService
from tests import FIXED_NOW, make_job, make_worker


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests that score large candidate sets (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def matching_config():
    """Built-in defaults, independent of any config.yaml on disk."""
    return MatchingConfig()


@pytest.fixture
def scoring_service(matching_config):
    return ScoringService(matching_config.scorer)


@pytest.fixture
def pipeline(matching_config):
    return RankingPipeline.from_config(matching_config)


@pytest.fixture
def worker():
    return make_worker()


@pytest.fixture
def job():
    return make_job()
