#!/usr/bin/env python3
"""
Unit tests for matching configuration loading.
"""

import os
from unittest.mock import mock_open, patch

import pytest

from kindmatch.config_loader import MatchingConfig, load_config
from kindmatch.exceptions import ConfigurationError
from kindmatch.scorer.weighting import Dimension, PREFERENCE_CENTRIC, PROFILE_CENTRIC

SAMPLE_CONFIG = """
scorer:
  boost_factor: 1.5
  location:
    outside_radius_score: 25
  salary:
    days_per_month: 22
ranking:
  default_profile: nearby
  default_limit: 10
  max_workers: 2
cache:
  enabled: true
  redis_url: redis://cache:6379/1
profiles:
  Nearby:
    weights:
      location: 40
      job_type: 20
      salary: 15
      skills: 15
      availability: 10
"""


def load_from_text(text, path="custom.yaml"):
    with patch("builtins.open", mock_open(read_data=text)):
        with patch("os.path.exists", return_value=True):
            return load_config(path)


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestLoadConfig:

    def test_loads_yaml(self, clean_env):
        config = load_from_text(SAMPLE_CONFIG)

        assert config.scorer.location.outside_radius_score == 25
        assert config.scorer.location.exact_score == 100
        assert config.scorer.salary.days_per_month == 22
        assert config.ranking.default_limit == 10
        assert config.ranking.max_workers == 2
        assert config.cache.enabled is True
        assert config.cache.redis_url == "redis://cache:6379/1"

    def test_custom_profiles_extend_presets(self, clean_env):
        config = load_from_text(SAMPLE_CONFIG)

        assert set(config.profiles) == {"profile", "preferences", "nearby"}
        assert config.profiles["nearby"].name == "nearby"
        assert config.profiles["nearby"].weights[Dimension.LOCATION] == pytest.approx(0.4)
        assert config.profiles["profile"] == PROFILE_CENTRIC
        assert config.ranking.default_profile == "nearby"

    def test_env_overrides(self):
        env = {
            "REDIS_URL": "redis://env-host:6379/2",
            "KINDMATCH_DEFAULT_PROFILE": " Profile ",
            "KINDMATCH_MAX_WORKERS": "8",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_from_text(SAMPLE_CONFIG)

        assert config.cache.redis_url == "redis://env-host:6379/2"
        assert config.ranking.default_profile == "profile"
        assert config.ranking.max_workers == 8

    def test_empty_file_uses_defaults(self, clean_env):
        config = load_from_text("")
        assert config == MatchingConfig()
        assert config.profiles["preferences"] == PREFERENCE_CENTRIC

    def test_missing_explicit_path(self, clean_env):
        with patch("os.path.exists", return_value=False):
            with pytest.raises(ConfigurationError, match="not found"):
                load_config("missing.yaml")

    @pytest.mark.parametrize("text", [
        "profiles:\n  lopsided:\n    weights:\n      location: 0.9\n",
        "ranking:\n  default_profile: fastest\n",
        "ranking:\n  max_workers: 0\n",
        "- just\n- a list\n",
    ])
    def test_invalid_config(self, clean_env, text):
        with pytest.raises(ConfigurationError):
            load_from_text(text)


class TestDefaults:

    def test_defaults(self):
        config = MatchingConfig()
        assert config.ranking.default_profile == "preferences"
        assert config.ranking.default_limit == 20
        assert config.cache.enabled is False
        assert config.cache.ttl_seconds == 300
        assert config.scorer.boost_factor == 1.5
        assert ["caregiver", "yaya", "nanny", "housekeeper", "kasambahay"] in config.scorer.title_synonyms

    def test_repository_config_file_is_valid(self, clean_env):
        config = load_config()
        assert "nearby" in config.profiles
