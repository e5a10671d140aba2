"""Tests for settings validation."""

import pydantic
import pytest

from backoffice.config import Config


class TestCounterSettings:
    """Tests for counter-related settings."""

    def test_defaults(self):
        config = Config(database_url="mongodb://localhost:27017/backoffice")

        assert config.counter_backend == "mongo"
        assert config.counter_max_attempts == 10

    def test_max_attempts_must_be_positive(self):
        """Test that zero attempts, which could never allocate, is refused at startup."""
        with pytest.raises(pydantic.ValidationError):
            Config(database_url="mongodb://localhost:27017/backoffice", counter_max_attempts=0)

    def test_max_attempts_from_environment(self, monkeypatch):
        """Test that settings are read from BACKOFFICE_ variables."""
        monkeypatch.setenv("BACKOFFICE_DATABASE_URL", "mongodb://db:27017/shop")
        monkeypatch.setenv("BACKOFFICE_COUNTER_MAX_ATTEMPTS", "3")

        config = Config()

        assert config.database_url == "mongodb://db:27017/shop"
        assert config.counter_max_attempts == 3
