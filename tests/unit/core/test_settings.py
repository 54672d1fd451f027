"""Tests for Settings configuration."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cvmatch_core.config.settings import Settings


def _base_env() -> dict[str, str]:
    """Minimum required env vars for Settings."""
    return {"CVM_ANTHROPIC_API_KEY": "sk-ant-test"}


@pytest.mark.unit
class TestSettings:
    """Test Settings validation and defaults."""

    def test_defaults(self) -> None:
        """Settings loads with the API key alone."""
        with patch.dict(os.environ, _base_env(), clear=False):
            s = Settings()  # type: ignore[call-arg]
        assert s.embedding_provider == "local"
        assert s.embedding_dimension == 384
        assert s.max_optimization_attempts == 5
        assert s.optimization_target_score == 0.95
        assert s.invitation_ttl_days == 7
        assert s.anthropic_api_key.get_secret_value() == "sk-ant-test"

    def test_env_prefix(self) -> None:
        """CVM_-prefixed variables override defaults."""
        env = {**_base_env(), "CVM_LOW_SCORE_THRESHOLD": "45", "CVM_LOG_FORMAT": "json"}
        with patch.dict(os.environ, env, clear=False):
            s = Settings()  # type: ignore[call-arg]
        assert s.low_score_threshold == 45
        assert s.log_format == "json"

    def test_voyage_without_key_raises(self) -> None:
        """Voyage provider needs its API key."""
        env = {**_base_env(), "CVM_EMBEDDING_PROVIDER": "voyage"}
        with (
            patch.dict(os.environ, env, clear=False),
            pytest.raises(ValidationError, match="voyage_api_key required"),
        ):
            Settings()  # type: ignore[call-arg]

    def test_voyage_sets_dimension(self) -> None:
        """Voyage embeddings are 1024-dimensional."""
        env = {
            **_base_env(),
            "CVM_EMBEDDING_PROVIDER": "voyage",
            "CVM_VOYAGE_API_KEY": "voyage-test",
        }
        with patch.dict(os.environ, env, clear=False):
            s = Settings()  # type: ignore[call-arg]
        assert s.embedding_dimension == 1024

    def test_sendgrid_without_key_raises(self) -> None:
        """SendGrid provider needs its API key."""
        env = {**_base_env(), "CVM_EMAIL_PROVIDER": "sendgrid"}
        with (
            patch.dict(os.environ, env, clear=False),
            pytest.raises(ValidationError, match="sendgrid_api_key required"),
        ):
            Settings()  # type: ignore[call-arg]

    def test_optimization_attempts_must_be_positive(self) -> None:
        """Zero rewrite attempts is rejected."""
        env = {**_base_env(), "CVM_MAX_OPTIMIZATION_ATTEMPTS": "0"}
        with patch.dict(os.environ, env, clear=False), pytest.raises(ValidationError):
            Settings()  # type: ignore[call-arg]
