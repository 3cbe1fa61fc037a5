"""Tests for configuration classes."""

import os
from dataclasses import FrozenInstanceError
from pathlib import Path
from unittest.mock import patch

import pytest

from config import (
    AppConfig,
    BlackjackConfig,
    CORSConfig,
    ProgressConfig,
    RateLimitConfig,
    SecurityConfig,
    SolitaireConfig,
    StorageConfig,
    _parse_cors_origins,
)


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:3000"]

    def test_cors_parses_env_var(self):
        """Test that origins are split on commas and stripped."""
        with patch.dict(os.environ, {"CORS_ORIGINS": "  http://example.com , http://localhost:5173,"}):
            assert _parse_cors_origins() == ["http://example.com", "http://localhost:5173"]

    def test_cors_defaults_allow_all(self):
        config = CORSConfig()
        assert config.allow_credentials is True
        assert "*" in config.allow_methods
        assert "*" in config.allow_headers


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()
            assert config.enabled is True
            assert config.requests_per_minute == 120

    def test_rate_limit_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "False", "RATE_LIMIT_RPM": "30"}):
            config = RateLimitConfig()
            assert config.enabled is False
            assert config.requests_per_minute == 30


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_auto_generates(self):
        with patch.dict(os.environ, {}, clear=True):
            assert len(SecurityConfig().secret_key) > 0

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "my-super-secret-key-12345"}):
            assert SecurityConfig().secret_key == "my-super-secret-key-12345"


class TestStorageConfig:
    """Tests for StorageConfig class."""

    def test_default_data_dir(self):
        with patch.dict(os.environ, {}, clear=True):
            config = StorageConfig()
            assert config.data_dir.name == ".card-arcade"
            assert config.state_key == "cardGameState"

    def test_data_dir_from_env(self, tmp_path):
        with patch.dict(os.environ, {"DATA_DIR": str(tmp_path)}):
            assert StorageConfig().data_dir == Path(tmp_path)


class TestGameConfigs:
    """Tests for the game tunables."""

    def test_blackjack_defaults(self):
        config = BlackjackConfig()
        assert config.starting_chips == 1000
        assert config.default_bet == 10
        assert config.min_bet == 10
        assert config.reshuffle_threshold == 10
        assert config.dealer_stands_on == 17
        assert config.blackjack_return == 2.5

    def test_solitaire_defaults(self):
        config = SolitaireConfig()
        assert config.draw_count == 3
        assert config.foundation_points == 10
        assert config.tableau_points == 5

    def test_progress_defaults(self):
        config = ProgressConfig()
        assert config.starting_coins == 100
        assert (config.win_experience, config.loss_experience) == (50, 10)
        assert (config.win_coins, config.loss_coins) == (20, 5)

    def test_configs_frozen(self):
        with pytest.raises(FrozenInstanceError):
            BlackjackConfig().min_bet = 1


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
            assert config.debug is False
            assert config.host == "127.0.0.1"
            assert config.port == 8000
            assert config.log_level == "INFO"
            assert config.session_ttl == 86400

    def test_app_config_from_env(self):
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000", "LOG_LEVEL": "debug"}):
            config = AppConfig()
            assert config.debug is True
            assert config.port == 9000
            assert config.log_level == "DEBUG"

    def test_app_config_has_nested_configs(self):
        config = AppConfig()
        assert isinstance(config.storage, StorageConfig)
        assert isinstance(config.blackjack, BlackjackConfig)
        assert isinstance(config.solitaire, SolitaireConfig)
        assert isinstance(config.progress, ProgressConfig)
