"""Test configuration reading from multiple sources."""

import os
from datetime import timedelta
from unittest.mock import patch

from flybus.configs.config import AppConfig, get_app_config


class TestConfigSources:
    """Test configuration loading from multiple sources."""

    def test_static_yaml_loaded(self):
        config = get_app_config()

        assert config.session.ttl == timedelta(hours=1)
        assert config.api.rate_limit_max_requests == 100
        assert config.api.rate_limit_window == timedelta(minutes=15)
        assert config.broadcast.channel == "chat-channel"
        assert config.llm.temperature == 0.7

    def test_knowledge_corpus_shipped(self):
        knowledge = get_app_config().knowledge

        section_types = {section.type for section in knowledge.sections}
        assert {"schedule", "pricing", "pickup_service", "flight_timing"} <= (
            section_types
        )
        assert {g.region for g in knowledge.flight_guidance} == {
            "europe",
            "us_canada",
        }
        assert any(loc.name == "Hotel Borg" for loc in knowledge.locations)

    def test_env_vars_override_yaml(self):
        env_vars = {
            "FLYBUS_API__RATE_LIMIT_MAX_REQUESTS": "10",
            "FLYBUS_SESSION__TTL": "PT30M",
            "FLYBUS_API__API_KEY": "secret",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig()

            assert config.api.rate_limit_max_requests == 10
            assert config.session.ttl == timedelta(minutes=30)
            assert config.api.api_key.get_secret_value() == "secret"

    def test_get_app_config_rereads(self):
        config1 = get_app_config()
        config2 = get_app_config()

        assert config1 is not config2
        assert config1 == config2
