"""Tests for EventSourceConfig."""

import pytest

from eventsource_client.config import EventSourceConfig
from eventsource_client.errors import ConfigurationError


class TestEventSourceConfig:
    def test_defaults(self):
        config = EventSourceConfig()
        assert config.reconnect_delay_ms == 5000
        assert config.connect_timeout == 30.0
        assert config.max_redirect_follows == 10

    def test_timeout_never_times_out_reads(self):
        timeout = EventSourceConfig(connect_timeout=2.5).timeout()
        assert timeout.read is None
        assert timeout.connect == 2.5

    def test_negative_delay_rejected(self):
        with pytest.raises(ConfigurationError):
            EventSourceConfig(reconnect_delay_ms=-1)

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ConfigurationError):
            EventSourceConfig(connect_timeout=0)


class TestFromEnv:
    def test_empty_environment_uses_defaults(self):
        assert EventSourceConfig.from_env(environ={}) == EventSourceConfig()

    def test_reads_all_variables(self):
        config = EventSourceConfig.from_env(
            environ={
                "EVENTSOURCE_RECONNECT_DELAY_MS": "1500",
                "EVENTSOURCE_CONNECT_TIMEOUT": "4.5",
                "EVENTSOURCE_MAX_REDIRECT_FOLLOWS": "2",
            }
        )
        assert config == EventSourceConfig(
            reconnect_delay_ms=1500, connect_timeout=4.5, max_redirect_follows=2
        )

    def test_none_timeout(self):
        config = EventSourceConfig.from_env(environ={"EVENTSOURCE_CONNECT_TIMEOUT": "none"})
        assert config.connect_timeout is None

    def test_bad_integer_raises_configuration_error(self):
        with pytest.raises(ConfigurationError) as excinfo:
            EventSourceConfig.from_env(environ={"EVENTSOURCE_RECONNECT_DELAY_MS": "soon"})
        assert isinstance(excinfo.value.cause, ValueError)

    def test_bad_timeout_raises_configuration_error(self):
        with pytest.raises(ConfigurationError):
            EventSourceConfig.from_env(environ={"EVENTSOURCE_CONNECT_TIMEOUT": "fast"})
