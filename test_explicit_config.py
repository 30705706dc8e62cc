#!/usr/bin/env python3
"""
Test explicit configuration requirements.
"""

import pytest
import yaml
from pydantic import ValidationError

from domain_analysis.config import API_KEY_ENV, Configuration

FULL_ANALYSIS_CONFIG = {
    "analysis": {
        "endpoint_url": "https://llm.test/chat/completions",
        "model": "deepseek-reasoner",
        "max_tokens": 2048,
        "flush_interval_ms": 75,
        "reasoning_sentinel": "Conclusion:",
        "timeout": {"connect": 5.0, "read": 30.0},
    },
    "logging": {"level": "DEBUG"},
}


@pytest.fixture
def write_config(tmp_path):
    def _write(data) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump(data))
        return str(path)
    return _write


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV, "sk-from-env")
    return "sk-from-env"


def test_bundled_config_builds_client_config(api_key):
    """The shipped config.yaml is complete."""
    client_config = Configuration().build_client_config()

    assert client_config.api_key == api_key
    assert client_config.model == "deepseek-reasoner"
    assert client_config.max_tokens == 4000
    assert client_config.flush_interval_ms == 50
    assert client_config.flush_interval == pytest.approx(0.05)


def test_all_options_are_applied(write_config, api_key):
    """Every YAML option reaches the client config."""
    config = Configuration(write_config(FULL_ANALYSIS_CONFIG))
    client_config = config.build_client_config()

    assert client_config.endpoint_url == "https://llm.test/chat/completions"
    assert client_config.max_tokens == 2048
    assert client_config.flush_interval == pytest.approx(0.075)
    assert client_config.reasoning_sentinel == "Conclusion:"
    assert client_config.connect_timeout == 5.0
    assert client_config.read_timeout == 30.0
    assert config.get_logging_config() == {"level": "DEBUG"}


def test_missing_analysis_key_requires_explicit_config(write_config, api_key):
    """Each required analysis key must be configured."""
    data = {"analysis": dict(FULL_ANALYSIS_CONFIG["analysis"])}
    del data["analysis"]["flush_interval_ms"]
    config = Configuration(write_config(data))

    with pytest.raises(ValueError, match="analysis.flush_interval_ms must be explicitly configured"):
        config.build_client_config()


def test_missing_api_key(write_config, monkeypatch):
    """A missing API key is reported by environment variable name."""
    monkeypatch.setattr(Configuration, "load_env", staticmethod(lambda: None))
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    config = Configuration(write_config(FULL_ANALYSIS_CONFIG))

    with pytest.raises(ValueError, match=API_KEY_ENV):
        config.build_client_config()


def test_invalid_values_are_rejected(write_config, api_key):
    """Non-positive limits fail validation."""
    data = {"analysis": dict(FULL_ANALYSIS_CONFIG["analysis"], max_tokens=0)}
    config = Configuration(write_config(data))

    with pytest.raises(ValidationError):
        config.build_client_config()


def test_config_file_must_be_a_mapping(write_config):
    """A YAML list is not a valid configuration."""
    with pytest.raises(ValueError, match="Config file must be YAML dict"):
        Configuration(write_config(["not", "a", "mapping"]))
