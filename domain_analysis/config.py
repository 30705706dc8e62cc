"""Configuration management for the domain analysis client."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

from .llm.models import AnalysisClientConfig

API_KEY_ENV = "DEEPSEEK_API_KEY"


class Configuration:
    """Manages configuration and environment variables for the analysis client."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables.

        Args:
            config_path: Optional YAML path; defaults to the bundled config.yaml.
        """
        self.load_env()  # Load .env for API keys
        self.config_path = config_path or os.path.join(
            os.path.dirname(__file__), "config.yaml"
        )
        self._config = self._load_yaml_config(self.config_path)

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @staticmethod
    def _load_yaml_config(config_path: str) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def api_key(self) -> str:
        """Get the API key for the analysis endpoint.

        Returns:
            The API key as a string.

        Raises:
            ValueError: If the API key is not found in environment variables.
        """
        api_key = os.getenv(API_KEY_ENV)
        if not api_key:
            raise ValueError(
                f"API key '{API_KEY_ENV}' not found in environment variables"
            )
        return api_key

    def get_config_dict(self) -> dict[str, Any]:
        """Get the full configuration dictionary."""
        return self._config

    def get_analysis_config(self) -> dict[str, Any]:
        """Get the analysis client section from YAML.

        Returns:
            Analysis configuration dictionary.

        Raises:
            ValueError: If required parameters are missing.
        """
        analysis_config = self._config.get("analysis", {})

        required_keys = ["endpoint_url", "model", "max_tokens", "flush_interval_ms"]
        for key in required_keys:
            if key not in analysis_config:
                raise ValueError(
                    f"analysis.{key} must be explicitly configured in config.yaml"
                )

        return analysis_config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML.

        Returns:
            Logging configuration dictionary.
        """
        return self._config.get("logging", {})

    def build_client_config(self) -> AnalysisClientConfig:
        """Build the validated client configuration.

        Raises:
            ValueError: If the API key or a required setting is missing.
            pydantic.ValidationError: If a setting has an invalid value.
        """
        analysis_config = self.get_analysis_config()
        timeout_config = analysis_config.get("timeout", {})

        options: dict[str, Any] = {
            "api_key": self.api_key,
            "endpoint_url": analysis_config["endpoint_url"],
            "model": analysis_config["model"],
            "max_tokens": analysis_config["max_tokens"],
            "flush_interval_ms": analysis_config["flush_interval_ms"],
        }
        if "reasoning_sentinel" in analysis_config:
            options["reasoning_sentinel"] = analysis_config["reasoning_sentinel"]
        if "connect" in timeout_config:
            options["connect_timeout"] = timeout_config["connect"]
        if "read" in timeout_config:
            options["read_timeout"] = timeout_config["read"]

        return AnalysisClientConfig(**options)
