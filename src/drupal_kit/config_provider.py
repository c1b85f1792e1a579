"""Factory helpers for building DrupalConfig instances.

These wrap pydantic validation so that every configuration problem is
reported as a ConfigurationError.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models.config import DrupalConfig, RetryConfig

logger = logging.getLogger(__name__)


class ConfigFactory:
    """Create DrupalConfig objects from different sources."""

    @staticmethod
    def create(
        base_url: str,
        username: str = "",
        password: str = "",
        *,
        retry: RetryConfig | dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> DrupalConfig:
        """Create a configuration from explicit values.

        Args:
            base_url: Site root URL
            username: Login name
            password: Login password
            retry: Retry policy as a model or plain dict
            **kwargs: Any other DrupalConfig field

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If a value fails validation
        """
        values: dict[str, Any] = {
            "base_url": base_url,
            "username": username,
            "password": password,
            **kwargs,
        }
        if retry is not None:
            values["retry"] = retry

        return ConfigFactory.from_dict(values)

    @staticmethod
    def from_dict(values: dict[str, Any]) -> DrupalConfig:
        """Create a configuration from a dictionary.

        No ``.env`` file is read; values given here take precedence over
        ``DRUPAL_*`` environment variables.
        """
        try:
            return DrupalConfig(_env_file=None, **values)  # type: ignore[call-arg]
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @staticmethod
    def from_env_file(path: str | Path) -> DrupalConfig:
        """Create a configuration from a ``.env`` file plus the environment.

        Raises:
            ConfigurationError: If the file is missing or values are invalid
        """
        env_path = Path(path)
        if not env_path.is_file():
            raise ConfigurationError(f"Config file not found: {env_path}")

        logger.debug(f"Loading configuration from {env_path}")
        try:
            return DrupalConfig(_env_file=env_path)  # type: ignore[call-arg]
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {env_path}: {e}") from e

    @staticmethod
    def from_environment_only() -> DrupalConfig:
        """Create a configuration from ``DRUPAL_*`` environment variables."""
        try:
            return DrupalConfig(_env_file=None)  # type: ignore[call-arg]
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def create_config(base_url: str, username: str = "", password: str = "", **kwargs: Any) -> DrupalConfig:
    """Shortcut for ConfigFactory.create."""
    return ConfigFactory.create(base_url, username, password, **kwargs)


def load_config(env_file: str | Path | None = None) -> DrupalConfig:
    """Load configuration from an optional ``.env`` file and the environment.

    Args:
        env_file: Path to a ``.env`` file; when omitted only the environment
            is consulted

    Returns:
        Validated configuration
    """
    if env_file is not None:
        return ConfigFactory.from_env_file(env_file)
    return ConfigFactory.from_environment_only()
