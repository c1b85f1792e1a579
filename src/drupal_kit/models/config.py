"""Configuration models for drupal-kit.

Settings are read from keyword arguments, ``DRUPAL_*`` environment
variables or a ``.env`` file, in that order of precedence.
"""

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetryConfig(BaseModel):
    """Retry policy for the HTTP transport.

    The default of a single attempt means connection failures surface
    immediately. Raising ``max_attempts`` lets the transport retry
    connection and timeout failures with exponential backoff; responses
    are never retried.
    """

    max_attempts: int = Field(default=1, ge=1, le=10, description="Total attempts per request")
    initial_wait: float = Field(default=1.0, ge=0.1, le=60.0, description="First backoff in seconds")
    max_wait: float = Field(default=30.0, ge=1.0, le=300.0, description="Backoff ceiling in seconds")
    exponential_base: float = Field(default=2.0, ge=1.0, le=10.0, description="Backoff multiplier")


class DrupalConfig(BaseSettings):
    """Connection settings for a Drupal site.

    Example:
        >>> config = DrupalConfig(
        ...     base_url="https://example.com",
        ...     username="editor",
        ...     password="secret",
        ... )
        >>> config.get_base_url()
        'https://example.com'
    """

    model_config = SettingsConfigDict(
        env_prefix="DRUPAL_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(..., description="Site root URL, e.g. https://example.com")
    username: str = Field(default="", description="Account name used for login")
    password: SecretStr = Field(default=SecretStr(""), description="Account password")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    max_connections: int = Field(default=10, ge=1, description="HTTP connection pool size")
    max_concurrency: int = Field(
        default=5, ge=1, description="Parallel reference fetches when expanding references"
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def get_base_url(self) -> str:
        return self.base_url

    def get_credentials(self) -> tuple[str, str]:
        """Return the login name and the unwrapped password."""
        return self.username, self.password.get_secret_value()
