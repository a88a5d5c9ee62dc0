"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .retry import BackoffStrategy, RetryPolicy

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_5) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.5 Safari/605.1.15"
)


class AlbumConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Network
    request_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    # Retry policy
    max_retries: int = 3
    base_delay: float = 0.5
    max_delay: float = 30.0
    backoff: BackoffStrategy = BackoffStrategy.EXPONENTIAL_JITTER

    # Fetch behaviour
    reuse_probe_response: bool = True
    strict_asset_urls: bool = False

    # Download settings
    max_workers: int = 4

    # Internal fields not loaded from INI file
    config_path: str = Field(default="", repr=False)

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be a positive number of seconds.")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0 or v > 10:
            raise ValueError("Max retries must be between 0 and 10.")
        return v

    @field_validator("base_delay", "max_delay")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Retry delays cannot be negative.")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 32:
            raise ValueError("Max workers must be between 1 and 32.")
        return v

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        if not v:
            raise ValueError("User agent cannot be empty.")
        return v

    @model_validator(mode="after")
    def validate_delay_bounds(self) -> "AlbumConfig":
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be greater than or equal to base_delay.")
        return self

    def retry_policy(self) -> RetryPolicy:
        """Builds the retry policy described by these settings."""
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            strategy=self.backoff,
            max_delay=self.max_delay,
        )

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
