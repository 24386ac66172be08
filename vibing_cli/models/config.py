"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .query import DEFAULT_PAGE_SIZE

DEFAULT_VOLUME = 50
DEFAULT_DOWNLOAD_DIR = "~/Music/vibing"


class ClientConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Catalog service
    base_url: str
    request_timeout: float = 30.0

    # Browsing
    page_size: int = DEFAULT_PAGE_SIZE
    default_volume: int = DEFAULT_VOLUME

    # Downloads & logging
    download_dir: str = DEFAULT_DOWNLOAD_DIR
    event_log: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Requires an absolute http(s) URL and drops any trailing slash."""
        if not v:
            raise ValueError(
                "Catalog base URL is not configured. Set VIBING_API_URL or run "
                "'vibing-cli init <URL>'."
            )
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Catalog base URL must be http(s), got: {v}")
        return v.rstrip("/")

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1 or v > 100:
            raise ValueError("Page size must be between 1 and 100.")
        return v

    @field_validator("default_volume")
    @classmethod
    def validate_volume(cls, v: int) -> int:
        if v < 0 or v > 100:
            raise ValueError("Default volume must be between 0 and 100.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be positive.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
