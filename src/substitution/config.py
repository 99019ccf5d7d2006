"""Configuration loaded from environment variables.

The school identity lives here, not in the retrieval code: the monitor board
to query is chosen per deployment via SCHOOL_NAME, FORMAT_NAME and
DEPARTMENT_IDS (a JSON list such as ``[2, 1, 3]``).
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from src.substitution.request import DEFAULT_BASE_URL


class SubstitutionConfig(BaseSettings):
    """Settings loaded from environment variables or a local .env file."""

    webuntis_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="WebUntis host serving the school's monitor (without /WebUntis)",
    )
    school_name: str = Field(
        default="",
        description="WebUntis school name as used in the monitor URL",
    )
    format_name: str = Field(
        default="",
        description="Name of the monitor display format configured by the school",
    )
    department_ids: list[int] = Field(
        default_factory=list,
        description="Department IDs selecting which part of the school to show",
    )

    # Transport
    request_timeout: float | None = Field(
        default=None,
        description="Request timeout in seconds passed to requests (unset = no timeout)",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def identity(self) -> dict:
        """Identity fields as a mapping for build_request() to validate.

        Returned unvalidated so that missing values surface as a
        ConfigurationError from the retrieval call, not at config load.
        """
        return {
            "school_name": self.school_name,
            "format_name": self.format_name,
            "department_ids": self.department_ids,
        }


_config: SubstitutionConfig | None = None


def get_config() -> SubstitutionConfig:
    """Get the configuration singleton.

    Returns:
        SubstitutionConfig: Configuration instance
    """
    global _config
    if _config is None:
        _config = SubstitutionConfig()
    return _config
