"""Configuration management for yearpeer."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SECRET_KEY = "insecure-development-key"  # noqa: S105


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    sqlite_db_path: str = Field(default="yearpeer.db", description="Path to the SQLite database file")

    # Runtime Environment
    environment: str = Field(default="production", description="Runtime environment (development or production)")

    # Session Configuration
    secret_key: str = Field(default=DEFAULT_SECRET_KEY, description="Secret used to sign session cookies")
    session_cookie_name: str = Field(default="yearpeer_session", description="Name of the session cookie")
    session_max_age_seconds: int = Field(default=86400, description="Session lifetime in seconds (1 day)")
    auth_callback_secret: str | None = Field(
        default=None,
        description="Shared secret the identity proxy sends when posting verified sign-in claims",
    )

    # Frontend Configuration
    frontend_url: str = Field(default="http://localhost:5173", description="Allowed CORS origin for the calendar UI")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Planner Limits
    task_limit: int = Field(default=5, description="Maximum number of tasks per user per calendar day")
    max_goals_per_year: int = Field(default=50, description="Maximum number of goals starting in one year")
    max_description_length: int = Field(default=2000, description="Maximum task description length")

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production mode."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Whether detailed error messages may be returned to clients."""
        return self.environment.lower() == "development"

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


class PlannerLimits(BaseModel):
    """Deployment-wide planner limits, read once at startup."""

    model_config = ConfigDict(frozen=True)

    task_limit: int = Field(default=5, ge=1)
    max_goals_per_year: int = Field(default=50, ge=1)
    max_description_length: int = Field(default=2000, ge=1)

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "PlannerLimits":
        """Build the limits value object from application settings."""
        return cls(
            task_limit=app_settings.task_limit,
            max_goals_per_year=app_settings.max_goals_per_year,
            max_description_length=app_settings.max_description_length,
        )


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_BAD_REQUEST: int = 400
    HTTP_UNAUTHORIZED: int = 401
    HTTP_NOT_FOUND: int = 404
    HTTP_METHOD_NOT_ALLOWED: int = 405
    HTTP_SERVER_ERROR: int = 500

    # Field Constraints
    MAX_TITLE_LENGTH: int = 255
    MAX_NAME_LENGTH: int = 100
    MAX_PICTURE_URL_LENGTH: int = 2048
    HEX_COLOR_PATTERN: str = r"^#[0-9A-Fa-f]{6}$"
    MIN_IMPACT: int = 1
    MAX_IMPACT: int = 5

    # Date Formats
    DATE_KEY_FORMAT: str = "%Y-%m-%d"  # Bucket key for tasks grouped by day

    # Session
    SESSION_SALT: str = "user-session"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
