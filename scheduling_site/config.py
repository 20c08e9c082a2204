"""Site configuration loaded from environment variables.

settings.py reads every deployment-dependent value from here.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class SiteConfig(BaseSettings):
    """Site configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Django
    django_secret_key: str = Field(
        default="dev-only-not-secret",
        description="Django SECRET_KEY",
    )
    django_debug: bool = Field(
        default=True,
        description="Django DEBUG flag",
    )
    django_allowed_hosts: str = Field(
        default="localhost,127.0.0.1",
        description="Comma separated list of host names the site may serve",
    )

    # Storage
    scheduling_db_path: str | None = Field(
        default=None,
        description="SQLite database file (db.sqlite3 next to manage.py when unset)",
    )

    # Scheduling
    scheduling_default_hourly_rate: int = Field(
        default=60,
        ge=0,
        description="Rate applied to an expert added to a course without an explicit one",
    )

    # Logging
    scheduling_log_level: str = Field(
        default="INFO",
        description="Log level for scheduling_app (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def allowed_hosts(self) -> list[str]:
        return [h.strip() for h in self.django_allowed_hosts.split(",") if h.strip()]


# Singleton pattern
_config: SiteConfig | None = None


def get_config() -> SiteConfig:
    """Get the site configuration singleton.

    Returns:
        SiteConfig: Site configuration instance
    """
    global _config
    if _config is None:
        _config = SiteConfig()
    return _config
