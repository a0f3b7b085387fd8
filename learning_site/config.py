from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class SiteSettings(BaseSettings):
    SITE_NAME: str = "DevOps Hub"

    # Directory holding docs/guides and projects/<level>/<project>
    CONTENT_ROOT: str = "."

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore"
    )


@lru_cache()
def get_site_settings():
    return SiteSettings()
