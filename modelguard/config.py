from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Rule keys
    SELF_REFERENCE_KEY: str = "self"
    MULTI_ATTRIBUTE_KEY_SEPARATOR: str = ","

    # Invalid value paths: "default" (customer.name) or "ruby-on-rails" (customer[name])
    PATH_FORMAT: str = "default"

    # Optional YAML message catalog used as the process-wide default
    MESSAGES_FILE: str | None = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    class Config:
        env_prefix = "MODELGUARD_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
