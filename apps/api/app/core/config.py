from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "CRM Configuration API"
    app_version: str = "0.1.0"
    app_env: str = "local"
    app_debug: bool = True
    api_port: int = 8000
    log_level: str = "INFO"

    # Resolution
    classification_strict: bool = False
    strict_templates: bool = False

    # Module registry
    register_builtin_modules: bool = True
    module_unregister_guard: bool = True

    metrics_enabled: bool = False
    otel_enabled: bool = False
    otel_console_exporter: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
