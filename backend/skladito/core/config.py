from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Skladito API"
    version: str = "2.0"
    api_prefix: str = "/api/v1"
    database_url: str = "sqlite:///./skladito.db"
    auto_create_tables: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    jwt_secret_key: str = "change-me-in-env"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30
    invite_ttl_hours: int = 72

    seed_defaults: bool = True
    bootstrap_admin_name: str = "Admin"
    bootstrap_admin_code: str | None = None

    scope_search_to_access: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
