from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Taxonomy Admin API"
    app_env: str = "dev"
    log_level: str = "INFO"
    store_backend: str = "sql"
    database_url: str = "sqlite+aiosqlite:///./taxonomy.db"
    store_url: str | None = None
    store_api_key: str | None = None
    store_schema: str | None = None
    categories_table: str = "categories"
    subcategories_table: str = "subcategories"
    store_timeout_seconds: float | None = None
    cors_allow_origins: str = "http://localhost:5173"

    @property
    def cors_origins(self) -> list[str]:
        return [x.strip() for x in self.cors_allow_origins.split(",") if x.strip()]

    @property
    def table_names(self) -> dict[str, str]:
        return {
            "categories": self.categories_table.strip() or "categories",
            "subcategories": self.subcategories_table.strip() or "subcategories",
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
