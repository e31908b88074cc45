from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

DEFAULT_CHEMICAL_KEYWORDS = [
    "tint",
    "colour",
    "color",
    "bleach",
    "toner",
    "gloss",
    "highlights",
    "balayage",
    "foils",
    "perm",
    "relaxer",
    "keratin",
    "chemical",
    "straightening",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # CORS
    cors_origins: str = "http://localhost:5173"

    # Scheduling business rules
    # Processing time left after colour/perm/etc. before the stylist's next service
    chemical_gap_minutes: int = 30
    chemical_keywords: list[str] = DEFAULT_CHEMICAL_KEYWORDS
    # schedule_blocks has carried its stylist column under both names across schema revisions
    schedule_block_staff_column: str = "staff_id"
    schedule_block_staff_column_fallback: str = "resource_id"

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_postgres(self) -> bool:
        return self.database_url.startswith(("postgresql", "postgres"))


settings = Settings()
