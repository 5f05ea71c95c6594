from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Application settings using pydantic-settings for structured configuration

class Settings(BaseSettings):
    # --- App ---
    app_name: str = "GloVe Vectorizer"
    app_env: str = "development"          # e.g., development / staging / production
    debug: bool = False

    # --- Logging ---
    log_level: Optional[str] = None      # overrides the debug-derived level
    log_json: bool = False               # one JSON record per line (for log shippers)

    # --- HTTP ---
    host: str = "0.0.0.0"
    port: int = Field(default=9876, gt=0, validation_alias=AliasChoices("vectorizer_port", "port"))

    # --- Embedding store ---
    # "sqlite": persisted store built with `glove-vectorizer build-store`
    # "memory": load a GloVe text file at startup (small vocabularies only)
    store_backend: Literal["sqlite", "memory"] = "sqlite"
    # a sqlite file written by `glove-vectorizer build-store`, not a LevelDB directory
    store_path: Path = Path("./embeddings.sqlite3")
    glove_path: Optional[Path] = None

    # GloVe 840B is 300-d
    embedding_dim: int = Field(default=300, gt=0)

    # --- Pipeline ---
    stopwords_path: Optional[Path] = None
    # every retained vector gets this occurrence count before weighting
    synthetic_occurrence: int = 102

    # pydantic v2 / pydantic-settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("synthetic_occurrence")
    @classmethod
    def _occurrence_above_one(cls, value: int) -> int:
        # log(1) == 0 would be the divisor of the weight model
        if value <= 1:
            raise ValueError("synthetic_occurrence must be greater than 1")
        return value


@lru_cache
def get_settings() -> Settings:
    """Cache settings so we don’t re-parse .env on every request."""
    return Settings()
