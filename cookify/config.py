from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, List
from dotenv import load_dotenv
load_dotenv()  # populates os.environ from .env


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Client
    api_url: str = Field("http://localhost:8000", description="Base URL of the remote store")
    token_file: str = Field("data/token.json", description="Where the bearer token survives restarts")
    http_timeout: Optional[float] = None

    # Storage (reference remote store)
    data_dir: str = "data"
    users_file: str = "data/users.json"
    saved_file: str = "data/saved.json"
    pantry_file: str = "data/pantry.json"
    metrics_file: str = "data/latency_log.jsonl"

    # Auth
    secret_key: str = "dev-only-secret-change-me-in-production"
    token_expire_minutes: int = 60 * 24 * 7

    # Recipe catalog
    mealdb_base_url: str = "https://www.themealdb.com/api/json/v1/1"
    search_limit: int = Field(12, ge=1)

    # LLM
    openai_api_key: Optional[str] = None
    openai_model_recipes: str = "gpt-4o-mini"
    use_openai: bool = True

    log_level: str = "INFO"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
