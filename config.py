"""Application settings loaded from the environment"""
import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv() # Searches for .env in current dir and parents


def _get_env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _get_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return int(v)


def _get_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or default


class Settings(BaseModel):
    mongo_uri: str = "mongodb://localhost:27017"
    db_name: str = "income_expense_db"
    collection_name: str = "transactions"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    cors_allow_origins: List[str] = ["*"]
    rate_limit: str = "" # slowapi limit string, e.g. "15/minute"; empty disables limiting
    max_body_size: int = 1 * 1024 * 1024 # 1MB limit
    reload: bool = False

    @property
    def rate_limit_enabled(self) -> bool:
        return bool(self.rate_limit.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # MONGODB_URI is accepted as an older name for the connection string
    mongo_uri = os.getenv("MONGO_URI") or os.getenv("MONGODB_URI") or "mongodb://localhost:27017"
    return Settings(
        mongo_uri=mongo_uri,
        db_name=_get_env("DB_NAME", "income_expense_db"),
        collection_name=_get_env("COLLECTION_NAME", "transactions"),
        host=_get_env("HOST", "0.0.0.0"),
        port=_get_int("PORT", 5000),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
        cors_allow_origins=_get_list("CORS_ALLOW_ORIGINS", ["*"]),
        rate_limit=_get_env("RATE_LIMIT", ""),
        max_body_size=_get_int("MAX_BODY_SIZE", 1 * 1024 * 1024),
        reload=_get_bool("RELOAD", False),
    )
