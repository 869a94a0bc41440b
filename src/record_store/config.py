"""
Configuration settings for the record store.

Uses Pydantic Settings to load `RECORD_STORE_*` environment variables (or a
`.env` file) describing which table to use and how the store behaves.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from record_store.sql.dialect import Dialect


class StoreSettings(BaseSettings):
    table_name: str = Field("records", description="Name of the records table.")
    dialect: Dialect = Field(Dialect.SQLITE, description="SQL flavour of the backend.")
    automigrate_enabled: bool = False
    debug_enabled: bool = False

    model_config = SettingsConfigDict(
        env_prefix="RECORD_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("table_name")
    @classmethod
    def _table_name_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("table_name is required")
        return value


@lru_cache(maxsize=1)
def get_settings() -> StoreSettings:
    """
    Retrieve a cached instance of StoreSettings to avoid repeated env parsing.
    """
    return StoreSettings()


__all__ = ["StoreSettings", "get_settings"]
