# tests/test_config.py

import pytest
from pydantic import ValidationError as PydanticValidationError

from record_store.config import StoreSettings, get_settings
from record_store.sql.dialect import Dialect


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # keep a developer's .env out of the way
    monkeypatch.chdir(tmp_path)
    for name in (
        "RECORD_STORE_TABLE_NAME",
        "RECORD_STORE_DIALECT",
        "RECORD_STORE_AUTOMIGRATE_ENABLED",
        "RECORD_STORE_DEBUG_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = StoreSettings()
    assert settings.table_name == "records"
    assert settings.dialect is Dialect.SQLITE
    assert settings.automigrate_enabled is False
    assert settings.debug_enabled is False


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("RECORD_STORE_TABLE_NAME", "custom_records")
    monkeypatch.setenv("RECORD_STORE_DIALECT", "postgres")
    monkeypatch.setenv("RECORD_STORE_AUTOMIGRATE_ENABLED", "true")

    settings = StoreSettings()

    assert settings.table_name == "custom_records"
    assert settings.dialect is Dialect.POSTGRES
    assert settings.automigrate_enabled is True


def test_reads_env_file(tmp_path):
    (tmp_path / ".env").write_text("RECORD_STORE_DEBUG_ENABLED=1\n")
    assert StoreSettings().debug_enabled is True


@pytest.mark.parametrize("table_name", ["", "   "])
def test_empty_table_name_is_rejected(table_name):
    with pytest.raises(PydanticValidationError):
        StoreSettings(table_name=table_name)


def test_unknown_dialect_is_rejected(monkeypatch):
    monkeypatch.setenv("RECORD_STORE_DIALECT", "oracle")
    with pytest.raises(PydanticValidationError):
        StoreSettings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
