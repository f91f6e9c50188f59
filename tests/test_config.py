import pytest

from catalog_health.config import env_catalog_source, env_display_limit, env_ui_lang, load_settings


def test_defaults(monkeypatch):
    for name in ("CATALOG_SOURCE", "UI_LANG", "HEALTH_DISPLAY_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("catalog_health.config.load_dotenv", lambda *a, **k: False)
    settings = load_settings()
    assert settings.catalog_source == "sqlite+aiosqlite:///./data/catalog.db"
    assert settings.ui_lang == "fr"
    assert settings.display_limit == 20


def test_overrides(monkeypatch):
    monkeypatch.setattr("catalog_health.config.load_dotenv", lambda *a, **k: False)
    monkeypatch.setenv("CATALOG_SOURCE", "exports/catalog.xlsx")
    monkeypatch.setenv("UI_LANG", "AR")
    monkeypatch.setenv("HEALTH_DISPLAY_LIMIT", "5")
    settings = load_settings()
    assert settings.catalog_source == "exports/catalog.xlsx"
    assert settings.ui_lang == "ar"
    assert settings.display_limit == 5


@pytest.mark.parametrize("name,value", [("UI_LANG", "de"), ("HEALTH_DISPLAY_LIMIT", "0"), ("HEALTH_DISPLAY_LIMIT", "x")])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setattr("catalog_health.config.load_dotenv", lambda *a, **k: False)
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        load_settings()


def test_each_variable_is_read_on_its_own(monkeypatch):
    monkeypatch.setenv("UI_LANG", "de")
    monkeypatch.setenv("HEALTH_DISPLAY_LIMIT", "7")
    monkeypatch.delenv("CATALOG_SOURCE", raising=False)
    assert env_catalog_source() == "sqlite+aiosqlite:///./data/catalog.db"
    assert env_display_limit() == 7
    with pytest.raises(RuntimeError):
        env_ui_lang()
