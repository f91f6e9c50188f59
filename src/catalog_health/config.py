from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

SUPPORTED_LANGS = ("fr", "en", "ar")
DEFAULT_SOURCE = "sqlite+aiosqlite:///./data/catalog.db"

def _positive_int(raw: str, name: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise RuntimeError(f"{name} must be a positive integer") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be a positive integer")
    return value

@dataclass(frozen=True)
class Settings:
    catalog_source: str
    ui_lang: str = "fr"  # fr/en/ar
    display_limit: int = 20

def env_catalog_source() -> str:
    catalog_source = os.getenv("CATALOG_SOURCE", DEFAULT_SOURCE).strip()
    if not catalog_source:
        raise RuntimeError("CATALOG_SOURCE is required (database URL or .xlsx path)")
    return catalog_source

def env_ui_lang() -> str:
    ui_lang = os.getenv("UI_LANG", "fr").strip().lower()
    if ui_lang not in SUPPORTED_LANGS:
        raise RuntimeError("UI_LANG must be fr, en, or ar")
    return ui_lang

def env_display_limit() -> int:
    return _positive_int(os.getenv("HEALTH_DISPLAY_LIMIT", "20"), "HEALTH_DISPLAY_LIMIT")

def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        catalog_source=env_catalog_source(),
        ui_lang=env_ui_lang(),
        display_limit=env_display_limit(),
    )
