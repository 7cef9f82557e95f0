"""config.py — Settings read from the environment and .env."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_FILE = Path(".env")
DEFAULT_STORE_PATH = Path("data") / "sifron_store.json"


@dataclass
class Settings:
    store_path: Path
    default_version: str = "1.0.0"
    default_author: str = ""
    default_content_path: Path | None = None  # JSON book shown until one is stored


def load_settings() -> Settings:
    """Load .env (if present) and build Settings from SIFRON_* variables."""
    load_dotenv(ENV_FILE)
    store = os.getenv("SIFRON_STORE", "").strip()
    default_content = os.getenv("SIFRON_DEFAULT_CONTENT", "").strip()
    return Settings(
        store_path=Path(store).expanduser() if store else DEFAULT_STORE_PATH,
        default_version=os.getenv("SIFRON_DEFAULT_VERSION", "").strip() or "1.0.0",
        default_author=os.getenv("SIFRON_DEFAULT_AUTHOR", "").strip(),
        default_content_path=Path(default_content).expanduser() if default_content else None,
    )
