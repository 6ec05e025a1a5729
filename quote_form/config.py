"""Central configuration for the quote form package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Mapping

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = BASE_DIR / "data"


@dataclass(slots=True, frozen=True)
class Settings:
    data_dir: Path
    store_path: Path
    archive_dir: Path
    webhook_url: str | None
    webhook_timeout: float
    default_vat_rate: Decimal
    log_level: str


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    data_dir = Path(env.get("QUOTE_FORM_DATA_DIR") or DEFAULT_DATA_DIR)
    store_path = Path(env.get("QUOTE_FORM_STORE") or data_dir / "forms.json")
    archive_dir = data_dir / "submissions"

    for path in (data_dir, archive_dir):
        path.mkdir(parents=True, exist_ok=True)

    return Settings(
        data_dir=data_dir,
        store_path=store_path,
        archive_dir=archive_dir,
        webhook_url=env.get("QUOTE_FORM_WEBHOOK_URL") or None,
        webhook_timeout=float(env.get("QUOTE_FORM_WEBHOOK_TIMEOUT") or 10),
        default_vat_rate=Decimal(env.get("QUOTE_FORM_DEFAULT_VAT") or "19"),
        log_level=(env.get("QUOTE_FORM_LOG_LEVEL") or "INFO").upper(),
    )


SETTINGS = load_settings()
