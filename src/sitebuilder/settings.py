from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.environ.get(name)
    return Path(raw) if raw else default


@dataclass(frozen=True)
class Settings:
    """Static settings for the site builder backend.

    Everything is local: one SQLite file plus a rotating log under data_dir.
    """

    root_dir: Path = Path(__file__).resolve().parents[2]
    data_dir: Path = _env_path("SITEBUILDER_DATA_DIR", root_dir / ".sitebuilder-data")
    db_path: Path = _env_path("SITEBUILDER_DB_PATH", data_dir / "sitebuilder.db")
    log_path: Path = data_dir / "sitebuilder.log"
    log_level: str = os.environ.get("SITEBUILDER_LOG_LEVEL", "INFO")
    log_max_bytes: int = int(os.environ.get("SITEBUILDER_LOG_MAX_BYTES", str(1_000_000)))
    log_backup_count: int = int(os.environ.get("SITEBUILDER_LOG_BACKUP_COUNT", "3"))

    # Install the reference block templates when `sitebuilder init` runs.
    seed_templates: bool = _env_bool("SITEBUILDER_SEED_TEMPLATES", True)


settings = Settings()
