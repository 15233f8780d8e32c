"""Environment-driven settings."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_DATA_DIR = "~/.maintenance_tracker"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Where state and catalog data live, and how loudly to log."""

    data_dir: Path
    catalog_dir: Optional[Path] = None
    log_level: str = "WARNING"
    strict_saves: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        catalog_dir = os.environ.get("MAINT_CATALOG_DIR")
        return cls(
            data_dir=Path(os.environ.get("MAINT_DATA_DIR", DEFAULT_DATA_DIR)).expanduser(),
            catalog_dir=Path(catalog_dir).expanduser() if catalog_dir else None,
            log_level=os.environ.get("MAINT_LOG_LEVEL", "WARNING").upper(),
            strict_saves=_env_flag("MAINT_STRICT_SAVES"),
        )
