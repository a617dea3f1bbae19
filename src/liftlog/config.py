"""Runtime configuration for liftlog."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


def _opt_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    return value if value not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    """Settings read from the environment (or a .env file in the project root)."""

    data_dir: Path
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=Path(_opt_env("LIFTLOG_DATA_DIR") or PROJECT_ROOT / "data"),
            log_level=(_opt_env("LIFTLOG_LOG_LEVEL", "WARNING") or "WARNING").upper(),
        )


def get_settings() -> Settings:
    """Get the current settings.

    Read on every call so that environment changes (tests, subprocesses)
    are picked up without a restart.
    """
    return Settings.from_env()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging for the CLI and web server."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
