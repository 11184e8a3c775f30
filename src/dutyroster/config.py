"""Runtime settings read from the environment."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dutyroster.scheduling.roster_generator import FAIRNESS_WINDOW_DAYS

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """Application settings.

    Attributes:
        db_path: SQLite database file (DUTYROSTER_DB_PATH).
        log_level: Logging level name (DUTYROSTER_LOG_LEVEL).
        fairness_window_days: History window in days
            (DUTYROSTER_FAIRNESS_WINDOW_DAYS).
        school_id: Default school scope for CLI commands (DUTYROSTER_SCHOOL_ID).
    """

    db_path: str = str(Path.cwd() / "dutyroster.db")
    log_level: str = "INFO"
    fairness_window_days: int = FAIRNESS_WINDOW_DAYS
    school_id: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ValueError: If DUTYROSTER_FAIRNESS_WINDOW_DAYS is not a
                non-negative integer.
        """
        env = os.environ if environ is None else environ

        raw_window = env.get("DUTYROSTER_FAIRNESS_WINDOW_DAYS", str(FAIRNESS_WINDOW_DAYS))
        try:
            window = int(raw_window)
        except ValueError:
            raise ValueError(
                f"DUTYROSTER_FAIRNESS_WINDOW_DAYS must be an integer, got {raw_window!r}"
            )
        if window < 0:
            raise ValueError("DUTYROSTER_FAIRNESS_WINDOW_DAYS must be >= 0")

        return cls(
            db_path=env.get("DUTYROSTER_DB_PATH", str(Path.cwd() / "dutyroster.db")),
            log_level=env.get("DUTYROSTER_LOG_LEVEL", "INFO").upper(),
            fairness_window_days=window,
            school_id=env.get("DUTYROSTER_SCHOOL_ID", ""),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
