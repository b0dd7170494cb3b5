"""
Runtime settings for the CLI and web server.

Values come from the environment; a ``.env`` file in the working directory
is loaded first so local overrides do not need to be exported by hand.

    SPELLER_DATA_DIR   directory for profiles and saves (default ~/.spire_speller)
    SPELLER_LOG_LEVEL  logging level name (default INFO)
    SPELLER_HOST       web server bind address (default 127.0.0.1)
    SPELLER_PORT       web server port (default 8080)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

DEFAULT_DATA_DIR = Path.home() / ".spire_speller"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8080

    @property
    def profiles_dir(self) -> Path:
        return self.data_dir / "profiles"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build settings from the environment (after loading ``.env``)."""
    load_dotenv(env_file)
    return Settings(
        data_dir=Path(os.environ.get("SPELLER_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser(),
        log_level=os.environ.get("SPELLER_LOG_LEVEL", "INFO").upper(),
        host=os.environ.get("SPELLER_HOST", "127.0.0.1"),
        port=int(os.environ.get("SPELLER_PORT", "8080")),
    )


def configure_logging(settings: Settings) -> None:
    """Configure root logging for an entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )
