"""
Configuration
=============

Settings are read from the environment (a local .env file is loaded first).
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "https://api.theskillguru.org"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout: float = 60.0
    user_id: Optional[str] = None
    log_level: str = "INFO"


def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        api_base_url=os.getenv("QUIZ_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        api_timeout=float(os.getenv("QUIZ_API_TIMEOUT", "60")),
        user_id=os.getenv("QUIZ_USER_ID") or None,
        log_level=os.getenv("QUIZ_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
