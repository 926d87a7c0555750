"""
Service configuration with environment variable support.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Headers the storefront's browser client sends along with the review
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def _get_env_float(key: str, default: float) -> float:
    """Get float value from environment variable with fallback."""
    try:
        return float(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable with fallback."""
    try:
        return int(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_list(key: str, default: list[str], separator: str = ",") -> list[str]:
    """Get list value from environment variable with fallback."""
    value = os.getenv(key)
    if not value:
        return default
    return [item.strip() for item in value.split(separator) if item.strip()]


@dataclass(frozen=True)
class Settings:
    classifier_backend: str = "heuristic"   # heuristic | model | remote | none
    model_path: str = "models/review_classifier.joblib"
    inference_url: str = ""
    inference_timeout: float = 10.0
    max_review_chars: int = 5000
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    classifier_url: str = "http://127.0.0.1:8002"   # where callers reach this service

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            classifier_backend=os.getenv("CLASSIFIER_BACKEND", "heuristic").strip().lower(),
            model_path=os.getenv("MODEL_PATH", "models/review_classifier.joblib"),
            inference_url=os.getenv("INFERENCE_URL", "").strip(),
            inference_timeout=_get_env_float("INFERENCE_TIMEOUT", 10.0),
            max_review_chars=_get_env_int("MAX_REVIEW_CHARS", 5000),
            cors_allow_origins=_get_env_list("CORS_ALLOW_ORIGINS", ["*"]),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            classifier_url=os.getenv("CLASSIFIER_URL", "http://127.0.0.1:8002").strip(),
        )


def configure_logging(settings: Settings) -> None:
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
