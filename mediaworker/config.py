"""
Process configuration, read once at startup.

Values come from the environment (and a local .env file when present) and
are handed to the app factory; request handlers never read os.environ.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

FAL_QUEUE_URL = "https://queue.fal.run"
DEFAULT_STAGE_TIMEOUT = 600.0  # seconds; 0 disables
DEFAULT_POLL_INTERVAL = 2.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    fal_api_key: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = ""
    fal_queue_url: str = FAL_QUEUE_URL
    fal_poll_interval: float = DEFAULT_POLL_INTERVAL
    stage_timeout: float = DEFAULT_STAGE_TIMEOUT
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 8000

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Settings":
        load_dotenv(dotenv_path)
        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        return cls(
            fal_api_key=os.getenv("FAL_API_KEY") or os.getenv("FAL_KEY", ""),
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", ""),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", ""),
            aws_region=os.getenv("AWS_REGION", ""),
            fal_queue_url=os.getenv("FAL_QUEUE_URL", FAL_QUEUE_URL),
            fal_poll_interval=_float_env("FAL_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            stage_timeout=_float_env("STAGE_TIMEOUT_SECONDS", DEFAULT_STAGE_TIMEOUT),
            cors_origins=origins or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            port=int(_float_env("PORT", 8000)),
        )

    def missing_generation_credentials(self) -> List[str]:
        return [] if self.fal_api_key else ["FAL_API_KEY"]

    def missing_ocr_credentials(self) -> List[str]:
        required = {
            "AWS_ACCESS_KEY_ID": self.aws_access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.aws_secret_access_key,
            "AWS_REGION": self.aws_region,
        }
        return [name for name, value in required.items() if not value]

    def log_summary(self):
        """Warn about missing credentials once, at startup."""
        missing = self.missing_generation_credentials() + self.missing_ocr_credentials()
        if missing:
            logger.warning(f"Missing configuration: {', '.join(missing)} - affected endpoints will return 500")
        logger.info(
            f"Stage timeout: {self.stage_timeout:g}s, fal poll interval: {self.fal_poll_interval:g}s"
        )
