# incubator/settings.py

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger("incubator_backend")

DEFAULT_CORS_ORIGINS = (
    "http://localhost:4200",
    "https://palegoldenrod-hippopotamus-154780.hostingersite.com",
)


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return DEFAULT_CORS_ORIGINS
    return tuple(v.strip() for v in value.split(",") if v.strip())


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, read once from the environment (.env supported).
    """

    model_name: str = "gemini-2.0-flash"
    project_id: str = ""
    region: str = "us-central1"
    llm_timeout: float = 60.0
    llm_max_retries: int = 3
    max_output_tokens: int = 1000
    temperature: float = 0.7

    session_ttl_seconds: int = 2 * 3600
    sweep_interval_seconds: int = 30 * 60

    port: int = 5000
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            model_name=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            project_id=os.getenv("GOOGLE_CLOUD_PROJECT", ""),
            region=os.getenv("GOOGLE_CLOUD_REGION", "us-central1"),
            llm_timeout=float(os.getenv("LLM_TIMEOUT", "60")),
            llm_max_retries=int(os.getenv("LLM_MAX_RETRIES", "3")),
            max_output_tokens=int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "1000")),
            temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
            session_ttl_seconds=int(os.getenv("SESSION_TTL_SECONDS", str(2 * 3600))),
            sweep_interval_seconds=int(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", str(30 * 60))),
            port=int(os.getenv("PORT", "5000")),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS")),
        )
