import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    base_url: Optional[str]
    log_level: str
    log_path: str


def load_settings() -> Settings:
    host = os.getenv("HOST", "0.0.0.0")
    raw_port = os.getenv("PORT", "8080")
    base_url = os.getenv("BASE_URL") or None
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_path = os.getenv("LOG_PATH", "logs/santalink.log")

    try:
        port = int(raw_port)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {raw_port!r}.") from None

    if base_url:
        base_url = base_url.rstrip("/")

    return Settings(
        host=host,
        port=port,
        base_url=base_url,
        log_level=log_level,
        log_path=log_path,
    )
