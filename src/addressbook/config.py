import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_LOOKUP_PROVIDER = "api"
DEFAULT_LOOKUP_TIMEOUT = 15.0
DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_FIELDS: Dict[str, str] = {
    "postCode": "",
    "houseNumber": "",
    "firstName": "",
    "lastName": "",
    "selectedAddress": "",
}

ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    lookup_provider: str = DEFAULT_LOOKUP_PROVIDER
    api_url: str = DEFAULT_API_URL
    lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def load_env_file(path: Path = ENV_PATH) -> None:
    """Copy ``KEY=value`` lines from a .env file into ``os.environ``.

    Variables already present in the environment win.
    """
    if not path.exists():
        return

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - unexpected IO errors
        logger.warning("Failed to read %s: %s", path, exc)
        return

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue

        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")

        if key and key not in os.environ:
            os.environ[key] = value


def get_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    """Read settings from the environment."""
    env = os.environ if environ is None else environ

    provider = env.get("ADDRESSBOOK_LOOKUP_PROVIDER", DEFAULT_LOOKUP_PROVIDER).strip().lower()
    api_url = env.get("ADDRESSBOOK_API_URL", "").strip().rstrip("/") or DEFAULT_API_URL
    log_level = env.get("ADDRESSBOOK_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()

    raw_timeout = env.get("ADDRESSBOOK_LOOKUP_TIMEOUT", "").strip()
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(
                f"ADDRESSBOOK_LOOKUP_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from exc
        if timeout <= 0:
            raise ValueError("ADDRESSBOOK_LOOKUP_TIMEOUT must be positive")
    else:
        timeout = DEFAULT_LOOKUP_TIMEOUT

    return Settings(
        lookup_provider=provider or DEFAULT_LOOKUP_PROVIDER,
        api_url=api_url,
        lookup_timeout=timeout,
        log_level=log_level or DEFAULT_LOG_LEVEL,
    )
