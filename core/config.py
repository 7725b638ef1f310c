# =============================================================================
# core/config.py  —  Runtime configuration
# =============================================================================
#
# Settings come from environment variables (main.py calls load_dotenv()
# first, so a local .env file works too):
#
#   FMP_API_KEY          required — your Financial Modeling Prep key
#   FMP_BASE_URL         optional — defaults to the public v3 API
#   FMP_TIMEOUT_SECONDS  optional — per-request timeout (default 15)
#   LOG_LEVEL            optional — DEBUG / INFO / WARNING (default INFO)
#
# The key is handed to FMPClient explicitly; nothing reads it at module scope.
# =============================================================================

from dataclasses import dataclass
import os
from typing import Mapping, Optional

from core.fmp_client import DEFAULT_BASE_URL


class ConfigError(Exception):
    """Configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    fmp_api_key: str
    fmp_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 15.0
    log_level: str = "INFO"


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read Settings from `env` (defaults to os.environ).

    Raises:
        ConfigError: if FMP_API_KEY is unset or the timeout is not a
            positive number.
    """
    env = os.environ if env is None else env

    api_key = env.get("FMP_API_KEY", "").strip()
    if not api_key:
        raise ConfigError("FMP_API_KEY environment variable is not set.")

    raw_timeout = env.get("FMP_TIMEOUT_SECONDS", "15")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigError(f"FMP_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}.")
    if timeout <= 0:
        raise ConfigError("FMP_TIMEOUT_SECONDS must be positive.")

    return Settings(
        fmp_api_key=api_key,
        fmp_base_url=env.get("FMP_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL,
        request_timeout=timeout,
        log_level=env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
