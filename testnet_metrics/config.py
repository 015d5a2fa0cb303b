import logging
import os

log = logging.getLogger(__name__)

VERSION = "v0.1.0"
APP_TITLE = "Codex Metrics"
HOST_IP = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Connection to the hosted data store. Both are required; see require_connection_settings().
SUPABASE_URL = os.environ.get("SUPABASE_URL", "").strip()
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "").strip()
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "10"))

DEFAULT_ALLOWED_ORIGINS = "http://localhost:8000,http://127.0.0.1:8000"
ALLOWED_ORIGINS_STR = os.environ.get("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)
ALLOWED_ORIGINS = [origin.strip() for origin in ALLOWED_ORIGINS_STR.split(',') if origin.strip()]


class ConfigError(RuntimeError):
    """Raised when a required setting is missing from the environment."""


def require_connection_settings(url: str = None, key: str = None) -> tuple[str, str]:
    """Return the data store URL and access key, failing if either is unset."""
    url = SUPABASE_URL if url is None else url
    key = SUPABASE_ANON_KEY if key is None else key
    missing = [name for name, value in (("SUPABASE_URL", url), ("SUPABASE_ANON_KEY", key)) if not value]
    if missing:
        raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")
    log.info(f"Config Loaded: SUPABASE_URL={url}, ALLOWED_ORIGINS={ALLOWED_ORIGINS}")
    return url.rstrip("/"), key
