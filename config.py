import os
from typing import List, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT = 30.0
DEFAULT_CORS_ORIGINS = ["http://localhost:4200", "http://127.0.0.1:4200"]


class ConfigError(RuntimeError):
    pass


class Settings(BaseModel):
    """Process-wide settings, built once at startup and read-only afterwards."""

    model_config = ConfigDict(frozen=True)

    gemini_api_url: str
    gemini_api_key: str = Field(repr=False)
    request_timeout: float = DEFAULT_TIMEOUT


def _check_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigError(f"GEMINI_API_URL is not a valid URL: {e}")
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigError(f"GEMINI_API_URL must be an absolute http(s) URL, got {url!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (call load_dotenv() first)."""
    env = os.environ if environ is None else environ

    url = (env.get("GEMINI_API_URL") or "").strip()
    key = (env.get("GEMINI_API_KEY") or "").strip()
    if not url:
        raise ConfigError("GEMINI_API_URL is not set")
    if not key:
        raise ConfigError("GEMINI_API_KEY is not set")
    _check_url(url)

    raw_timeout = (env.get("GEMINI_TIMEOUT") or "").strip()
    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"GEMINI_TIMEOUT must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ConfigError("GEMINI_TIMEOUT must be positive")

    return Settings(gemini_api_url=url, gemini_api_key=key, request_timeout=timeout)


def load_cors_origins(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    # Needed when the app object is created, before the lifespan runs.
    env = os.environ if environ is None else environ
    raw_origins = env.get("CORS_ORIGINS")
    if raw_origins:
        return [o.strip() for o in raw_origins.split(",") if o.strip()]
    return list(DEFAULT_CORS_ORIGINS)
