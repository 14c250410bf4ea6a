import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1"
DEFAULT_PORT = 5000
DEFAULT_API_BASE_URL = "http://localhost:5000"


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip() for o in raw.split(",") if o.strip()) or ("*",)


@dataclass(frozen=True)
class Settings:
    """Process configuration, read once at startup and passed to whoever needs it.

    A missing Gemini API key does not stop the server from booting; the relay
    reports it per request instead.
    """

    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    port: int = DEFAULT_PORT
    api_base_url: str = DEFAULT_API_BASE_URL
    cors_origins: tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            gemini_api_key=env.get("GEMINI_API_KEY", "").strip(),
            gemini_model=env.get("GEMINI_MODEL") or DEFAULT_MODEL,
            gemini_base_url=(env.get("GEMINI_BASE_URL") or DEFAULT_GEMINI_BASE_URL).rstrip("/"),
            port=int(env.get("PORT") or DEFAULT_PORT),
            api_base_url=(env.get("API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
            cors_origins=_split_origins(env.get("CORS_ORIGINS", "")),
            log_level=env.get("LOG_LEVEL") or "INFO",
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=True)
    return Settings.from_env()
