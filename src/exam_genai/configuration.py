import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file, if present (real env wins)
_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(_ROOT / ".env", override=False)

_DEFAULT_MODELS = {
    "google": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _first(*keys: str) -> Optional[str]:
    """
    Return the value of the first environment variable found in keys.
    """
    for key in keys:
        val = os.getenv(key)
        if val:
            return val
    return None


def _truthy(key: str) -> bool:
    return os.getenv(key, "false").lower() in ("1", "true", "yes")


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _default_provider() -> str:
    return (os.getenv("LLM_PROVIDER") or "google").strip().lower()


class Settings(BaseModel):
    """Runtime settings, read from the environment when the value is built."""

    llm_provider: str = Field(default_factory=_default_provider)
    llm_model: Optional[str] = Field(default_factory=lambda: os.getenv("LLM_MODEL"))
    google_api_key: Optional[str] = Field(
        default_factory=lambda: _first("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY")
    )
    openai_api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    temperature: float = Field(default_factory=lambda: _env_float("LLM_TEMPERATURE", 0.4))
    # 0 disables Gemini "thinking" for faster JSON generation
    thinking_budget: int = Field(default_factory=lambda: _env_int("LLM_THINKING_BUDGET", 0))
    request_timeout: float = Field(default_factory=lambda: _env_float("LLM_TIMEOUT", 120.0))
    debug: bool = Field(default_factory=lambda: _truthy("DEBUG"))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    @field_validator("llm_provider")
    @classmethod
    def _normalize_provider(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def model_name(self) -> str:
        """Configured model, or the provider's default."""
        if self.llm_model:
            return self.llm_model
        return _DEFAULT_MODELS.get(self.llm_provider, _DEFAULT_MODELS["google"])

    def api_key(self) -> Optional[str]:
        """Credential for the active provider (None when missing)."""
        if self.llm_provider == "google":
            return self.google_api_key
        if self.llm_provider == "openai":
            return self.openai_api_key
        raise ConfigurationError(f"Unsupported LLM_PROVIDER: {self.llm_provider!r}")


def get_settings() -> Settings:
    """Build a fresh Settings value so the credential is resolved at call time."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
