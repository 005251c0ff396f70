"""Application configuration using Pydantic Settings."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # Server
    host: str = "127.0.0.1"
    """Interface the API server binds to."""

    port: int = Field(default=8000, ge=1, le=65535)
    """Port the API server listens on."""

    # NoDecode prevents pydantic-settings from forcing JSON parsing at the
    # env-source layer, so we can accept either JSON arrays or CSV strings.
    allowed_origins: Annotated[list[str], NoDecode] = DEFAULT_ALLOWED_ORIGINS
    """Origins allowed to call the API from a browser (wizard frontend)."""

    # Estimator limits
    max_forms_per_request: int = Field(default=20, ge=1)
    """Maximum number of Form 106 entries in a single estimate."""

    max_credit_points_per_form: int = Field(default=10, ge=0)
    """Largest credit point count accepted on a single Form 106."""

    max_amount_per_form: int = Field(default=100_000_000, ge=1)
    """Largest income or withholding amount accepted on a single Form 106."""

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: object) -> list[str]:
        """Parse allowed origins from JSON array, CSV, or list."""
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return DEFAULT_ALLOWED_ORIGINS.copy()

            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                decoded = None

            if isinstance(decoded, list):
                return _normalize_origins(decoded)
            if isinstance(decoded, str):
                text = decoded
            elif decoded is not None:
                raise ValueError(
                    "ALLOWED_ORIGINS must be a JSON array or comma-separated string."
                )

            # Fallback: comma-separated values
            parsed = [item.strip() for item in text.split(",")]
            return _normalize_origins(parsed)

        if isinstance(value, (list, tuple, set)):
            return _normalize_origins(value)

        raise ValueError("ALLOWED_ORIGINS must be a string, list, tuple, or set.")


def _normalize_origins(values: Iterable[object]) -> list[str]:
    """Normalize and dedupe origins while preserving declaration order."""
    normalized: list[str] = []
    seen: set[str] = set()
    for raw_item in values:
        item = str(raw_item).strip().strip("'").strip('"').rstrip("/")
        if not item:
            continue
        item = item.lower()
        if item in seen:
            continue
        normalized.append(item)
        seen.add(item)

    if not normalized:
        return DEFAULT_ALLOWED_ORIGINS.copy()
    return normalized


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    root_error = str(exc)
    suggestions = [
        "Allowed values for ALLOWED_ORIGINS are:",
        '  1) ["http://localhost:5173","https://example.org"]',
        "  2) http://localhost:5173,https://example.org",
        "MAX_FORMS_PER_REQUEST must be a positive integer.",
    ]

    raise RuntimeError(
        "Failed to initialize application settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        + f"Error: {root_error}\n"
        + "\n".join(suggestions)
    ) from exc
