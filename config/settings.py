from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. Keyword arguments
    override the environment, which is how tests build isolated settings.
    """

    def __init__(self, **overrides) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.gemini_api_key: Optional[str] = os.getenv("GEMINI_API_KEY")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature: float = _env_float("MODEL_TEMPERATURE", 0.3)
        self.top_p: float = _env_float("MODEL_TOP_P", 0.9)
        self.model_timeout: float = _env_float("MODEL_TIMEOUT", 45.0)
        self.model_max_retries: int = int(_env_float("MODEL_MAX_RETRIES", 0))
        self.gemini_base_url: Optional[str] = os.getenv("GEMINI_BASE_URL") or None

        self.firebase_credentials: Optional[str] = os.getenv("FIREBASE_CREDENTIALS")
        self.glossary_collection: str = os.getenv("GLOSSARY_COLLECTION", "dialect_glossary")
        self.glossary_document: str = os.getenv("GLOSSARY_DOCUMENT", "phrases")
        self.learning_collection: str = os.getenv("LEARNING_COLLECTION", "dialect_learning")
        self.store_timeout: float = _env_float("STORE_TIMEOUT", 10.0)

        for name, value in overrides.items():
            if not hasattr(self, name):
                raise TypeError(f"Unknown setting: {name}")
            setattr(self, name, value)


def get_settings() -> Settings:
    # Not cached: the credential must be read at request time.
    return Settings()
