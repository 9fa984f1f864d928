"""
Health Audit Configuration System
=================================

This file contains ALL configuration for the Health Audit interview system.
- User settings at the top (things users might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


# =============================================================================
# USER SETTINGS - Edit these to customize the interview
# =============================================================================

# Oracle credentials: an API key, or a Google Cloud project for Vertex AI
GEMINI_API_KEY = None
GOOGLE_CLOUD_PROJECT = None
GOOGLE_APPLICATION_CREDENTIALS = None  # Optional: path to credentials JSON

# Model
MODEL_NAME = "gemini-1.5-flash-latest"
VERTEX_LOCATION = "us-central1"

# Voice channel
SPEAKER_VOLUME = 1.0

# HTTP endpoint
API_HOST = "0.0.0.0"
API_PORT = 8000

# Logging
LOG_FILE = "./_logs/healthaudit.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# LLM
LLM_TIMEOUT = 30
PARSE_CLIENT_TIMEOUT = LLM_TIMEOUT + 5  # Outlasts the server-side oracle call
MAX_OUTPUT_TOKENS = 256
EXTRACTION_TEMPERATURE = 0.0
RESPONSE_MIME_TYPE = "application/json"
GENERATIVE_LANGUAGE_URL = "https://generativelanguage.googleapis.com/v1beta"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

# Interview states outside the catalog
WELCOME_STEP = "welcome"
SUMMARY_STEP = "summary"

# Summary rendering
NOT_PROVIDED = "Not provided"

# Env files read by get_config(), later files do not override earlier ones
ENV_FILES = (".env.local", ".env")


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass
class Config:
    """Main configuration object."""
    gemini_api_key: Optional[str] = GEMINI_API_KEY
    google_cloud_project: Optional[str] = GOOGLE_CLOUD_PROJECT
    google_application_credentials: Optional[str] = GOOGLE_APPLICATION_CREDENTIALS
    model_name: str = MODEL_NAME
    vertex_location: str = VERTEX_LOCATION
    llm_timeout: float = LLM_TIMEOUT
    speaker_volume: float = SPEAKER_VOLUME
    api_host: str = API_HOST
    api_port: int = API_PORT
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL

    @property
    def has_credentials(self) -> bool:
        """True when the oracle can be reached with either auth mode."""
        return bool(self.gemini_api_key or self.google_cloud_project)


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def get_config() -> Config:
    """Load configuration from the environment (and .env files, if present)."""
    for env_file in ENV_FILES:
        load_dotenv(env_file, override=False)

    speaker_volume = _env_number("HEALTHAUDIT_SPEAKER_VOLUME", SPEAKER_VOLUME, float)

    return Config(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or GEMINI_API_KEY,
        google_cloud_project=os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT,
        google_application_credentials=(
            os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or GOOGLE_APPLICATION_CREDENTIALS
        ),
        model_name=os.getenv("HEALTHAUDIT_MODEL") or MODEL_NAME,
        vertex_location=os.getenv("HEALTHAUDIT_VERTEX_LOCATION") or VERTEX_LOCATION,
        llm_timeout=_env_number("HEALTHAUDIT_LLM_TIMEOUT", LLM_TIMEOUT, float),
        speaker_volume=max(0.0, min(1.0, speaker_volume)),  # Clamp 0-1
        api_host=os.getenv("HEALTHAUDIT_API_HOST") or API_HOST,
        api_port=_env_number("HEALTHAUDIT_API_PORT", API_PORT, int),
        log_file=os.getenv("HEALTHAUDIT_LOG_FILE") or LOG_FILE,
        log_level=(os.getenv("HEALTHAUDIT_LOG_LEVEL") or LOG_LEVEL).upper(),
    )
