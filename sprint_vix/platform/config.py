"""
Sprint VIX configuration.

Settings are read from the environment; a local .env file is loaded
once, the first time this module is imported.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from sprint_vix.errors import ConfigurationError

# Load .env once
load_dotenv()


@dataclass(frozen=True)
class JiraSettings:
    """Connection and field-mapping settings for the Jira data provider."""
    base_url: str
    email: str
    api_token: str
    story_points_field: str = "customfield_10016"
    sprint_field: str = "customfield_10020"
    default_story_points: float = 3.0
    max_results: int = 50
    default_days_remaining: int = 5
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class LoggingSettings:
    log_level: str = "INFO"
    app_env: str = "development"


# -------------------------------------------------------------------
# Environment helpers
# -------------------------------------------------------------------

def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


# -------------------------------------------------------------------
# Loaders
# -------------------------------------------------------------------

def load_jira_settings() -> JiraSettings:
    base_url = (os.getenv("JIRA_BASE_URL") or "").strip()
    email = (os.getenv("JIRA_EMAIL") or "").strip()
    api_token = (os.getenv("JIRA_API_TOKEN") or "").strip()

    missing = [
        name
        for name, value in (
            ("JIRA_BASE_URL", base_url),
            ("JIRA_EMAIL", email),
            ("JIRA_API_TOKEN", api_token),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(
            "Missing Jira settings: " + ", ".join(missing) + ". "
            "Set them in your environment or .env file."
        )

    return JiraSettings(
        base_url=base_url.rstrip("/"),
        email=email,
        api_token=api_token,
        story_points_field=os.getenv("JIRA_STORY_POINTS_FIELD") or "customfield_10016",
        sprint_field=os.getenv("JIRA_SPRINT_FIELD") or "customfield_10020",
        default_story_points=env_float("JIRA_DEFAULT_STORY_POINTS", 3.0),
        max_results=env_int("JIRA_MAX_RESULTS", 50),
        default_days_remaining=env_int("SPRINT_DEFAULT_DAYS_REMAINING", 5),
    )


def load_logging_settings() -> LoggingSettings:
    return LoggingSettings(
        log_level=os.getenv("LOG_LEVEL") or "INFO",
        app_env=os.getenv("APP_ENV") or "development",
    )


def get_genai_api_key() -> Optional[str]:
    return os.getenv("GOOGLE_API_KEY") or os.getenv("GENAI_API_KEY")
