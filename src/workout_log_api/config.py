"""Configuration settings for the workout log API."""
import os
from typing import Literal


EnvironmentType = Literal["development", "staging", "production"]
CoachProvider = Literal["anthropic", "openai"]

DEFAULT_STORAGE_PATH = os.path.join("~", ".workout-log", "storage.json")


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Local storage and calendar
    STORAGE_PATH: str = DEFAULT_STORAGE_PATH
    LOCAL_TIMEZONE: str | None = None

    # AI coach
    COACH_PROVIDER: CoachProvider = "anthropic"
    COACH_MODEL: str | None = None
    OPENAI_API_KEY: str | None = None
    ANTHROPIC_API_KEY: str | None = None

    # Remote mirror
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    SYNC_USER_ID: str = "default-user"

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        self.STORAGE_PATH = os.path.expanduser(os.getenv("STORAGE_PATH", DEFAULT_STORAGE_PATH))
        self.LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE") or None

        provider = os.getenv("COACH_PROVIDER", "anthropic").lower()
        self.COACH_PROVIDER = provider if provider in ("anthropic", "openai") else "anthropic"  # type: ignore
        self.COACH_MODEL = os.getenv("COACH_MODEL") or None

        # API Keys
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
        self.ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")

        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_KEY = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY")
        self.SYNC_USER_ID = os.getenv("SYNC_USER_ID", "default-user")


settings = Settings()
