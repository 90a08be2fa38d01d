from __future__ import annotations
import os
from typing import Literal
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "practice-tracker-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Practice Tracker")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Upstream records API (tasks, submissions, comments, users)
    upstream_api_url: str = os.getenv("UPSTREAM_API_URL", "http://api:5000/api")
    upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))

    # "fetch": deadlines are judged against the snapshot fetch time; "wall": against now()
    lateness_clock: Literal["fetch", "wall"] = os.getenv("LATENESS_CLOCK", "fetch")
    leaderboard_limit: int = int(os.getenv("LEADERBOARD_LIMIT", "50"))

settings = Settings()
