"""Runtime settings for the assigner, read from environment variables."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import os
import re
import typing as t

from catalog_client.youtube import YOUTUBE_API_URL
from schedule_engine.errors import ConfigurationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class Settings:
    """Settings for one run.

    Attributes:
        youtube_api_key: YouTube Data API key
        youtube_channel_id: Channel whose uploads are assigned
        semester_start: First day of week 1, ``YYYY-MM-DD``
        semester_end: Last day of the semester, ``YYYY-MM-DD``
        recipient_emails: Report recipients
        record_path: Path to the record page
        notify_webhook_url: Webhook receiving reports; console output when empty
        youtube_api_url: Base URL of the YouTube Data API
        lookback_days: Recency window for catalog videos
    """
    youtube_api_key: str = ""
    youtube_channel_id: str = ""
    semester_start: str = "2025-08-24"
    semester_end: str = "2025-12-15"
    recipient_emails: list[str] = field(default_factory=list)
    record_path: str = "index.html"
    notify_webhook_url: str = ""
    youtube_api_url: str = YOUTUBE_API_URL
    lookback_days: int = 2

    @classmethod
    def from_env(cls, environ: t.Optional[t.Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = cls()

        lookback = env.get("LOOKBACK_DAYS", "").strip()
        if lookback and not lookback.isdigit():
            raise ConfigurationError(f"LOOKBACK_DAYS must be a whole number, got {lookback!r}")

        return cls(
            youtube_api_key=env.get("YOUTUBE_API_KEY", "").strip(),
            youtube_channel_id=env.get("YOUTUBE_CHANNEL_ID", "").strip(),
            semester_start=env.get("SEMESTER_START", defaults.semester_start).strip(),
            semester_end=env.get("SEMESTER_END", defaults.semester_end).strip(),
            recipient_emails=[
                email.strip()
                for email in env.get("RECIPIENT_EMAILS", "").split(",")
                if email.strip()
            ],
            record_path=env.get("RECORD_PATH", defaults.record_path).strip() or defaults.record_path,
            notify_webhook_url=env.get("NOTIFY_WEBHOOK_URL", "").strip(),
            youtube_api_url=env.get("YOUTUBE_API_URL", "").strip() or defaults.youtube_api_url,
            lookback_days=int(lookback) if lookback else defaults.lookback_days,
        )

    def validate(self) -> None:
        """Check that required settings are present and dates are consistent.

        Raises:
            ConfigurationError: On the first problem found
        """
        required = [
            ("YouTube API Key", self.youtube_api_key),
            ("YouTube Channel ID", self.youtube_channel_id),
            ("Semester Start Date", self.semester_start),
            ("Semester End Date", self.semester_end),
        ]
        missing = [name for name, value in required if not value or not value.strip()]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        start, end = self.semester_dates()
        if start >= end:
            raise ConfigurationError("Semester start date must be before end date")
        if self.lookback_days < 1:
            raise ConfigurationError("LOOKBACK_DAYS must be at least 1")

    def semester_dates(self) -> tuple[date, date]:
        try:
            if not (_ISO_DATE.match(self.semester_start) and _ISO_DATE.match(self.semester_end)):
                raise ValueError("not YYYY-MM-DD")
            return date.fromisoformat(self.semester_start), date.fromisoformat(self.semester_end)
        except ValueError as e:
            raise ConfigurationError(
                "Invalid semester dates - must be in YYYY-MM-DD format"
            ) from e
