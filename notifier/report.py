"""
Human-readable reports of assignment runs.

Reports are built as plain text and delivered either to a webhook (JSON POST)
or, when no webhook is configured, printed to the console.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
import logging
import typing as t

import httpx
from rich.console import Console
from rich.panel import Panel

from schedule_engine.errors import NotificationError
from schedule_engine.models import Assignment

logger = logging.getLogger(__name__)

ADMIN_URL = "https://caseyfarina.github.io/lecture-redirects/admin.html"
ACTIONS_URL = "https://github.com/caseyfarina/lecture-redirects/actions"

# Monday, Wednesday, Friday (ISO weekday numbers)
DEFAULT_NOTIFY_WEEKDAYS: tuple[int, ...] = (1, 3, 5)

# Timeout settings for webhook delivery (in seconds)
WEBHOOK_TIMEOUT = 15.0


@dataclass
class Report:
    """A message ready for delivery."""
    subject: str
    body: str
    recipients: list[str] = field(default_factory=list)


def should_notify(today: date, notify_weekdays: t.Collection[int] = DEFAULT_NOTIFY_WEEKDAYS) -> bool:
    """True when assignment reports go out on ``today``'s weekday."""
    return today.isoweekday() in notify_weekdays


def build_assignment_report(
    assignments: t.Sequence[Assignment],
    today: date,
    recipients: t.Sequence[str] = (),
    admin_url: str = ADMIN_URL,
) -> Report:
    lines = [
        f"✅ {a.title} → Week {a.coordinate.week}, Lecture {a.coordinate.lecture}"
        for a in assignments
    ]
    body = (
        "Today's Stream Assignments:\n"
        + "\n".join(lines)
        + "\n\nAll assignments completed successfully.\n"
        + f"View updated lecture library: {admin_url}\n\n"
        + "Automatically generated by YouTube Stream Monitor\n"
    )
    return Report(
        subject=f"YouTube Auto-Assignment Report - {today.strftime('%m/%d/%Y')}",
        body=body,
        recipients=list(recipients),
    )


def build_failure_report(
    error: BaseException,
    now: datetime,
    recipients: t.Sequence[str] = (),
    actions_url: str = ACTIONS_URL,
) -> Report:
    body = (
        "The YouTube lecture assignment automation failed:\n\n"
        f"Error: {error}\n\n"
        f"Please check the GitHub Actions tab for details:\n{actions_url}\n\n"
        "The system will try again at the next scheduled time.\n\n"
        f"Action Time: {now.isoformat()}\n"
    )
    return Report(
        subject=f"🚨 Lecture Assignment Action Failed - {now.strftime('%m/%d/%Y')}",
        body=body,
        recipients=list(recipients),
    )


class Notifier:
    """Delivers reports to a webhook, or to the console when none is set."""

    def __init__(
        self,
        webhook_url: t.Optional[str] = None,
        console: t.Optional[Console] = None,
        transport: t.Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.console = console or Console()
        self._transport = transport

    def send(self, report: Report) -> None:
        """Deliver ``report``.

        Raises:
            NotificationError: If the webhook rejects the report or is unreachable
        """
        if not self.webhook_url:
            self.console.print(
                Panel(report.body, title=report.subject, border_style="cyan", expand=False)
            )
            return

        try:
            with httpx.Client(timeout=WEBHOOK_TIMEOUT, transport=self._transport) as client:
                response = client.post(self.webhook_url, json=asdict(report))
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise NotificationError(f"Notification timed out after {WEBHOOK_TIMEOUT} seconds") from e
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"HTTP error from notification webhook: {e.response.status_code} {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise NotificationError(f"Error calling notification webhook: {e}") from e

        logger.info("Sent report '%s' to %d recipients", report.subject, len(report.recipients))
