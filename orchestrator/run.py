# -*- coding: utf-8 -*-
import logging
import typing as t
from datetime import date, datetime, timedelta, timezone

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from catalog_client.youtube import YouTubeCatalog
from notifier.report import (
    Notifier,
    build_assignment_report,
    build_failure_report,
    should_notify,
)
from orchestrator.config import Settings
from record_store.store import RecordFile
from schedule_engine import record_codec
from schedule_engine.classes import DEFAULT_CLASSES
from schedule_engine.engine import AssignmentRun, RunState, assign_videos
from schedule_engine.errors import AssignerError, NotificationError
from schedule_engine.models import (
    CandidateVideo,
    SequentialFillRule,
    SlotFallback,
)
from schedule_engine.resolver import ScheduleContext
from schedule_engine.semester import SemesterCalendar

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

WEEKDAY_NAMES = {1: "Mon", 2: "Tue", 3: "Wed", 4: "Thu", 5: "Fri", 6: "Sat", 7: "Sun"}


class VideoSource(t.Protocol):
    def fetch_recent_videos(
        self, now: t.Optional[datetime] = None, window: timedelta = ...
    ) -> list[CandidateVideo]: ...


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # httpx logs every request URL, and those carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)


def truncate_title(title: str, max_length: int = 45) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def create_summary_table(run: AssignmentRun) -> Table:
    """Create a summary table of assignments and skipped videos."""
    table = Table(title="📺 Assignment Summary", show_header=True, header_style="bold magenta")
    table.add_column("", style="cyan", width=3)
    table.add_column("Title", style="white")
    table.add_column("Slot", style="yellow")

    for assignment in run.assignments:
        table.add_row("✅", truncate_title(assignment.title), str(assignment.coordinate))

    for rejection in run.rejections:
        table.add_row("🚫", truncate_title(rejection.title), f"[dim]{rejection.reason.value}[/dim]")

    return table


def create_classes_table() -> Table:
    table = Table(title="📚 Class Schedules", show_header=True, header_style="bold magenta")
    table.add_column("Class", style="cyan")
    table.add_column("Title tokens", style="white")
    table.add_column("Rule", style="yellow")

    for spec in DEFAULT_CLASSES:
        if isinstance(spec.rule, SequentialFillRule):
            rule = f"sequential fill, {spec.rule.max_slots} per week"
        else:
            rule = ", ".join(WEEKDAY_NAMES[day] for day in spec.rule.weekdays)
        table.add_row(spec.code, " / ".join(spec.tokens), rule)

    return table


def run_assignment(
    settings: Settings,
    catalog: VideoSource,
    record_file: RecordFile,
    fallback: SlotFallback = SlotFallback.FIRST_SLOT,
    reject_past_end: bool = False,
    dry_run: bool = False,
    now: t.Optional[datetime] = None,
    run: t.Optional[AssignmentRun] = None,
) -> t.Optional[AssignmentRun]:
    """Fetch recent videos, assign them and persist the record once.

    Args:
        run: Run to record state on. A new one is created when not given.

    Returns:
        The finished run, or None when the catalog had no recent videos

    Raises:
        AssignerError: On configuration, catalog or record failures. Nothing
                       is written in that case, and a started run is left
                       ``FAILED``.
    """
    settings.validate()
    semester_start, semester_end = settings.semester_dates()
    logger.info("Semester: %s to %s", semester_start, semester_end)

    if run is None:
        run = AssignmentRun()
    run.transition(RunState.PROCESSING)
    try:
        videos = catalog.fetch_recent_videos(now=now, window=timedelta(days=settings.lookback_days))
        logger.info("Found %d recent streams", len(videos))
        if not videos:
            run.transition(RunState.DONE)
            return None

        original_text = record_file.read()
        snapshot = record_codec.decode(original_text)

        context = ScheduleContext(
            calendar=SemesterCalendar(semester_start, semester_end),
            fallback=fallback,
            reject_past_semester_end=reject_past_end,
        )
        assign_videos(videos, snapshot, context, run=run)

        if not run.has_changes:
            run.transition(RunState.DONE)
            return run

        run.transition(RunState.COMMITTING)
        updated_text = record_codec.encode(run.snapshot, original_text)
        if dry_run:
            logger.info("Dry run: %d assignments not written", len(run.assignments))
        else:
            record_file.write(updated_text)
            logger.info("Updated %d lecture assignments", len(run.assignments))
    except AssignerError:
        run.transition(RunState.FAILED)
        raise
    run.transition(RunState.DONE)
    return run


def _notify_failure(notifier: Notifier, error: BaseException, recipients: t.Sequence[str]) -> None:
    report = build_failure_report(error, datetime.now(timezone.utc), recipients)
    try:
        notifier.send(report)
    except NotificationError as notify_error:
        logger.error("Failed to send failure notification: %s", notify_error)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--record",
    "record_path",
    type=click.Path(dir_okay=False),
    help="Path to the record page. Overrides RECORD_PATH.",
)
@click.option("--dry-run", is_flag=True, help="Compute assignments without writing the record.")
@click.option(
    "--strict-slots",
    is_flag=True,
    help="Skip videos when every sequential slot of the week is filled, instead of falling back to lecture 1.",
)
@click.option("--reject-past-end", is_flag=True, help="Skip videos dated after the semester end.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--list-classes", is_flag=True, help="List class schedules without running the assigner.")
def main(
    record_path: t.Optional[str],
    dry_run: bool,
    strict_slots: bool,
    reject_past_end: bool,
    verbose: bool,
    list_classes: bool,
) -> None:
    """Assign recent YouTube streams to lecture slots in the record page."""
    if list_classes:
        console.print(create_classes_table())
        return

    configure_logging(verbose)

    console.print(
        Panel.fit(
            "[bold blue]🤖 YouTube Stream Monitor[/bold blue]\n"
            "Assigning recent streams to lecture slots",
            border_style="blue",
        )
    )

    notifier = Notifier(console=console)
    recipients: list[str] = []
    try:
        settings = Settings.from_env()
        if record_path:
            settings.record_path = record_path
        notifier = Notifier(settings.notify_webhook_url or None, console=console)
        recipients = settings.recipient_emails

        catalog = YouTubeCatalog(
            api_key=settings.youtube_api_key,
            channel_id=settings.youtube_channel_id,
            base_url=settings.youtube_api_url,
        )
        run = run_assignment(
            settings,
            catalog,
            RecordFile(settings.record_path),
            fallback=SlotFallback.REJECT if strict_slots else SlotFallback.FIRST_SLOT,
            reject_past_end=reject_past_end,
            dry_run=dry_run,
        )
    except AssignerError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        _notify_failure(notifier, e, recipients)
        err_console.print("[bold red]🚨 Run failed - record left unchanged[/bold red]")
        raise SystemExit(1)

    if run is None:
        console.print("[green]No recent streams found - nothing to do[/green]")
        return

    stats_text = Text()
    stats_text.append("Assigned: ", style="white")
    stats_text.append(f"{len(run.assignments)}", style="bold green")
    stats_text.append("\n")
    stats_text.append("Skipped: ", style="white")
    stats_text.append(f"{len(run.rejections)}", style="bold yellow")
    console.print(Panel(stats_text, title="📊 Statistics", border_style="green"))

    if run.assignments or run.rejections:
        console.print(create_summary_table(run))

    if not run.has_changes:
        console.print("[green]No new assignments made - completed successfully[/green]")
        return

    if dry_run:
        console.print("[yellow]Dry run - record not written[/yellow]")
        return

    today = date.today()
    if should_notify(today):
        report = build_assignment_report(run.assignments, today, recipients)
        try:
            notifier.send(report)
        except NotificationError as e:
            # The record is already saved; a missed report does not fail the run
            logger.error("Failed to send assignment report: %s", e)

    console.print("\n[bold green]✅ YouTube Stream Monitor completed successfully[/bold green]")


if __name__ == "__main__":
    main()
