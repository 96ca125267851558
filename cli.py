"""CLI commands for Invitely event management."""

import asyncio
import json
from datetime import UTC, datetime
from uuid import UUID

import typer

from invitely.config.logging import setup_logging
from invitely.email_service import get_email_service
from invitely.events.dtos import ReminderRule, ReminderUnit
from invitely.events.reminder_schedule import format_rule, parse_schedule, validate_schedule
from invitely.events.repository.read_models import SqlEventReadModel
from invitely.events.repository.write_models import SqlEventWriteModel
from invitely.guests.repository.write_models import SqlRSVPWriteModel
from invitely.guests.urls import build_rsvp_link
from invitely.reminders.dispatcher import ReminderDispatcher
from invitely.reminders.dtos import ReminderError
from invitely.reminders.repository.read_models import SqlReminderReadModel
from invitely.reminders.repository.write_models import SqlReminderWriteModel
from invitely.sms_service import get_sms_service

app = typer.Typer(help="CLI commands for Invitely event management")


def _parse_datetime(value: str | None) -> datetime | None:
    """ISO 8601; a value without an offset is taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Not an ISO 8601 datetime: {value}")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _parse_reminders(reminders: str | None) -> list[ReminderRule]:
    """Accepts the stored JSON encodings, or a shorthand like '7d,1d,2h'."""
    if not reminders:
        return []
    if reminders.lstrip().startswith("["):
        rules = parse_schedule(reminders)
        # parse_schedule drops malformed input, only a literal [] may come back empty
        if not rules and "".join(reminders.split()) != "[]":
            raise typer.BadParameter(f"Cannot read reminder schedule: {reminders}")
        return rules

    units = {"d": ReminderUnit.DAY, "h": ReminderUnit.HOUR}
    rules = []
    for part in reminders.split(","):
        part = part.strip().lower()
        if not part or part[-1] not in units or not part[:-1].isdigit():
            raise typer.BadParameter(f"Cannot read reminder '{part}', use e.g. 7d or 2h")
        rules.append(ReminderRule(unit=units[part[-1]], value=int(part[:-1])))
    return rules


@app.command()
def send_reminders():
    """Run one reminder cycle, e.g. from a system crontab."""
    setup_logging()
    dispatcher = ReminderDispatcher(
        read_model=SqlReminderReadModel(),
        write_model=SqlReminderWriteModel(),
        email_service=get_email_service(),
        sms_service=get_sms_service(),
    )
    summary = asyncio.run(dispatcher.run_cycle())

    typer.secho("Reminder cycle finished!", fg=typer.colors.GREEN)
    typer.secho(f"  Emails sent: {summary.emails_sent}", fg=typer.colors.BLUE)
    typer.secho(f"  SMS sent: {summary.sms_sent}", fg=typer.colors.BLUE)
    color = typer.colors.RED if summary.errors else typer.colors.BLUE
    typer.secho(f"  Errors: {summary.errors}", fg=color)


@app.command()
def create_event(
    title: str = typer.Argument(..., help="Event title"),
    start: str = typer.Argument(..., help="Start time in ISO format, e.g. 2026-12-31T20:00:00+00:00"),
    host_email: str = typer.Option(..., "--host-email", "-e", help="Email of the host"),
    host_name: str = typer.Option(None, "--host-name", help="Name of the host"),
    location: str = typer.Option(None, "--location", "-l", help="Event location"),
    deadline: str = typer.Option(None, "--deadline", "-d", help="RSVP deadline in ISO format"),
    max_guests: int = typer.Option(
        None,
        "--max-guests",
        "-m",
        help="Party size per invitee, including themselves. Unlimited when omitted.",
    ),
    reminders: str = typer.Option(
        None,
        "--reminders",
        "-r",
        help="Reminder schedule, e.g. '7d,1d,2h' or a JSON list",
    ),
):
    """Create an event with an optional reminder schedule."""
    rules = _parse_reminders(reminders)
    validation = validate_schedule(rules)
    if not validation.valid:
        typer.secho(validation.error, fg=typer.colors.RED)
        raise typer.Exit(1)

    event = asyncio.run(
        SqlEventWriteModel().create_event(
            title=title,
            start_time=_parse_datetime(start),
            host_email=host_email,
            host_name=host_name,
            location=location,
            rsvp_deadline=_parse_datetime(deadline),
            max_guests_per_invitee=max_guests,
            reminder_schedule=rules,
        )
    )

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {event.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Slug: {event.slug}", fg=typer.colors.CYAN)
    typer.secho(f"  Starts: {event.start_time.isoformat()}", fg=typer.colors.BLUE)
    for rule in event.reminder_schedule:
        typer.secho(f"  Reminder: {format_rule(rule)}", fg=typer.colors.MAGENTA)


@app.command()
def add_guest(
    event_id: str = typer.Argument(..., help="Event UUID"),
    email: str = typer.Argument(..., help="Guest email"),
    name: str = typer.Option(None, "--name", "-n", help="Guest name"),
    phone: str = typer.Option(None, "--phone", "-p", help="Phone in E.164 format, enables SMS reminders"),
    max_guests: int = typer.Option(
        None,
        "--max-guests",
        "-m",
        help="Per-guest party size, overrides the event's limit",
    ),
):
    """Add a guest to an event's guest list."""

    async def _add_guest():
        event = await SqlEventReadModel().get_event(UUID(event_id))
        if event is None:
            raise ValueError(f"Event not found: {event_id}")
        return await SqlRSVPWriteModel().invite_guest(
            event_id=event.id,
            email=email,
            name=name,
            phone=phone,
            max_guests=max_guests,
        )

    try:
        guest = asyncio.run(_add_guest())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest added!", fg=typer.colors.GREEN)
    typer.secho(f"  Email: {guest.email}", fg=typer.colors.BLUE)
    typer.secho(f"  Guest ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  RSVP URL: {build_rsvp_link(guest.token)}", fg=typer.colors.CYAN)


@app.command()
def add_cohost(
    event_id: str = typer.Argument(..., help="Event UUID"),
    email: str = typer.Argument(..., help="Co-host email"),
    name: str = typer.Option(None, "--name", "-n", help="Co-host name"),
):
    """Add a co-host who is notified of RSVP changes."""

    async def _add_cohost():
        event = await SqlEventReadModel().get_event(UUID(event_id))
        if event is None:
            raise ValueError(f"Event not found: {event_id}")
        return await SqlEventWriteModel().add_cohost(event.id, email, name)

    try:
        host = asyncio.run(_add_cohost())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Co-host added!", fg=typer.colors.GREEN)
    typer.secho(f"  Email: {host.email}", fg=typer.colors.BLUE)
    typer.secho(f"  User ID: {host.id}", fg=typer.colors.CYAN)


@app.command()
def remind_guest(
    event_id: str = typer.Argument(..., help="Event UUID"),
    guest_id: str = typer.Argument(..., help="Guest UUID"),
):
    """Remind a guest who has not answered yet, right now."""
    setup_logging()
    dispatcher = ReminderDispatcher(
        read_model=SqlReminderReadModel(),
        write_model=SqlReminderWriteModel(),
        email_service=get_email_service(),
    )
    try:
        email_sent = asyncio.run(dispatcher.remind_guest(UUID(event_id), UUID(guest_id)))
    except ReminderError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    if email_sent:
        typer.secho("Reminder sent!", fg=typer.colors.GREEN)
    else:
        typer.secho("Guest opted out of email, marked as reminded", fg=typer.colors.YELLOW)


@app.command()
def show_schedule(
    event_id: str = typer.Argument(..., help="Event UUID"),
    as_json: bool = typer.Option(False, "--json", help="Print the stored JSON encoding"),
):
    """Show the reminder schedule of an event."""
    event = asyncio.run(SqlEventReadModel().get_event(UUID(event_id)))
    if event is None:
        typer.secho(f"Event not found: {event_id}", fg=typer.colors.RED)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([rule.to_dict() for rule in event.reminder_schedule]))
        return

    typer.secho(f"{event.title} ({event.start_time.isoformat()})", fg=typer.colors.GREEN)
    if not event.reminder_schedule:
        typer.secho("  No reminders configured", fg=typer.colors.YELLOW)
    for rule in event.reminder_schedule:
        typer.secho(f"  - {format_rule(rule)}", fg=typer.colors.BLUE)


if __name__ == "__main__":
    app()
