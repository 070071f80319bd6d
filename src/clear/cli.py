"""Clear CLI - capture, score and focus."""

import json
import logging
import sys

import click

from .activity import archive_task, edit_task, record_activity
from .adapters.sqlite_store import SqliteStore
from .clock import utc_now
from .config import Config, load_config
from .core.settings import validate_setting, with_defaults
from .core.tasks import TaskStatus
from .decider import generate_daily_focus
from .errors import NotFoundError, ValidationError
from .intake import process_dumps, submit_dump
from .scorer import score_tasks
from .workflows import focus_payload, get_extractor, get_store, get_today_focus, refocus, today_for

user_option = click.option(
    "--user",
    "user_id",
    envvar="CLEAR_USER",
    required=True,
    help="User id (or set CLEAR_USER)",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")


def _open() -> tuple[Config, SqliteStore]:
    config = load_config()
    return config, get_store(config)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.version_option(package_name="clear-focus")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Clear - dump your thoughts, get a daily focus."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


# ============== Users ==============


@main.group()
def user():
    """Manage known users."""
    pass


@user.command("add")
@click.argument("email")
def user_add(email: str):
    """Register a user and print its id."""
    _, store = _open()
    click.echo(store.add_user(email))


@user.command("list")
def user_list():
    """List known user ids."""
    _, store = _open()
    for user_id in store.list_user_ids():
        click.echo(user_id)


# ============== Intake ==============


@main.command()
@user_option
@click.argument("content", required=False)
def dump(user_id: str, content: str | None):
    """Capture free text (argument or stdin) for later extraction."""
    if content is None or content == "-":
        content = click.get_text_stream("stdin").read()
    _, store = _open()
    try:
        entry = submit_dump(store, user_id, content)
    except ValidationError as e:
        _fail(e)
    click.echo(f"✓ Captured dump {entry.id}")


@main.command()
@user_option
@json_option
def dumps(user_id: str, as_json: bool):
    """Show dump history, newest first."""
    _, store = _open()
    entries = store.list_dumps(user_id)

    if as_json:
        _echo_json([e.to_dict() for e in entries])
        return

    if not entries:
        click.echo("No dumps yet.")
        return

    for e in entries:
        marker = "✓" if e.processed else "…"
        first_line = e.content.splitlines()[0] if e.content else ""
        click.echo(f"{marker} {e.created_at.strftime('%Y-%m-%d %H:%M')}  {first_line[:60]}")


@main.command()
@user_option
def process(user_id: str):
    """Extract tasks from pending dumps."""
    config, store = _open()
    try:
        extractor = get_extractor(config)
    except ValueError as e:
        _fail(e)
    report = process_dumps(store, extractor, user_id, today_for(config))
    click.echo(f"Processed {report.succeeded} dump(s), {report.failed} failed")


# ============== Scoring & focus ==============


@main.command()
@user_option
def score(user_id: str):
    """Recompute neglect scores."""
    _, store = _open()
    report = score_tasks(store, user_id)
    click.echo(f"Scored {report.succeeded} task(s), {report.failed} failed")


@main.command()
@user_option
@click.option("--force", is_flag=True, help="Replace today's focus if it exists")
def decide(user_id: str, force: bool):
    """Generate today's focus from current scores."""
    config, store = _open()
    focus = generate_daily_focus(store, user_id, today_for(config), force=force)
    if focus is None:
        click.echo("No new focus generated.")
    else:
        click.echo(f"Daily focus generated for {focus.date}.")


@main.command()
@user_option
@json_option
def focus(user_id: str, as_json: bool):
    """Show today's focus, generating it if needed."""
    config, store = _open()
    now = utc_now()
    resolved = get_today_focus(store, user_id, today_for(config, now), now)

    if as_json:
        _echo_json(focus_payload(resolved))
        return

    if resolved is None:
        click.echo("Nothing to focus on. Dump some thoughts first.")
        return

    click.echo(f"Focus for {resolved.focus.date.strftime('%A, %b %d')}")
    click.echo(f"{resolved.focus.daily_directive}\n")
    for i, task in enumerate(resolved.top_tasks, start=1):
        if task is None:
            continue
        marker = "✓" if task.status is TaskStatus.DONE else " "
        click.echo(f"  {i}. [{marker}] {task.canonical_text}  ({task.id})")
    if resolved.avoided_task:
        click.echo(f"\nAvoided: {resolved.avoided_task.canonical_text}  ({resolved.avoided_task.id})")


@main.command("refocus")
@user_option
def refocus_cmd(user_id: str):
    """Process dumps, rescore, and regenerate today's focus.

    Reports success only when a new focus was written; a day with no
    eligible tasks, or a concurrent writer winning the insert, reports false.
    """
    config, store = _open()
    try:
        extractor = get_extractor(config)
    except ValueError as e:
        _fail(e)
    now = utc_now()
    focus = refocus(store, extractor, user_id, today_for(config, now), now)
    _echo_json({"success": focus is not None})


# ============== Tasks ==============


@main.command()
@user_option
@json_option
@click.option("--all", "show_all", is_flag=True, help="Include done and archived tasks")
def tasks(user_id: str, as_json: bool, show_all: bool):
    """List tasks."""
    _, store = _open()
    statuses = None if show_all else [TaskStatus.OPEN]
    items = store.list_tasks(user_id, statuses)

    if as_json:
        _echo_json([t.to_dict() for t in items])
        return

    if not items:
        click.echo("No tasks.")
        return

    for t in items:
        scheduled = f" (on {t.scheduled_date})" if t.scheduled_date else ""
        click.echo(
            f"{t.id}  [{t.status.value:8}] P{t.pressure_score:.2f} L{t.leverage_score:.2f} "
            f"N{t.neglect_score:.2f}  {t.canonical_text}{scheduled}"
        )


@main.command()
@user_option
@click.argument("task_id")
@click.argument("activity_type")
def activity(user_id: str, task_id: str, activity_type: str):
    """Record an interaction: touched, done or undo."""
    config, store = _open()
    now = utc_now()
    try:
        task = record_activity(store, user_id, task_id, activity_type, today_for(config, now), now)
    except (ValidationError, NotFoundError) as e:
        _fail(e)
    click.echo(f"✓ {task.canonical_text} [{task.status.value}]")


@main.command()
@user_option
@click.argument("task_id")
@click.argument("text")
def edit(user_id: str, task_id: str, text: str):
    """Change a task's text."""
    _, store = _open()
    try:
        task = edit_task(store, user_id, task_id, text)
    except (ValidationError, NotFoundError) as e:
        _fail(e)
    click.echo(f"✓ {task.canonical_text}")


@main.command()
@user_option
@click.argument("task_id")
def archive(user_id: str, task_id: str):
    """Archive (soft-delete) a task."""
    _, store = _open()
    try:
        archive_task(store, user_id, task_id)
    except NotFoundError as e:
        _fail(e)
    click.echo("✓ Archived")


# ============== Settings ==============


@main.group()
def settings():
    """View or change per-user settings."""
    pass


@settings.command("get")
@user_option
def settings_get(user_id: str):
    """Show settings, including defaults."""
    _, store = _open()
    _echo_json(with_defaults(store.get_settings(user_id)))


@settings.command("set")
@user_option
@click.argument("key")
@click.argument("value")
def settings_set(user_id: str, key: str, value: str):
    """Change one setting."""
    _, store = _open()
    try:
        value = validate_setting(key, value)
    except ValidationError as e:
        _fail(e)
    store.set_setting(user_id, key.strip(), value)
    click.echo(f"✓ {key} = {value}")


# ============== Background ==============


@main.command("scheduler")
def scheduler_cmd():
    """Run background intake and daily focus jobs."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    from .scheduler import run_scheduler

    click.echo("Starting Clear scheduler...")
    click.echo("Press Ctrl+C to stop")
    try:
        run_scheduler()
    except KeyboardInterrupt:
        click.echo("\nScheduler stopped.")


if __name__ == "__main__":
    main()
