"""GuardianNet CLI: scan text, manage the block list, review activity."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from guardnet import __version__

console = Console()

_DATETIME_FORMATS = ["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d"]
_IMPORT_SUFFIXES = {".txt", ".csv"}
_SENSITIVITY_CHOICE = click.Choice(["strict", "moderate", "off"], case_sensitive=False)


def _runtime(ctx: click.Context):
    from guardnet.config import load_config
    from guardnet.runtime import build_runtime

    if "runtime" not in ctx.obj:
        ctx.obj["runtime"] = build_runtime(load_config(ctx.obj.get("home")))
    return ctx.obj["runtime"]


def _fmt(dt) -> str:
    return dt.strftime("%Y-%m-%d %H:%M UTC") if dt else "-"


@click.group()
@click.version_option(version=__version__)
@click.option("--home", default=None, type=click.Path(file_okay=False), help="Data directory (default: ~/.guardnet)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, home: str | None, verbose: bool):
    """GuardianNet: block-list and AI-assisted content moderation.

    Text is first checked against the local block list; anything that
    gets through is sent to the AI classifier.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["home"] = home


# ── Scan ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.option("--sensitivity", "-s", default=None, type=_SENSITIVITY_CHOICE, help="Override the configured filter level")
@click.pass_context
def scan(ctx: click.Context, text: str, sensitivity: str | None):
    """Analyze TEXT and record the verdict."""
    from guardnet.moderation.errors import EmptyInputError
    from guardnet.moderation.models import Sensitivity
    from guardnet.moderation.pipeline import ensure_text

    try:
        ensure_text(text)
    except EmptyInputError:
        console.print("[yellow]Nothing to scan: the text is empty.[/]")
        ctx.exit(1)

    rt = _runtime(ctx)
    level = Sensitivity(sensitivity.lower()) if sensitivity else None
    entry = rt.pipeline.submit(text, level)

    result = entry.result
    verdict = "[green]SAFE[/]" if result.is_safe else "[red]BLOCKED[/]"
    categories = ", ".join(c.value for c in result.categories) or "-"
    body = (
        f"Verdict: {verdict}\n"
        f"Score: {result.score}/100\n"
        f"Categories: {categories}\n"
        f"Reasoning: {result.reasoning}"
    )
    if result.flagged_phrases:
        body += "\nFlagged: " + ", ".join(result.flagged_phrases)
    console.print(Panel(body, title="Analysis Result"))


# ── Sites ────────────────────────────────────────────────────────────


@main.group()
def sites():
    """Manage the block list."""


@sites.command(name="list")
@click.pass_context
def list_sites(ctx: click.Context):
    """List blocked sites and their schedule status."""
    from guardnet.moderation.models import utcnow
    from guardnet.moderation.schedule import schedule_status

    rules = _runtime(ctx).sites.list_rules()
    if not rules:
        console.print("[yellow]Block list is empty.[/]")
        return

    now = utcnow()
    table = Table(title=f"Blocked Sites ({len(rules)})")
    table.add_column("ID", style="dim")
    table.add_column("Site", style="cyan")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Start")
    table.add_column("End")
    for rule in rules:
        table.add_row(
            rule.id,
            rule.url_pattern,
            rule.category,
            schedule_status(rule, now).value,
            _fmt(rule.window_start),
            _fmt(rule.window_end),
        )
    console.print(table)


@sites.command(name="add")
@click.argument("url")
@click.pass_context
def add_site(ctx: click.Context, url: str):
    """Block URL permanently."""
    if not url.strip():
        console.print("[yellow]Nothing to add: the URL is empty.[/]")
        ctx.exit(1)
    rule = _runtime(ctx).sites.add_site(url)
    if rule is None:
        console.print(f"[yellow]'{url}' is already on the block list.[/]")
        return
    console.print(f"[green]Blocked[/] {rule.url_pattern} ({rule.id})")


@sites.command(name="import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_sites(ctx: click.Context, file: str):
    """Import sites from a .txt or .csv FILE."""
    path = Path(file)
    if path.suffix.lower() not in _IMPORT_SUFFIXES:
        console.print("[red]Unsupported file type.[/] Use a .txt or .csv file.")
        ctx.exit(1)

    added = _runtime(ctx).sites.import_blocklist(path.read_text(errors="replace"))
    console.print(f"[green]Added {len(added)} site(s)[/] from {path.name}")


@sites.command(name="schedule")
@click.argument("rule_id")
@click.option("--start", required=True, type=click.DateTime(_DATETIME_FORMATS), help="Block start (UTC)")
@click.option("--end", required=True, type=click.DateTime(_DATETIME_FORMATS), help="Block end (UTC)")
@click.pass_context
def schedule_site(ctx: click.Context, rule_id: str, start, end):
    """Only block RULE_ID between --start and --end."""
    from guardnet.moderation.errors import InvalidScheduleError

    try:
        rule = _runtime(ctx).sites.update_schedule(rule_id, start, end)
    except InvalidScheduleError as e:
        console.print(f"[red]Invalid schedule:[/] {e}")
        ctx.exit(1)
    if rule is None:
        console.print(f"[red]No site with id {rule_id}.[/]")
        ctx.exit(1)
    console.print(f"[green]Scheduled[/] {rule.url_pattern}: {_fmt(rule.window_start)} to {_fmt(rule.window_end)}")


@sites.command(name="clear-schedule")
@click.argument("rule_id")
@click.pass_context
def clear_schedule(ctx: click.Context, rule_id: str):
    """Make RULE_ID a permanent block again."""
    rule = _runtime(ctx).sites.clear_schedule(rule_id)
    if rule is None:
        console.print(f"[red]No site with id {rule_id}.[/]")
        ctx.exit(1)
    console.print(f"[green]{rule.url_pattern} is now permanently blocked.[/]")


# ── Activity ─────────────────────────────────────────────────────────


@main.command()
@click.option("--limit", "-n", default=20, show_default=True, help="Number of entries to show")
@click.pass_context
def logs(ctx: click.Context, limit: int):
    """Show recent scans, newest first."""
    entries = _runtime(ctx).activity.list_logs(limit)
    if not entries:
        console.print("[yellow]No activity recorded.[/]")
        return

    table = Table(title="Activity Log")
    table.add_column("Time", style="dim")
    table.add_column("Snippet")
    table.add_column("Verdict", justify="center")
    table.add_column("Score", justify="right")
    table.add_column("Categories")
    for entry in entries:
        r = entry.result
        table.add_row(
            _fmt(entry.timestamp),
            entry.snippet,
            "[green]safe[/]" if r.is_safe else "[red]blocked[/]",
            str(r.score),
            ", ".join(c.value for c in r.categories),
        )
    console.print(table)


@main.command()
@click.pass_context
def stats(ctx: click.Context):
    """Show cumulative scan statistics."""
    s = _runtime(ctx).activity.get_stats()
    console.print(f"Total scanned: {s.total_scanned}")
    console.print(f"Blocked: {s.blocked_count}")
    if s.category_breakdown:
        table = Table(title="Blocked by Category")
        table.add_column("Category", style="cyan")
        table.add_column("Count", justify="right")
        for category, count in sorted(s.category_breakdown.items(), key=lambda kv: -kv[1]):
            table.add_row(category, str(count))
        console.print(table)


@main.command()
@click.pass_context
def clear(ctx: click.Context):
    """Clear the activity log and reset statistics."""
    _runtime(ctx).activity.clear()
    console.print("[green]Activity log cleared.[/]")


@main.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def uninstall(ctx: click.Context, yes: bool):
    """Wipe all data and settings."""
    from guardnet.moderation.errors import UninstallLockedError

    rt = _runtime(ctx)
    if not yes:
        click.confirm("This will wipe all data and reset the application. Continue?", abort=True)
    try:
        rt.uninstall()
    except UninstallLockedError as e:
        console.print(f"[red]Locked:[/] active block schedules are running until {_fmt(e.locked_until)}.")
        ctx.exit(1)
    console.print("[green]All data removed.[/]")


# ── Config ───────────────────────────────────────────────────────────


@main.group()
def config():
    """Show or change settings."""


@config.command(name="show")
@click.pass_context
def show_config(ctx: click.Context):
    """Print the active settings."""
    cfg = _runtime(ctx).config
    console.print(f"Home: {cfg.home}")
    console.print(f"Sensitivity: {cfg.sensitivity.value}")
    console.print(f"Model: {cfg.model}")
    console.print(f"API key: {'set' if cfg.api_key else '[yellow]not set[/]'}")


@config.command(name="set-sensitivity")
@click.argument("level", type=_SENSITIVITY_CHOICE)
@click.pass_context
def set_sensitivity(ctx: click.Context, level: str):
    """Set the default filter level (strict, moderate, off)."""
    from guardnet.config import save_config
    from guardnet.moderation.models import Sensitivity

    rt = _runtime(ctx)
    rt.config.sensitivity = Sensitivity(level.lower())
    rt.pipeline.sensitivity = rt.config.sensitivity
    path = save_config(rt.config)
    console.print(f"[green]Sensitivity set to {level.lower()}[/] ({path})")


if __name__ == "__main__":
    main()
