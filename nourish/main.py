"""
Nourish CLI

Command-line interface for tending relationships. Every command is an app
activation: the store is loaded and the decay pass runs before anything is
shown or changed.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from nourish.models import birthday as birthdays
from nourish.models.entities import HealthStatus, InteractionType
from nourish.models.friend import Friend
from nourish.models.relationship import InteractionOutcome, RelationshipManager
from nourish.store import JsonFileStore, NotFoundError, StoreError, seed_sample_friends
from nourish.utils.config import Config, load_config

# Initialize console for rich output
console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M"]

STATUS_STYLES = {
    HealthStatus.THRIVING: "green",
    HealthStatus.OKAY: "yellow",
    HealthStatus.FADING: "dark_orange",
    HealthStatus.CRITICAL: "red",
    HealthStatus.GHOST: "grey62",
}


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging with rich handler."""
    handlers: list[logging.Handler] = [RichHandler(console=console, show_path=False)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=handlers,
    )


def fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


class Session:
    """One activation: config, loaded store and the relationship manager."""

    def __init__(self, config: Config, store: JsonFileStore, manager: RelationshipManager):
        self.config = config
        self.store = store
        self.manager = manager
        self.now = manager.clock()

    def friend(self, name_or_id: str) -> Friend:
        friend = self.store.find_friend(name_or_id)
        if friend is None:
            fail(f"No friend named '{name_or_id}'")
        return friend

    def category_ids(self, names: tuple[str, ...]) -> set[str]:
        ids = set()
        for name in names:
            category = self.store.find_category(name)
            if category is None:
                fail(f"No category named '{name}'")
            ids.add(category.id)
        return ids

    def save(self) -> None:
        try:
            self.store.save()
        except StoreError as e:
            fail(str(e))


def activate(ctx: click.Context) -> Session:
    """Load the store and bring every friend's health up to date."""
    config: Config = ctx.obj["config"]
    path = ctx.obj.get("store_path") or config.store.resolved_path

    store = JsonFileStore(path)
    try:
        store.load()
    except StoreError as e:
        fail(str(e))

    manager = RelationshipManager.from_config(config)
    session = Session(config, store, manager)

    store.seed_default_categories()
    if config.store.seed_sample_data:
        seed_sample_friends(store, session.now)

    manager.apply_decay_all(store.list_friends(), session.now)
    session.save()
    return session


def _status_text(status: HealthStatus) -> str:
    style = STATUS_STYLES[status]
    return f"[{style}]{status.emoji} {status.label}[/{style}]"


def _days_ago(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"


def _print_outcome(friend: Friend, outcome: InteractionOutcome) -> None:
    console.print(
        f"  {friend.name}: {outcome.score_before:.0f} -> [bold]{outcome.score_after:.0f}[/bold] "
        f"({_status_text(outcome.status_before)} -> {_status_text(outcome.status_after)})"
    )
    if outcome.resurrected:
        console.print(f"  [bold magenta]{friend.name} is back from the dead![/bold magenta]")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--config", "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (default: config.yaml)",
)
@click.option(
    "--store", "-s",
    "store_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Store file (overrides the configured path)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    config_path: Optional[str],
    store_path: Optional[str],
) -> None:
    """Nourish - keep your friendships healthy."""
    ctx.ensure_object(dict)

    try:
        config = load_config(Path(config_path) if config_path else None)
    except (ValueError, yaml.YAMLError) as e:
        fail(f"Invalid configuration: {e}")

    if verbose:
        ctx.obj["log_level"] = "DEBUG"
    elif quiet:
        ctx.obj["log_level"] = "WARNING"
    else:
        ctx.obj["log_level"] = config.logging.level

    ctx.obj["config"] = config
    ctx.obj["store_path"] = store_path

    setup_logging(ctx.obj["log_level"], config.logging.file)


@cli.command("list")
@click.option("--category", "-g", default=None, help="Only show friends in this category")
@click.pass_context
def list_friends(ctx: click.Context, category: Optional[str]) -> None:
    """List friends, most in need of attention first."""
    session = activate(ctx)
    store, manager = session.store, session.manager

    if category:
        category_id = session.category_ids((category,)).pop()
        friends = store.friends_in_category(category_id)
    else:
        friends = store.list_friends()

    if not friends:
        console.print("\n[yellow]No friends yet.[/yellow] Add one with [cyan]nourish add NAME[/cyan]\n")
        return

    today = session.now.date()
    soon_days = session.config.birthdays.soon_days
    names = {c.id: c.name for c in store.list_categories()}

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Health", justify="right")
    table.add_column("Last contact")
    table.add_column("Categories")

    for friend in manager.sort_by_need(friends, session.now):
        name = friend.name
        if birthdays.is_birthday_today(friend.birthday, today):
            name += " 🎂"
        elif birthdays.is_birthday_soon(friend.birthday, today, soon_days):
            name += " 🎁"
        table.add_row(
            name,
            _status_text(manager.status(friend, session.now)),
            f"{friend.health_score:.0f}",
            _days_ago(manager.days_since_contact(friend, session.now)),
            ", ".join(sorted(names[c] for c in friend.category_ids if c in names)),
        )

    console.print(table)

    ghosts = manager.ghosts(friends, session.now)
    if ghosts:
        console.print(f"\n[grey62]👻 {len(ghosts)} ghost(s) haunting your list[/grey62]")


@cli.command()
@click.argument("name")
@click.option(
    "--last-contact",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="When you last talked (default: assume two weeks ago)",
)
@click.option("--phone", default="", help="Phone number")
@click.option("--notes", default="", help="Free-form notes")
@click.option("--birthday", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Birthday")
@click.option("--category", "-g", "categories", multiple=True, help="Category name (repeatable)")
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    last_contact: Optional[datetime],
    phone: str,
    notes: str,
    birthday: Optional[datetime],
    categories: tuple[str, ...],
) -> None:
    """Add a friend."""
    session = activate(ctx)

    try:
        friend = session.manager.create_friend(
            name,
            last_contact=last_contact,
            now=session.now,
            phone_number=phone,
            notes=notes,
            birthday=birthday.date() if birthday else None,
            category_ids=session.category_ids(categories),
        )
        session.store.add_friend(friend)
    except (ValueError, NotFoundError) as e:
        fail(str(e))

    session.save()
    status = session.manager.status(friend, session.now)
    console.print(
        f"\n  [green]✓[/green] Added {friend.name} at health "
        f"{friend.health_score:.0f} ({_status_text(status)})\n"
    )


@cli.command()
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, name: str) -> None:
    """Show a friend and their interaction history."""
    session = activate(ctx)
    friend = session.friend(name)
    manager = session.manager
    today = session.now.date()

    console.print(f"\n[bold blue]{friend.name}[/bold blue]")
    console.print("=" * 50)

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Status", _status_text(manager.status(friend, session.now)))
    table.add_row("Health", f"{friend.health_score:.1f} / 100")
    table.add_row("Last contact", _days_ago(manager.days_since_contact(friend, session.now)))
    if friend.phone_number:
        table.add_row("Phone", friend.phone_number)
    if friend.birthday:
        days = birthdays.days_until_birthday(friend.birthday, today)
        when = "today!" if days == 0 else f"in {days} days"
        table.add_row(
            "Birthday",
            f"{friend.birthday.isoformat()} (age {birthdays.age(friend.birthday, today)}, {when})",
        )
    if friend.notes:
        table.add_row("Notes", friend.notes)
    console.print(table)

    history = friend.interactions.entries(newest_first=True)
    if not history:
        console.print("\n[dim]No interactions logged yet.[/dim]\n")
        return

    console.print(f"\n[bold]History ({len(history)}):[/bold]")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Note")
    for interaction in history:
        table.add_row(
            interaction.date.strftime("%Y-%m-%d"),
            interaction.type.label,
            interaction.note,
        )
    console.print(table)
    console.print()


@cli.command()
@click.argument("name")
@click.argument("interaction_type", type=click.Choice([t.value for t in InteractionType]))
@click.option("--note", "-n", default="", help="What happened")
@click.option(
    "--date", "-d",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="When it happened (default: now)",
)
@click.pass_context
def log(
    ctx: click.Context,
    name: str,
    interaction_type: str,
    note: str,
    date: Optional[datetime],
) -> None:
    """Log an interaction with a friend."""
    session = activate(ctx)
    friend = session.friend(name)

    outcome = session.manager.log_interaction(
        friend,
        InteractionType(interaction_type),
        note=note,
        date=date,
        now=session.now,
    )
    session.save()

    console.print(f"\n  [green]✓[/green] Logged {InteractionType(interaction_type).label.lower()}")
    _print_outcome(friend, outcome)
    console.print()


@cli.command()
@click.argument("name")
@click.argument("interaction_type", type=click.Choice([t.value for t in InteractionType]))
@click.pass_context
def preview(ctx: click.Context, name: str, interaction_type: str) -> None:
    """Show what logging an interaction would do, without logging it."""
    session = activate(ctx)
    friend = session.friend(name)

    outcome = session.manager.preview_interaction(
        friend, InteractionType(interaction_type), now=session.now
    )
    console.print("\n  [dim]If you log it now:[/dim]")
    _print_outcome(friend, outcome)
    console.print()


@cli.command()
@click.argument("name")
@click.option("--name", "new_name", default=None, help="New display name")
@click.option("--phone", default=None, help="Phone number")
@click.option("--notes", default=None, help="Free-form notes")
@click.option("--birthday", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Birthday")
@click.option("--category", "-g", "categories", multiple=True, help="Replace categories (repeatable)")
@click.option("--clear-categories", is_flag=True, help="Remove all categories")
@click.pass_context
def edit(
    ctx: click.Context,
    name: str,
    new_name: Optional[str],
    phone: Optional[str],
    notes: Optional[str],
    birthday: Optional[datetime],
    categories: tuple[str, ...],
    clear_categories: bool,
) -> None:
    """Edit a friend's details."""
    session = activate(ctx)
    friend = session.friend(name)

    fields: dict = {}
    if new_name is not None:
        fields["name"] = new_name
    if phone is not None:
        fields["phone_number"] = phone
    if notes is not None:
        fields["notes"] = notes
    if birthday is not None:
        fields["birthday"] = birthday.date()
    if clear_categories:
        fields["category_ids"] = set()
    elif categories:
        fields["category_ids"] = session.category_ids(categories)

    if not fields:
        console.print("[yellow]Nothing to change.[/yellow]")
        return

    try:
        session.manager.edit(friend, **fields)
    except ValueError as e:
        fail(str(e))

    session.save()
    console.print(f"\n  [green]✓[/green] Updated {friend.name}\n")


@cli.command()
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, name: str, yes: bool) -> None:
    """Delete a friend and all their interactions."""
    session = activate(ctx)
    friend = session.friend(name)

    if not yes:
        click.confirm(
            f"Delete {friend.name} and {friend.interaction_count} interaction(s)?",
            abort=True,
        )

    session.store.delete_friend(friend.id)
    session.save()
    console.print(f"\n  [green]✓[/green] Deleted {friend.name}\n")


@cli.command()
@click.pass_context
def categories(ctx: click.Context) -> None:
    """List categories."""
    session = activate(ctx)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Friends", justify="right")
    table.add_column("Color")
    table.add_column("Built-in", justify="center")

    for category in session.store.list_categories():
        table.add_row(
            category.name,
            str(len(session.store.friends_in_category(category.id))),
            f"[#{category.color_hex}]■[/#{category.color_hex}] #{category.color_hex}",
            "✓" if category.is_default else "",
        )

    console.print(table)


@cli.command("add-category")
@click.argument("name")
@click.option("--icon", default="tag.fill", help="Icon name")
@click.option("--color", default="808080", help="Hex color, e.g. 5B9BD5")
@click.pass_context
def add_category(ctx: click.Context, name: str, icon: str, color: str) -> None:
    """Add a custom category."""
    session = activate(ctx)
    if session.store.find_category(name) is not None:
        fail(f"Category '{name}' already exists")

    try:
        category = session.store.add_category(name, icon=icon, color_hex=color.lstrip("#"))
    except ValueError as e:
        fail(str(e))

    session.save()
    console.print(f"\n  [green]✓[/green] Added category {category.name}\n")


@cli.command("delete-category")
@click.argument("name")
@click.pass_context
def delete_category(ctx: click.Context, name: str) -> None:
    """Delete a custom category. Friends in it are kept."""
    session = activate(ctx)
    category = session.store.find_category(name)
    if category is None:
        fail(f"No category named '{name}'")

    try:
        detached = session.store.delete_category(category.id)
    except ValueError as e:
        fail(str(e))

    session.save()
    console.print(
        f"\n  [green]✓[/green] Deleted category {category.name} "
        f"(removed from {detached} friend(s))\n"
    )


@cli.command("edit-category")
@click.argument("name")
@click.option("--name", "new_name", default=None, help="New category name")
@click.option("--icon", default=None, help="Icon name")
@click.option("--color", default=None, help="Hex color, e.g. 5B9BD5")
@click.pass_context
def edit_category(
    ctx: click.Context,
    name: str,
    new_name: Optional[str],
    icon: Optional[str],
    color: Optional[str],
) -> None:
    """Rename or restyle a category."""
    session = activate(ctx)
    category = session.store.find_category(name)
    if category is None:
        fail(f"No category named '{name}'")

    if new_name is None and icon is None and color is None:
        console.print("[yellow]Nothing to change.[/yellow]")
        return

    try:
        category = session.store.update_category(
            category.id,
            name=new_name,
            icon=icon,
            color_hex=color.lstrip("#") if color else None,
        )
    except ValueError as e:
        fail(str(e))

    session.save()
    console.print(f"\n  [green]✓[/green] Updated category {category.name}\n")


@cli.command("delete-all")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete_all(ctx: click.Context, yes: bool) -> None:
    """Delete every friend and their interactions. Categories are kept."""
    session = activate(ctx)
    store = session.store

    if not yes:
        click.confirm(
            f"Delete all {len(store.list_friends())} friend(s) and "
            f"{store.interaction_count()} interaction(s)?",
            abort=True,
        )

    removed = store.delete_all_friends()
    session.save()
    console.print(f"\n  [green]✓[/green] Deleted {removed} friend(s)\n")


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from nourish import __version__

    console.print(f"Nourish v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
