import threading
import tomllib
import typer

from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

import rotina
from rotina.core import FileSystem, Workspace
from rotina.core.config import DEFAULT_DAYS
from rotina.core.service import count_by_day
from rotina.exceptions import NestedRepoExistsError
from rotina.models import Activity

from rotina_cli.utils import edit_file, resolve_day_label

cli = typer.Typer(help="Keep track of a weekly study routine.")


@cli.callback()
def main(ctx: typer.Context):
    # init creates the data directory, so it can't have a workspace yet
    if ctx.invoked_subcommand == "init":
        ctx.obj = None
        return

    try:
        ws = Workspace()
    except FileNotFoundError as e:
        typer.echo(f"{e}\nRun 'rotina init' to create one.", err=True)
        raise typer.Exit(1)
    except (tomllib.TOMLDecodeError, ValueError) as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)
    ctx.obj = ws
    ctx.call_on_close(ws.close)


def find_activity(ws: Workspace, activity_id: int) -> Optional[Activity]:
    for activity in ws.store.read_all():
        if activity.id == activity_id:
            return activity
    return None


def day_label(ws: Workspace, day: str) -> str:
    try:
        return resolve_day_label(ws.today(), day)
    except ValueError as e:
        typer.echo(f"Error resolving day: {e}", err=True)
        raise typer.Exit(1)


def activity_table(day: str, activities: List[Activity]) -> Table:
    table = Table(title=day)
    table.add_column("ID", justify="right")
    table.add_column("Description")
    for activity in activities:
        table.add_row(str(activity.id), activity.description)
    return table


@cli.command()
def init(force: bool = typer.Option(False, "--force", help="Allow init inside a parent rotina directory")):
    """
    cli: rotina init
    Create a .rotina data directory here (or at $ROTINA_DIR).
    """
    try:
        data_dir = FileSystem.initialise(Path.cwd(), force,
                                         config={"log_level": "WARNING", "days": DEFAULT_DAYS})
    except FileExistsError as e:
        typer.echo(f"Data directory {e} Nothing to do.", err=True)
        raise typer.Exit(1)
    except NestedRepoExistsError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    typer.echo(f"Initialised rotina data directory at {data_dir}.")


@cli.command()
def config(ctx: typer.Context):
    """
    cli: rotina config
    Edit the configuration in your preferred editor.
    """
    ws: Workspace = ctx.obj
    if edit_file(ws.fs.CONFIG_PATH):
        typer.echo("Configuration file was updated.")
    else:
        typer.echo("No changes detected.")


@cli.command()
def status(ctx: typer.Context):
    """
    cli: rotina status
    Show where activities are stored and what is planned today.
    """
    ws: Workspace = ctx.obj
    activities = ws.store.read_all()
    today = ws.day_label(ws.today())

    typer.echo(f"Activities file: {ws.store.path}")
    typer.echo(f"rotina version: {rotina.version()}")
    typer.echo(f"Total activities: {len(activities)}")
    typer.echo(f"Planned for today ({today}): {count_by_day(activities).get(today, 0)}")


@cli.command()
def days(ctx: typer.Context):
    """
    cli: rotina days
    List the days of the routine and how many activities each has.
    """
    ws: Workspace = ctx.obj
    with ws.routine.summary() as stream:
        counts = stream.get()

    table = Table()
    table.add_column("Day")
    table.add_column("Activities", justify="right")
    for day in ws.known_days():
        table.add_row(day, str(counts.get(day, 0)))
    Console().print(table)


@cli.command()
def show(ctx: typer.Context, day: str = typer.Argument(..., help="Day label, or today/tomorrow/yesterday")):
    """
    cli: rotina show DAY
    List the activities for a day.
    """
    ws: Workspace = ctx.obj
    label = day_label(ws, day)
    with ws.routine.activities_for_day(label) as stream:
        activities = stream.get()

    if not activities:
        typer.echo(f"No activities for {label}.")
        return
    Console().print(activity_table(label, activities))


@cli.command()
def add(ctx: typer.Context,
        day: str = typer.Argument(..., help="Day label, or today/tomorrow/yesterday/an ISO date"),
        description: str = typer.Argument("", help="What to study")):
    """
    cli: rotina add DAY DESCRIPTION
    Add an activity to a day.
    """
    ws: Workspace = ctx.obj
    label = day_label(ws, day)
    activity = ws.routine.add(label, description).result()

    if activity is None:
        typer.echo(f"Error adding activity for {label}, see the log for details.", err=True)
        raise typer.Exit(1)
    typer.echo(f"Added activity {activity.id} for {activity.day}.")


@cli.command()
def edit(ctx: typer.Context,
         activity_id: int = typer.Argument(..., help="ID of the activity to change"),
         day: Optional[str] = typer.Option(None, "--day", "-d", help="Move the activity to another day"),
         description: Optional[str] = typer.Option(None, "--description", "-m", help="New description")):
    """
    cli: rotina edit ID
    Change the day or description of an activity.
    """
    ws: Workspace = ctx.obj
    activity = find_activity(ws, activity_id)
    if activity is None:
        typer.echo(f"No activity with id {activity_id}.", err=True)
        raise typer.Exit(1)

    changes = {}
    if day is not None:
        changes["day"] = day_label(ws, day)
    if description is not None:
        changes["description"] = description
    if not changes:
        typer.echo("Nothing to change.")
        return

    if not ws.routine.edit(replace(activity, **changes)).result():
        typer.echo(f"Error updating activity {activity_id}, see the log for details.", err=True)
        raise typer.Exit(1)
    typer.echo(f"Updated activity {activity_id}.")


@cli.command()
def rm(ctx: typer.Context, activity_id: int = typer.Argument(..., help="ID of the activity to remove")):
    """
    cli: rotina rm ID
    Remove an activity.
    """
    ws: Workspace = ctx.obj
    activity = find_activity(ws, activity_id)
    if activity is None:
        typer.echo(f"No activity with id {activity_id}.", err=True)
        raise typer.Exit(1)

    if not ws.routine.delete(activity).result():
        typer.echo(f"Error removing activity {activity_id}, see the log for details.", err=True)
        raise typer.Exit(1)
    typer.echo(f"Removed activity {activity_id} from {activity.day}.")


@cli.command()
def summary(ctx: typer.Context):
    """
    cli: rotina summary
    Show how many activities each day has.
    """
    ws: Workspace = ctx.obj
    with ws.routine.summary() as stream:
        counts = stream.get()

    if not counts:
        typer.echo("No activities recorded.")
        return

    table = Table()
    table.add_column("Day")
    table.add_column("Activities", justify="right")
    for day in ws.known_days():
        if day in counts:
            table.add_row(day, str(counts[day]))
    table.add_section()
    table.add_row("TOTAL", str(sum(counts.values())))
    Console().print(table)


@cli.command()
def watch(ctx: typer.Context,
          day: str = typer.Argument(..., help="Day label, or today/tomorrow/yesterday"),
          interval: float = typer.Option(1.0, "--interval", "-i", help="Seconds between checks for changes")):
    """
    cli: rotina watch DAY
    Print the activities for a day every time they change. Ctrl-C to stop.
    """
    ws: Workspace = ctx.obj
    label = day_label(ws, day)
    console = Console()
    stop = threading.Event()

    # Writes from other rotina processes only reach us by re-reading the file
    def poll():
        while not stop.wait(interval):
            ws.store.refresh()

    poller = threading.Thread(target=poll, name="rotina-watch", daemon=True)

    with ws.routine.activities_for_day(label) as stream:
        poller.start()
        try:
            for activities in stream:
                console.print(activity_table(label, activities))
        except KeyboardInterrupt:
            pass
        finally:
            stop.set()
