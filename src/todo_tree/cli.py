"""Command-line interface for the task list."""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .config import Settings, get_settings
from .errors import TodoTreeError
from .logging_setup import setup_logging
from .shell import TaskShell
from .storage import FileTaskRepository, open_repository
from .task_store import FlatTaskStore, TaskStore

app = typer.Typer(help="Todo Tree - task list with one level of sub-tasks")
console = Console()
logger = logging.getLogger(__name__)

FILE_HELP = "Task file path"
FLAT_HELP = "Use the flat task list (name, description, completed)"
# Let "-1" reach the store as an index instead of being read as an option.
INDEX_CONTEXT = {"ignore_unknown_options": True}


def load_settings() -> Settings:
    """Get settings from the environment, exiting on bad values."""
    try:
        return get_settings()
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def open_store(
    task_file: Optional[Path], flat: Optional[bool] = None
) -> Tuple[FileTaskRepository, Union[TaskStore, FlatTaskStore]]:
    """Load the task list from ``task_file`` or the configured file."""
    settings = load_settings()
    path = task_file or settings.task_file
    use_flat = settings.flat if flat is None else flat

    repository = open_repository(path, flat=use_flat)
    try:
        tasks = repository.load()
    except TodoTreeError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    store = FlatTaskStore(tasks) if use_flat else TaskStore(tasks)
    return repository, store


def open_task_store(task_file: Optional[Path]) -> Tuple[FileTaskRepository, TaskStore]:
    """Load the task file as a hierarchical list, whatever the configured variant."""
    return open_store(task_file, flat=False)


def save_store(repository: FileTaskRepository, store) -> None:
    if not repository.save(list(store)):
        console.print(f"[red]Error: could not write {repository.path}[/red]")
        raise typer.Exit(1)


def run_mutation(task_file: Optional[Path], action, message: str) -> None:
    """Load, apply ``action`` to the store, save, and report."""
    repository, store = open_task_store(task_file)
    try:
        action(store)
    except (TodoTreeError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    save_store(repository, store)
    logger.info(f"{message} ({repository.path})")
    console.print(f"[green]{escape(message)}[/green]")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, ...)"),
):
    """Configure logging before any command runs."""
    settings = load_settings()
    setup_logging(log_level or settings.log_level)


@app.command()
def shell(
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
    flat: Optional[bool] = typer.Option(None, "--flat/--hierarchical", help=FLAT_HELP),
    show_index: Optional[bool] = typer.Option(
        None, "--show-index/--hide-index", help="Show task indices in the list"
    ),
):
    """Start the interactive task shell."""
    settings = load_settings()
    path = task_file or settings.task_file
    use_flat = settings.flat if flat is None else flat

    try:
        task_shell = TaskShell(
            open_repository(path, flat=use_flat),
            flat=use_flat,
            show_index=settings.show_index if show_index is None else show_index,
            console=console,
        )
    except TodoTreeError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    task_shell.run()


@app.command("list")
def list_tasks(
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
    flat: Optional[bool] = typer.Option(None, "--flat/--hierarchical", help=FLAT_HELP),
):
    """List tasks in a table."""
    _, store = open_store(task_file, flat)

    if not len(store):
        console.print("[yellow]No tasks found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Task", style="bold")
    table.add_column("Status", justify="center")

    if isinstance(store, TaskStore):
        table.add_column("Parent", justify="right")
        for index, task in enumerate(store):
            name = f"  {task.name}" if task.is_sub else task.name
            table.add_row(
                str(index),
                Text(name),
                format_status(task.is_completed),
                "" if task.parent is None else str(task.parent),
            )
    else:
        table.add_column("Description")
        for index, task in enumerate(store):
            table.add_row(str(index), Text(task.name), format_status(task.completed), Text(task.description))

    console.print(table)


def format_status(completed: bool) -> Text:
    """Format completion with colors."""
    if completed:
        return Text("DONE", style="green")
    return Text("PENDING", style="yellow")


@app.command()
def tree(
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Show main tasks with their sub-tasks."""
    _, store = open_task_store(task_file)

    roots = store.main_tasks()
    if not roots:
        console.print("[yellow]No tasks found[/yellow]")
        return

    for i, index in enumerate(roots):
        if i > 0:
            console.print()
        task = store[index]
        root = Tree(Text(f"{index} {task}", style="green" if task.is_completed else ""))
        for child_index, child in enumerate(store):
            if child.is_child_of(index):
                root.add(Text(f"{child_index} {child.label()}", style="green" if child.is_completed else ""))
        console.print(root)


@app.command()
def stats(
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
    flat: Optional[bool] = typer.Option(None, "--flat/--hierarchical", help=FLAT_HELP),
):
    """Show task statistics."""
    _, store = open_store(task_file, flat)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="bold")
    table.add_column("Count", justify="right")

    for key, value in store.stats().items():
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)


@app.command()
def add(
    name: str = typer.Argument(..., help="Task name"),
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Add a main task."""
    run_mutation(task_file, lambda store: store.add_main(name), f"Added task: {name}")


@app.command()
def sub(
    name: str = typer.Argument(..., help="Sub-task name"),
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Add a sub-task under the most recent main task."""
    run_mutation(task_file, lambda store: store.add_sub(name), f"Added sub-task: {name}")


@app.command(context_settings=INDEX_CONTEXT)
def done(
    index: int = typer.Argument(..., help="Task index"),
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Mark a task (and its sub-tasks) as done."""
    run_mutation(task_file, lambda store: store.toggle_done(index), f"Completed task {index}")


@app.command(context_settings=INDEX_CONTEXT)
def undone(
    index: int = typer.Argument(..., help="Task index"),
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Mark a task as not done."""
    run_mutation(task_file, lambda store: store.toggle_undone(index), f"Reopened task {index}")


@app.command(context_settings=INDEX_CONTEXT)
def remove(
    index: int = typer.Argument(..., help="Task index"),
    task_file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Remove a task together with its sub-tasks."""
    run_mutation(task_file, lambda store: store.remove(index), f"Removed task {index}")


if __name__ == "__main__":
    app()
