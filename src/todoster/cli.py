"""Command-line interface for Todoster."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_config, load_config, resolve_todo_path
from .parser import parse_index_list, completion_order, deletion_order
from .recurring import describe_repeat
from .storage import Storage, StorageError, TodoList
from .utils.datetime import now_local

logger = logging.getLogger(__name__)

COMMAND_TABLE = [
    ("todo", "List tasks (default)"),
    ("todo list", "List tasks"),
    ('todo add "<text>"', "Add a new task"),
    ('todo add "<text>" --repeat <days>', "Add repeating task"),
    ("todo complete <i1,i2,1-4>", "Mark task(s) complete (supports ranges)"),
    ("todo undo <index>", "Mark a task incomplete again"),
    ('todo edit <index> --text "<new>"', "Edit task text"),
    ("todo edit <index> --repeat <days>", "Change repeat interval"),
    ("todo edit <index> --clear-repeat", "Remove repeat interval"),
    ("todo delete <i1,i2,i3>", "Delete multiple tasks (by index)"),
    ("todo delete 1-4,7", "Supports ranges (inclusive)"),
    ("todo delete 0,2-3,7", "Dry-run (shows what would be deleted)"),
    ("todo delete 0,2-3,7 --confirm", "Actually perform deletion"),
    ("todo --file <path> <command>", "Use a custom todo file"),
]


class AppState:
    """Per-invocation state shared by all commands."""

    def __init__(self, storage: Storage, todo_list: TodoList, now, console: Console,
                 err_console: Console, show_completed: bool = True):
        self.storage = storage
        self.todo_list = todo_list
        self.now = now
        self.console = console
        self.err_console = err_console
        self.show_completed = show_completed

    def save(self) -> None:
        try:
            self.storage.save(self.todo_list)
        except StorageError as e:
            self.err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            sys.exit(1)

    def warn(self, message: str) -> None:
        self.err_console.print(f"[yellow]{escape(message)}[/yellow]")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _task_line(index: int, text: str, suffix: str = "") -> str:
    line = f"[{index}] {text}"
    if suffix:
        line += f" ({suffix})"
    return line


@click.group(invoke_without_command=True)
@click.option("--file", "-f", "file_path", type=click.Path(dir_okay=False),
              help="Path to the todo file (default: ~/.config/todoster/todos.md)")
@click.option("--config", "config_path", type=click.Path(dir_okay=False),
              help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, file_path, config_path, verbose):
    """Todoster - a todo list with repeating tasks."""
    _setup_logging(verbose)

    if config_path:
        config = load_config(Path(config_path))
    else:
        config = get_config()

    console = Console(no_color=config.no_color, highlight=False, emoji=False)
    err_console = Console(stderr=True, no_color=config.no_color, highlight=False, emoji=False)

    storage = Storage(resolve_todo_path(file_path, config))
    logger.debug("Using todo file %s", storage.path)
    now = now_local()

    try:
        todo_list = storage.load()
    except StorageError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    # Stale completions must be cleared before any command looks at the list
    todo_list.auto_reset_repeating(now)

    ctx.obj = AppState(storage, todo_list, now, console, err_console,
                       show_completed=config.show_completed)

    if ctx.invoked_subcommand is None:
        ctx.invoke(list_tasks)


@main.command("list")
@click.pass_obj
def list_tasks(state: AppState):
    """List all tasks (incomplete first, then complete)."""
    console = state.console
    incomplete = []
    complete = []
    for idx, todo in enumerate(state.todo_list.items):
        (complete if todo.complete else incomplete).append((idx, todo))

    console.print("[bold cyan]=== Incomplete tasks ===[/bold cyan]")
    if not incomplete:
        console.print("[dim](none)[/dim]")
    for idx, todo in incomplete:
        suffix = f"Repeat: {todo.repeat_days}d" if todo.repeat_days is not None else ""
        console.print(escape(_task_line(idx, todo.text, suffix)), soft_wrap=True)

    if not state.show_completed:
        return

    console.print()
    console.print("[bold green]=== Complete tasks ===[/bold green]")
    if not complete:
        console.print("[dim](none)[/dim]")
    for idx, todo in complete:
        suffix = describe_repeat(todo, state.now)
        console.print(escape(_task_line(idx, todo.text, suffix)), soft_wrap=True)


@main.command()
@click.argument("text")
@click.option("--repeat", "-r", type=click.IntRange(min=0), help="Repeat interval in days")
@click.pass_obj
def add(state: AppState, text, repeat):
    """Add a new task."""
    state.todo_list.add(text, repeat)
    state.save()
    state.console.print("[green]Task added.[/green]")


@main.command()
@click.argument("indexes")
@click.pass_obj
def complete(state: AppState, indexes):
    """Mark tasks complete by index spec, e.g. "0,2,5-7"."""
    targets = parse_index_list(indexes)
    if not targets:
        state.warn("No valid indexes supplied.")
        return

    completed_any = False
    for idx in completion_order(targets):
        todo = state.todo_list.get(idx)
        if todo is None:
            state.warn(f"No task with index {idx}, skipping.")
            continue
        todo.mark_complete(state.now)
        state.console.print(escape(f"Marked complete [{idx}] {todo.text}"), soft_wrap=True)
        completed_any = True

    if completed_any:
        state.save()


@main.command()
@click.argument("index", type=click.IntRange(min=0))
@click.pass_obj
def undo(state: AppState, index):
    """Mark a task incomplete again."""
    todo = state.todo_list.get(index)
    if todo is None:
        state.warn(f"No task with index {index}")
        return
    todo.mark_incomplete()
    state.save()
    state.console.print(f"Task {index} marked incomplete.")


@main.command()
@click.argument("index", type=click.IntRange(min=0))
@click.option("--text", "new_text", help="New text for the task")
@click.option("--repeat", type=click.IntRange(min=0), help="New repeat interval in days")
@click.option("--clear-repeat", is_flag=True, help="Clear the repeat interval")
@click.pass_obj
def edit(state: AppState, index, new_text, repeat, clear_repeat):
    """Edit an existing task."""
    todo = state.todo_list.get(index)
    if todo is None:
        state.warn(f"No task with index {index}")
        return

    if new_text is not None:
        todo.text = new_text

    if clear_repeat:
        todo.repeat_days = None
    elif repeat is not None:
        todo.repeat_days = repeat

    state.save()
    state.console.print(f"Task {index} updated.")


@main.command()
@click.argument("indexes")
@click.option("--confirm", is_flag=True,
              help="Actually perform deletion (otherwise just show what would be deleted)")
@click.pass_obj
def delete(state: AppState, indexes, confirm):
    """Delete tasks by index spec, e.g. "0,2,5-7"."""
    targets = parse_index_list(indexes)
    if not targets:
        state.warn("No valid indexes supplied.")
        return

    ordered = deletion_order(targets)

    if not confirm:
        state.console.print(
            "The following tasks would be deleted (run again with --confirm to proceed):\n"
        )
        for idx in ordered:
            todo = state.todo_list.get(idx)
            text = todo.text if todo is not None else "(does not exist)"
            state.console.print(escape(f"[{idx}] {text}"), soft_wrap=True)
        state.console.print("\nNothing deleted. Add --confirm to actually delete.")
        return

    for idx in ordered:
        if state.todo_list.get(idx) is None:
            state.warn(f"Index {idx} does not exist, skipping.")
            continue
        removed = state.todo_list.remove(idx)
        state.console.print(escape(f"Deleted [{idx}] {removed.text}"), soft_wrap=True)

    state.save()


@main.command()
@click.pass_obj
def commands(state: AppState):
    """Show a table of available commands."""
    table = Table(title="Todoster Commands", show_header=True, header_style="bold")
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Description")
    for usage, description in COMMAND_TABLE:
        table.add_row(escape(usage), description)
    state.console.print(table)
    state.console.print("\nIndexes are 0-based (first item = 0).")


if __name__ == "__main__":
    main()
