"""Interactive read-eval-print loop over a task list."""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from .errors import TodoTreeError
from .storage import TaskRepository
from .task_store import FlatTaskStore, TaskStore

logger = logging.getLogger(__name__)

HELP_RULE = "-" * 80

# (command, usage, help text, hierarchical only)
COMMANDS: List[Tuple[str, str, str, bool]] = [
    ("add", "add <task>", "add a new task", False),
    ("sub", "sub <task>", "add a new subtask", True),
    ("remove", "remove <index>", "remove a task", False),
    ("done", "done <index>", "mark a task as done", False),
    ("undone", "undone <index>", "mark a task as undone", False),
    ("removeall", "removeall", "remove all tasks", False),
    ("doneall", "doneall", "mark all tasks as done", False),
    ("toggle_index", "toggle_index", "toggle the index display", False),
    ("exit", "exit", "exit the program", False),
    ("help", "help", "show this help", False),
]

FLAT_DESCRIPTION_SEPARATOR = "|"


def parse_index(argument: str) -> int:
    """Turn a command argument into a task index."""
    try:
        return int(argument.strip())
    except ValueError:
        raise ValueError(f"Invalid index: {argument!r}") from None


def split_command(line: str) -> Tuple[str, str]:
    """Split an input line into its verb and the rest, whitespace-normalized."""
    words = line.split()
    if not words:
        return "", ""
    return words[0], " ".join(words[1:])


class TaskShell:
    """
    Command loop for one session.

    The task list is loaded once, changed by each command, and written back
    after every command that changes it. A failed save is reported and the
    session goes on with the in-memory list.
    """

    def __init__(
        self,
        repository: TaskRepository,
        flat: bool = False,
        show_index: bool = True,
        console: Optional[Console] = None,
    ):
        self.repository = repository
        self.flat = flat
        self.show_index = show_index
        self.console = console or Console()
        self.running = True

        tasks = repository.load()
        self.store = FlatTaskStore(tasks) if flat else TaskStore(tasks)

        self._handlers: Dict[str, Callable[[str], None]] = {
            "add": self._add,
            "remove": self._remove,
            "done": self._done,
            "undone": self._undone,
            "doneall": self._done_all,
            "removeall": self._remove_all,
            "toggle_index": self._toggle_index,
            "help": self._help,
            "exit": self._exit,
        }
        if not flat:
            self._handlers["sub"] = self._sub

    # ---- loop ----

    def run(self, read_line: Optional[Callable[[], str]] = None) -> None:
        """Render, read and dispatch until ``exit`` or end of input."""
        read_line = read_line or (lambda: self.console.input("> "))
        logger.info(f"Shell started ({'flat' if self.flat else 'hierarchical'} list)")

        while self.running:
            self.render()
            try:
                line = read_line()
            except EOFError:
                logger.info("End of input, exiting")
                break
            except KeyboardInterrupt:
                logger.info("Interrupted, exiting")
                self.console.print()
                break
            self.handle(line)

        logger.info("Shell finished")

    def handle(self, line: str) -> None:
        """Run one command line."""
        verb, argument = split_command(line)
        if not verb:
            return
        if not self.flat:
            verb = verb.lower()

        handler = self._handlers.get(verb)
        if handler is None:
            self.console.print("Unknown command")
            return

        try:
            handler(argument)
        except (TodoTreeError, ValueError) as e:
            logger.debug(f"Command {verb!r} failed: {e}")
            self.console.print(f"[red]{escape(str(e))}[/red]")

    def render(self) -> None:
        """Print the current task list."""
        self.console.print("Here are all the items:")
        for index, task in enumerate(self.store):
            text = f"{index} {task}" if self.show_index else str(task)
            style = "green" if task.is_completed else None
            self.console.print(Text(text, style=style or ""))

    def help_text(self) -> str:
        lines = [HELP_RULE]
        for _, usage, description, hierarchical_only in COMMANDS:
            if hierarchical_only and self.flat:
                continue
            lines.append(f"{usage} - {description}")
        lines.append(HELP_RULE)
        return "\n".join(lines)

    def _save(self) -> None:
        if not self.repository.save(list(self.store)):
            self.console.print("[yellow]Could not save tasks; changes are kept in memory only[/yellow]")

    # ---- commands ----

    def _add(self, argument: str) -> None:
        if self.flat:
            name, _, description = argument.partition(FLAT_DESCRIPTION_SEPARATOR)
            self.store.add(name.strip(), description.strip())
        else:
            self.store.add_main(argument)
        self._save()

    def _sub(self, argument: str) -> None:
        self.store.add_sub(argument)
        self._save()

    def _remove(self, argument: str) -> None:
        self.store.remove(parse_index(argument))
        self._save()

    def _done(self, argument: str) -> None:
        self.store.toggle_done(parse_index(argument))
        self._save()

    def _undone(self, argument: str) -> None:
        self.store.toggle_undone(parse_index(argument))
        self._save()

    def _done_all(self, argument: str) -> None:
        self.store.complete_all()
        self._save()

    def _remove_all(self, argument: str) -> None:
        self.store.clear_all()
        self._save()

    def _toggle_index(self, argument: str) -> None:
        self.show_index = not self.show_index

    def _help(self, argument: str) -> None:
        self.console.print(self.help_text(), markup=False, highlight=False)

    def _exit(self, argument: str) -> None:
        self.console.print("Goodbye!")
        self.running = False
