"""Storage layer for Todoster using a markdown file with YAML frontmatter.

The task records live in the frontmatter under ``items``, in list order. The
markdown body is a checklist rendered for people reading the file; it is
rewritten on every save and ignored on load.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import frontmatter
import yaml

from .recurring import auto_reset_repeating
from .todo import Todo

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the todo file cannot be read, parsed or written."""

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(message)


@dataclass
class TodoList:
    """Ordered list of todos; positions are the indexes users type."""

    items: List[Todo] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def add(self, text: str, repeat_days: Optional[int] = None) -> Todo:
        todo = Todo(text=text, repeat_days=repeat_days)
        self.items.append(todo)
        return todo

    def get(self, index: int) -> Optional[Todo]:
        """Return the todo at ``index``, or None when out of range."""
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def remove(self, index: int) -> Todo:
        return self.items.pop(index)

    def auto_reset_repeating(self, now: datetime, zone=None) -> int:
        return auto_reset_repeating(self.items, now, zone)


class TodoMarkdownFormat:
    """Handles conversion between a TodoList and the markdown file format."""

    @staticmethod
    def to_markdown(todo_list: TodoList) -> str:
        content_lines = ["# Todoster", ""]
        for idx, todo in enumerate(todo_list.items):
            checkbox = "- [x]" if todo.complete else "- [ ]"
            line = f"{checkbox} {todo.text}"
            if todo.repeat_days is not None:
                line += f" (repeat: {todo.repeat_days}d)"
            content_lines.append(f"{line} <!-- index:{idx} -->")
        if not todo_list.items:
            content_lines.append("_No tasks._")

        post = frontmatter.Post(
            "\n".join(content_lines),
            items=[todo.to_dict() for todo in todo_list.items],
        )
        return frontmatter.dumps(post, sort_keys=False) + "\n"

    @staticmethod
    def from_markdown(content: str) -> TodoList:
        """Parse file content back into a TodoList.

        Raises:
            yaml.YAMLError: If the frontmatter is not valid YAML
            ValueError: If the records do not describe valid todos
        """
        if not content.strip():
            return TodoList()

        post = frontmatter.loads(content)
        raw_items = post.metadata.get("items")
        if raw_items is None:
            # A non-empty file must carry its tasks in the frontmatter
            raise ValueError("no 'items' list in the frontmatter")
        if not isinstance(raw_items, list):
            raise ValueError("'items' must be a list of task records")

        items = []
        for position, raw in enumerate(raw_items):
            try:
                items.append(Todo.from_dict(raw))
            except ValueError as e:
                raise ValueError(f"Invalid task record at index {position}: {e}") from e
        return TodoList(items=items)


class Storage:
    """File-based storage for a single todo list."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> TodoList:
        """Load the todo list, or an empty one if the file does not exist yet."""
        if not self.path.exists():
            logger.debug("No todo file at %s, starting empty", self.path)
            return TodoList()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read file: {self.path}: {e}", self.path) from e

        try:
            todo_list = TodoMarkdownFormat.from_markdown(content)
        except (yaml.YAMLError, ValueError) as e:
            raise StorageError(f"Failed to parse todo data in {self.path}: {e}", self.path) from e

        logger.debug("Loaded %d task(s) from %s", len(todo_list), self.path)
        return todo_list

    def save(self, todo_list: TodoList) -> None:
        """Write the todo list, creating the parent directory if needed."""
        content = TodoMarkdownFormat.to_markdown(todo_list)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create directory: {self.path.parent}: {e}", self.path
            ) from e

        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to write file: {self.path}: {e}", self.path) from e

        logger.debug("Saved %d task(s) to %s", len(todo_list), self.path)
