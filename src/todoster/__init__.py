"""Todoster - a small command-line todo list with repeating tasks."""

__version__ = "0.1.0"
__author__ = "Todoster Team"

from .todo import Todo
from .storage import Storage, StorageError, TodoList

__all__ = ["Todo", "TodoList", "Storage", "StorageError", "__version__"]
