"""Todo list module for playground."""

from .models import Todo, TodoPriority
from .store import LocalTodoStore, TodoNotFoundError, TodoStore

__all__ = ["Todo", "TodoPriority", "TodoStore", "LocalTodoStore", "TodoNotFoundError"]
