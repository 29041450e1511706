"""Per-user todo lists kept in local storage."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from pydantic import ValidationError

from ..config import TODOS_KEY_PREFIX
from ..storage import LocalStorage, read_json
from .models import Todo

logger = logging.getLogger(__name__)


class TodoNotFoundError(LookupError):
    """No todo with the given id exists for the user."""


class TodoStore(ABC):
    """Abstract per-user todo list."""

    @abstractmethod
    async def add_todo(self, todo: Todo) -> Todo:
        """Persist a new todo. Write failures propagate."""

    @abstractmethod
    async def list_todos(self, user_id: str) -> list[Todo]:
        """Return a user's todos, newest first."""

    @abstractmethod
    async def toggle_complete(self, user_id: str, todo_id: str) -> Todo:
        """Flip ``completed`` and bump ``updated_at``.

        Raises:
            TodoNotFoundError: If the user has no such todo
        """

    @abstractmethod
    async def delete_todo(self, user_id: str, todo_id: str) -> None:
        """Delete a todo. No-op when absent."""


class LocalTodoStore(TodoStore):
    """Todo list kept under ``todos:<user_id>``."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    async def add_todo(self, todo: Todo) -> Todo:
        todos = await self.list_todos(todo.user_id)
        await self._write(todo.user_id, [todo, *todos])
        logger.info("Saved todo %s for user %s", todo.id, todo.user_id)
        return todo

    async def list_todos(self, user_id: str) -> list[Todo]:
        data = await read_json(self._storage, self._key(user_id))
        if not isinstance(data, list):
            return []

        todos = []
        for entry in data:
            try:
                todos.append(Todo.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping malformed todo for user %s: %s", user_id, e)
        return todos

    async def toggle_complete(self, user_id: str, todo_id: str) -> Todo:
        todos = await self.list_todos(user_id)
        for index, todo in enumerate(todos):
            if todo.id == todo_id:
                break
        else:
            raise TodoNotFoundError(f"Todo not found: {todo_id}")

        updated = todo.model_copy(update={
            "completed": not todo.completed,
            "updated_at": datetime.now(timezone.utc),
        })
        todos[index] = updated
        await self._write(user_id, todos)
        return updated

    async def delete_todo(self, user_id: str, todo_id: str) -> None:
        todos = await self.list_todos(user_id)
        remaining = [t for t in todos if t.id != todo_id]
        if len(remaining) != len(todos):
            await self._write(user_id, remaining)

    async def _write(self, user_id: str, todos: list[Todo]) -> None:
        payload = json.dumps([t.model_dump(mode="json") for t in todos])
        await self._storage.set_item(self._key(user_id), payload)

    @staticmethod
    def _key(user_id: str) -> str:
        return f"{TODOS_KEY_PREFIX}{user_id}"
