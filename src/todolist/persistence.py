from __future__ import annotations

from collections.abc import Callable, Iterable

from pydantic import ValidationError

from todolist.exceptions import CorruptDataError, StoreError
from todolist.logging_utils import logger
from todolist.state import TodoState
from todolist.store import KeyValueStore
from todolist.todo import TodoItem, TodoListAdapter

PREFS_NAMESPACE = "todo_prefs"
TODO_LIST_KEY = "todo_list"


class TodoRepository:
    """
    Round-trips the todo list through a key-value store.

    The list is stored as a JSON array of {"text": str, "isDone": bool} under
    `TODO_LIST_KEY`. Item ids are not persisted, loaded items get fresh ones.
    """

    def __init__(self, store: KeyValueStore, *, strict: bool = False, key: str = TODO_LIST_KEY) -> None:
        self.store = store
        self.strict = strict
        self.key = key

    def load(self) -> list[TodoItem]:
        """
        Read the stored list.

        An absent key is an empty list. Corrupt data is logged and treated as an
        empty list, unless the repository is strict, in which case it raises
        `CorruptDataError`.
        """
        try:
            raw = self.store.get_string(self.key)
        except StoreError as e:
            return self._corrupt(str(e), e)

        if raw is None:
            logger.info(f"No stored todo list under '{self.key}', starting empty.")
            return []

        try:
            items = TodoListAdapter.validate_json(raw)
        except ValidationError as e:
            return self._corrupt(f"{e.error_count()} validation error(s), first: {e.errors()[0]['msg']}", e)

        logger.info(f"Loaded {len(items)} todo(s) from '{self.key}'.")
        return items

    def _corrupt(self, reason: str, error: Exception) -> list[TodoItem]:
        if self.strict:
            raise CorruptDataError(self.key, reason) from error
        logger.warning(f"Ignoring corrupt todo list under '{self.key}' ({reason}), starting empty.")
        return []

    def save(self, items: Iterable[TodoItem]) -> None:
        """Replace the stored list with `items`"""
        items = list(items)
        self.store.put_string(self.key, self.dumps(items))
        logger.info(f"Saved {len(items)} todo(s) to '{self.key}'.")

    def attach(self, state: TodoState) -> Callable[[], None]:
        """Save every snapshot `state` publishes. Returns the unsubscribe function."""
        return state.subscribe(self.save)

    @staticmethod
    def dumps(items: list[TodoItem]) -> str:
        return TodoListAdapter.dump_json(items, by_alias=True).decode()
