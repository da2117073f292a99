from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import TypeAlias

from todolist.logging_utils import logger
from todolist.todo import TodoItem

Snapshot: TypeAlias = tuple[TodoItem, ...]
Subscriber: TypeAlias = Callable[[Snapshot], None]


class TodoState:
    """
    Owns the ordered list of todos and publishes the whole list after every change.

    Subscribers receive an immutable snapshot, synchronously and in subscription
    order. Nothing is shared at module level: each instance holds its own list.
    """

    def __init__(self, items: Iterable[TodoItem] | None = None) -> None:
        self._items: list[TodoItem] = list(items or [])
        self._subscribers: list[Subscriber] = []

    @property
    def items(self) -> Snapshot:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self.items)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` for snapshots. Returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def find(self, item_id: str) -> TodoItem | None:
        index = self._index_of(item_id)
        return None if index is None else self._items[index]

    def add(self, item: TodoItem) -> TodoItem:
        self._items.append(item)
        logger.debug(f"Added todo: {item.text}")
        self._publish()
        return item

    def toggle(self, item: TodoItem | str) -> TodoItem | None:
        """Flip the completion flag of the tracked item with the same id"""
        index = self._index_of(item)
        toggled = None
        if index is not None:
            toggled = self._items[index].toggled()
            self._items[index] = toggled
            logger.debug(f"Toggled todo: {toggled.text} -> {'done' if toggled.is_done else 'open'}")
        self._publish()
        return toggled

    def delete(self, item: TodoItem | str) -> bool:
        """Remove the tracked item with the same id. Returns whether anything was removed."""
        index = self._index_of(item)
        if index is not None:
            removed = self._items.pop(index)
            logger.debug(f"Deleted todo: {removed.text}")
        self._publish()
        return index is not None

    def clear(self) -> int:
        count = len(self._items)
        self._items.clear()
        logger.debug(f"Cleared {count} todo(s)")
        self._publish()
        return count

    def _index_of(self, item: TodoItem | str) -> int | None:
        item_id = item if isinstance(item, str) else item.id
        for index, todo in enumerate(self._items):
            if todo.id == item_id:
                return index
        return None

    def _publish(self) -> None:
        snapshot = self.items
        # Copy so a subscriber may unsubscribe while being notified
        for callback in list(self._subscribers):
            callback(snapshot)
