from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter


def _new_id() -> str:
    return uuid4().hex


class TodoItem(BaseModel):
    """A single to-do entry.

    Items are immutable. `id` is a surrogate generated per process: it is never
    written to storage nor read back from it, so state changes locate their
    target by id rather than by value or object identity.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str
    is_done: bool = Field(default=False, alias="isDone")

    _id: str = PrivateAttr(default_factory=_new_id)

    @property
    def id(self) -> str:
        return self._id

    def toggled(self) -> TodoItem:
        """Copy of this item with the completion flag flipped, keeping its id"""
        return self.model_copy(update={"is_done": not self.is_done})


# Serialized form of a whole list: a JSON array of {"text": ..., "isDone": ...}
TodoListAdapter = TypeAdapter(list[TodoItem])


def render_todos(todos: list[TodoItem] | tuple[TodoItem, ...]) -> str:
    """List all todos with their status"""
    if not todos:
        return "No todos."

    lines = []
    for i, todo in enumerate(todos, 1):
        status = "✓" if todo.is_done else "○"
        lines.append(f"{i}. {status} {todo.text}")
    return "\n".join(lines)
