class TodoError(Exception):
    """Base class for errors raised by the todolist package"""


class StoreError(TodoError):
    """A preference namespace could not be read or written"""


class CorruptDataError(TodoError):
    """The persisted list is not a valid JSON array of items"""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Stored value under '{key}' is not a valid todo list: {reason}")
        self.key = key
        self.reason = reason
