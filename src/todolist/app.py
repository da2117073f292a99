from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings.main import SettingsConfigDict

from todolist.exceptions import TodoError
from todolist.logging_utils import logger, parse_level, set_level
from todolist.persistence import PREFS_NAMESPACE, TodoRepository
from todolist.state import TodoState
from todolist.store import FilePreferences
from todolist.todo import TodoItem, render_todos


class Settings(BaseSettings):
    data_dir: Path = Path("~/.todolist")

    # Raise on a corrupt stored list instead of starting with an empty one
    strict_load: bool = False

    log_level: str = "warning"

    model_config = SettingsConfigDict(env_prefix="TODO_", env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, log_level: str) -> str:
        parse_level(log_level)
        return log_level.lower()


class TodoApp:
    """Loads the stored list once and saves it again after every change"""

    def __init__(self, repository: TodoRepository) -> None:
        self.repository = repository
        self.state = TodoState(repository.load())
        self._detach = repository.attach(self.state)

    @classmethod
    def from_settings(cls, settings: Settings) -> TodoApp:
        store = FilePreferences(settings.data_dir, PREFS_NAMESPACE)
        return cls(TodoRepository(store, strict=settings.strict_load))

    def close(self) -> None:
        self._detach()

    def at(self, position: int) -> TodoItem:
        """The item at a 1-based position, as shown by `render_todos`"""
        items = self.state.items
        if not 1 <= position <= len(items):
            raise IndexError(f"No todo at position {position}, there are {len(items)}.")
        return items[position - 1]


pass_app = click.make_pass_decorator(TodoApp)


def _item_at(app: TodoApp, position: int) -> TodoItem:
    try:
        return app.at(position)
    except IndexError as e:
        raise click.BadParameter(str(e), param_hint="POSITION") from None


class TodoGroup(click.Group):
    """Reports package errors, including ones raised while saving, as click errors"""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except TodoError as e:
            raise click.ClickException(str(e)) from e


@click.group(
    cls=TodoGroup,
    help="Keep a to-do list.\n\nThe list is stored in $TODO_DATA_DIR (default ~/.todolist).",
    no_args_is_help=True,
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    Usage:
        uv run todo add "buy milk"
        uv run todo list

        TODO_LOG_LEVEL=debug uv run todo list # Enable debug logging
    """
    try:
        settings = Settings()
    except ValidationError as e:
        raise click.UsageError(f"Invalid settings: {e}") from e

    set_level(parse_level(settings.log_level), logger=logger)
    ctx.obj = TodoApp.from_settings(settings)
    ctx.call_on_close(ctx.obj.close)


@cli.command("add")
@click.argument("text")
@pass_app
def add_command(app: TodoApp, text: str) -> None:
    """Add a todo to the end of the list"""
    app.state.add(TodoItem(text=text))
    click.echo(f"Added: {text}")


@cli.command("list")
@pass_app
def list_command(app: TodoApp) -> None:
    """Show all todos with their status"""
    click.echo(render_todos(app.state.items))


@cli.command("toggle")
@click.argument("position", type=int)
@pass_app
def toggle_command(app: TodoApp, position: int) -> None:
    """Mark the todo at POSITION done, or open again"""
    toggled = app.state.toggle(_item_at(app, position))
    assert toggled is not None
    click.echo(f"{'Completed' if toggled.is_done else 'Reopened'}: {toggled.text}")


@cli.command("delete")
@click.argument("position", type=int)
@pass_app
def delete_command(app: TodoApp, position: int) -> None:
    """Delete the todo at POSITION"""
    item = _item_at(app, position)
    app.state.delete(item)
    click.echo(f"Deleted: {item.text}")


@cli.command("clear")
@pass_app
def clear_command(app: TodoApp) -> None:
    """Delete every todo"""
    count = app.state.clear()
    click.echo(f"Deleted {count} todo(s).")


if __name__ == "__main__":
    cli()
