import json

import pytest
from click.testing import CliRunner

from todolist.app import Settings, TodoApp, cli
from todolist.persistence import TodoRepository
from todolist.store import InMemoryStore
from todolist.todo import TodoItem


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TODO_STRICT_LOAD", raising=False)
    monkeypatch.delenv("TODO_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _stored(data_dir) -> list[dict]:
    prefs = json.loads((data_dir / "todo_prefs.json").read_text(encoding="utf-8"))
    return json.loads(prefs["todo_list"])


def test_settings_from_environment(data_dir, monkeypatch) -> None:
    monkeypatch.setenv("TODO_STRICT_LOAD", "true")
    monkeypatch.setenv("TODO_LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.data_dir == data_dir
    assert settings.strict_load is True
    assert settings.log_level == "debug"


def test_app_loads_and_saves_on_change() -> None:
    store = InMemoryStore()
    TodoRepository(store).save([TodoItem(text="a")])

    app = TodoApp(TodoRepository(store))
    assert [item.text for item in app.state] == ["a"]

    app.state.add(TodoItem(text="b"))
    assert [item.text for item in TodoRepository(store).load()] == ["a", "b"]

    app.close()
    app.state.clear()
    assert len(TodoRepository(store).load()) == 2


def test_app_at_uses_one_based_positions() -> None:
    app = TodoApp(TodoRepository(InMemoryStore()))
    app.state.add(TodoItem(text="a"))

    assert app.at(1).text == "a"
    with pytest.raises(IndexError):
        app.at(0)
    with pytest.raises(IndexError):
        app.at(2)


def test_list_empty(runner, data_dir) -> None:
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 0, result.output
    assert result.output == "No todos.\n"


def test_add_toggle_delete_persist_between_runs(runner, data_dir) -> None:
    assert runner.invoke(cli, ["add", "buy milk"]).exit_code == 0
    assert runner.invoke(cli, ["add", "walk dog"]).exit_code == 0

    result = runner.invoke(cli, ["toggle", "1"])
    assert result.exit_code == 0, result.output
    assert result.output == "Completed: buy milk\n"
    assert _stored(data_dir) == [{"text": "buy milk", "isDone": True}, {"text": "walk dog", "isDone": False}]

    result = runner.invoke(cli, ["list"])
    assert result.output == "1. ✓ buy milk\n2. ○ walk dog\n"

    result = runner.invoke(cli, ["delete", "2"])
    assert result.exit_code == 0, result.output
    assert result.output == "Deleted: walk dog\n"
    assert _stored(data_dir) == [{"text": "buy milk", "isDone": True}]


def test_toggle_out_of_range_is_usage_error(runner, data_dir) -> None:
    result = runner.invoke(cli, ["toggle", "3"])
    assert result.exit_code == 2
    assert "No todo at position 3" in result.output


def test_clear(runner, data_dir) -> None:
    runner.invoke(cli, ["add", "a"])
    runner.invoke(cli, ["add", "b"])

    result = runner.invoke(cli, ["clear"])

    assert result.output == "Deleted 2 todo(s).\n"
    assert _stored(data_dir) == []


def test_corrupt_store_starts_empty(runner, data_dir) -> None:
    (data_dir / "todo_prefs.json").write_text(json.dumps({"todo_list": "{oops"}), encoding="utf-8")

    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 0, result.output
    assert "No todos." in result.output


def test_corrupt_store_fails_when_strict(runner, data_dir, monkeypatch) -> None:
    monkeypatch.setenv("TODO_STRICT_LOAD", "1")
    (data_dir / "todo_prefs.json").write_text(json.dumps({"todo_list": "{oops"}), encoding="utf-8")

    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 1
    assert "is not a valid todo list" in result.output


def test_unknown_log_level_is_usage_error(runner, data_dir, monkeypatch) -> None:
    monkeypatch.setenv("TODO_LOG_LEVEL", "loud")

    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 2
    assert "Invalid settings" in result.output


@pytest.mark.parametrize(
    "contents",
    ['{"todo_list": "[{\\"text\\": ', json.dumps({"todo_list": [{"text": "a", "isDone": False}]})],
    ids=["truncated", "non-string-value"],
)
def test_unreadable_preferences_start_empty_and_are_replaced(runner, data_dir, contents) -> None:
    (data_dir / "todo_prefs.json").write_text(contents, encoding="utf-8")

    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 0, result.output
    assert "No todos." in result.output

    result = runner.invoke(cli, ["add", "buy milk"])
    assert result.exit_code == 0, result.output
    assert _stored(data_dir) == [{"text": "buy milk", "isDone": False}]


def test_failed_save_is_reported(runner, tmp_path, monkeypatch) -> None:
    blocker = tmp_path / "data"
    blocker.write_text("not a directory", encoding="utf-8")
    monkeypatch.setenv("TODO_DATA_DIR", str(blocker))
    monkeypatch.delenv("TODO_STRICT_LOAD", raising=False)
    monkeypatch.delenv("TODO_LOG_LEVEL", raising=False)

    result = runner.invoke(cli, ["add", "buy milk"])

    assert result.exit_code == 1
    assert "Could not write preferences" in result.output
