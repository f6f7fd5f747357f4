from typing import Any

import pytest
from conftest import ScriptedConsole

import ideaflow.cli.chat as chat_cli
from ideaflow.core.session import TurnOutcome


class _StubController:
    def __init__(self, outcomes: list[TurnOutcome]) -> None:
        self.outcomes = outcomes
        self.questions: list[str] = []

    def handle_question(self, raw: str) -> TurnOutcome:
        self.questions.append(raw)
        return self.outcomes.pop(0)


def test_run_exits_on_command() -> None:
    console = ScriptedConsole(["What app should I build?", "Exit"])
    controller = _StubController([TurnOutcome.COMPLETED])

    status = chat_cli.run(console, controller)  # type: ignore[arg-type]

    assert status == 0
    assert controller.questions == ["What app should I build?"]
    assert "Ask another question" in console.text()
    assert "Goodbye" in console.text()


def test_run_skips_next_steps_after_failure() -> None:
    console = ScriptedConsole(["q", "exit"])
    controller = _StubController([TurnOutcome.FAILED])
    chat_cli.run(console, controller)  # type: ignore[arg-type]
    assert "Ask another question" not in console.text()


def test_run_stops_when_round_exits() -> None:
    console = ScriptedConsole(["q", "never read"])
    controller = _StubController([TurnOutcome.EXIT])
    assert chat_cli.run(console, controller) == 0  # type: ignore[arg-type]
    assert console.answers[0] == "never read"


def test_run_ends_on_eof() -> None:
    console = ScriptedConsole([])
    assert chat_cli.run(console, _StubController([])) == 0  # type: ignore[arg-type]


def test_welcome_lists_commands() -> None:
    console = ScriptedConsole()
    chat_cli.display_welcome(console)  # type: ignore[arg-type]
    text = console.text()
    for command in ('"back"', '"retry"', '"exit"'):
        assert command in text


def test_main_exits_nonzero_on_startup_failure(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def fail(*args: Any, **kwargs: Any) -> None:
        raise ValueError("No API key configured.")

    monkeypatch.setattr(chat_cli, "setup_logging", lambda: "log")
    monkeypatch.setattr(chat_cli, "build_conversation", fail)

    with pytest.raises(SystemExit) as exc:
        chat_cli.main()
    assert exc.value.code == 1


def test_main_runs_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(chat_cli, "setup_logging", lambda: "log")
    monkeypatch.setattr(chat_cli, "build_conversation", lambda *a: object())
    monkeypatch.setattr(chat_cli, "build_session", lambda *a, **k: "controller")
    monkeypatch.setattr(chat_cli, "display_welcome", lambda c: calls.append("welcome"))

    def fake_run(console: Any, controller: Any) -> int:
        calls.append(f"run:{controller}")
        return 0

    monkeypatch.setattr(chat_cli, "run", fake_run)

    with pytest.raises(SystemExit) as exc:
        chat_cli.main()
    assert exc.value.code == 0
    assert calls == ["welcome", "run:controller"]


def test_rich_console_show_and_ask(monkeypatch: pytest.MonkeyPatch) -> None:
    from rich.console import Console

    rich_console = Console(record=True, width=80)
    console = chat_cli.RichConsole(rich_console)
    monkeypatch.setattr("builtins.input", lambda: "1 2")

    console.show("[not markup]", "error")
    assert console.ask("Your selection: ") == "1 2"
    exported = rich_console.export_text()
    assert "[not markup]" in exported
    assert "Your selection: " in exported
