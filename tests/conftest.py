from collections import deque
from typing import Iterable

import pytest

from ideaflow.core.errors import ProviderError


class ScriptedConversation:
    """
    Conversation handle replaying canned replies or raising canned errors.
    """

    def __init__(self, replies: Iterable[str | ProviderError]) -> None:
        """
        Initialize the ScriptedConversation.

        Args:
            replies (Iterable[str | ProviderError]): Replies in call order; errors are raised.
        """
        self.replies = deque(replies)
        self.sent: list[str] = []

    def send_message(self, text: str) -> str:
        self.sent.append(text)
        reply = self.replies.popleft()
        if isinstance(reply, ProviderError):
            raise reply
        return reply


class ScriptedConsole:
    """
    Console feeding scripted answers and recording everything shown.
    """

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self.answers = deque(answers)
        self.prompts: list[str] = []
        self.shown: list[tuple[str, str]] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.popleft()

    def show(self, message: str, style: str = "info") -> None:
        self.shown.append((message, style))

    def text(self) -> str:
        return "\n".join(message for message, _ in self.shown)


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()
