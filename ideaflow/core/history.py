from dataclasses import dataclass, field
from datetime import datetime, timezone

from loguru import logger


@dataclass
class Turn:
    """
    One question with the ideas produced for it and the user's pick.
    """

    question: str
    ideas: list[str] | None = None
    selection: list[int] | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConversationHistory:
    """
    Linear, navigable log of turns with a cursor on the active one.

    Asking a new question while the cursor is behind the tail drops every turn
    after the cursor; branches are not kept.
    """

    def __init__(self) -> None:
        self._turns: list[Turn] = []
        self._cursor: int = -1

    def __len__(self) -> int:
        return len(self._turns)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def add_question(self, question: str) -> Turn:
        """
        Record a new question as the active turn.

        Args:
            question (str): The question text.

        Returns:
            Turn: The newly appended turn.
        """
        if self._cursor < len(self._turns) - 1:
            dropped = len(self._turns) - self._cursor - 1
            del self._turns[self._cursor + 1 :]
            logger.debug("Discarded {} turn(s) after cursor {}", dropped, self._cursor)

        turn = Turn(question=question)
        self._turns.append(turn)
        self._cursor = len(self._turns) - 1
        return turn

    def go_back(self) -> Turn | None:
        """
        Move the cursor to the previous turn.

        Returns:
            Turn | None: The turn now active, or None if already at the first one.
        """
        if self._cursor > 0:
            self._cursor -= 1
            return self._turns[self._cursor]
        return None

    def current(self) -> Turn | None:
        if self._cursor >= 0:
            return self._turns[self._cursor]
        return None

    def update_ideas(self, ideas: list[str] | None) -> None:
        turn = self.current()
        if turn is not None:
            turn.ideas = list(ideas) if ideas is not None else None

    def update_selection(self, selection: list[int] | None) -> None:
        turn = self.current()
        if turn is not None:
            turn.selection = list(selection) if selection is not None else None
