"""Turn state machine driving one interactive round of the assistant."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from loguru import logger

from ideaflow.agents.detail import DetailExpander
from ideaflow.agents.guard import ContentGuard, GuardConfig
from ideaflow.agents.ideas import IDEA_COUNT, IdeaGenerator
from ideaflow.agents.selection import is_valid_selection, parse_selection
from ideaflow.core.client import GenerationClient
from ideaflow.core.errors import (
    GenerationError,
    IdeaGenerationFailed,
    InappropriateContent,
    InvalidSelection,
)
from ideaflow.core.history import ConversationHistory
from ideaflow.core.provider import Conversation
from ideaflow.utils.env_cfg import BackoffConfig, IdeaRetryConfig

CMD_BACK = "back"
CMD_RETRY = "retry"
CMD_EXIT = "exit"


class SessionState(Enum):
    AWAITING_QUESTION = "awaiting_question"
    GENERATING_IDEAS = "generating_ideas"
    AWAITING_SELECTION = "awaiting_selection"
    GENERATING_DETAIL = "generating_detail"
    DONE = "done"


class TurnOutcome(Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"
    NO_PREVIOUS = "no_previous"
    EXIT = "exit"


class Console(Protocol):
    """Line-oriented terminal used by the controller."""

    def ask(self, prompt: str) -> str:  # pragma: no cover - interface
        """Show a prompt and return one line of input."""
        ...

    def show(
        self, message: str, style: str = "info"
    ) -> None:  # pragma: no cover - interface
        """Display a message with a named style."""
        ...


def normalize_command(text: str) -> str:
    return text.strip().lower()


@dataclass
class SessionController:
    """
    Owns the history and conversation of one session and runs rounds on it.

    Each call to ``handle_question`` starts in AWAITING_QUESTION and loops
    through the states until the round completes, fails, or is abandoned.
    """

    conversation: Conversation
    console: Console
    generator: IdeaGenerator
    expander: DetailExpander
    guard: ContentGuard
    history: ConversationHistory = field(default_factory=ConversationHistory)
    state: SessionState = field(default=SessionState.AWAITING_QUESTION, init=False)

    def _finish(self, outcome: TurnOutcome) -> TurnOutcome:
        self.state = SessionState.AWAITING_QUESTION
        logger.info("Round finished: {}", outcome.value)
        return outcome

    def _check_question(self, question: str) -> None:
        """
        Reject blank or disallowed questions.

        Raises:
            ValueError: If the question is blank.
            InappropriateContent: If the guard flags the question.
        """
        if not question.strip():
            raise ValueError("Please enter a question.")
        if self.guard.is_inappropriate(question):
            logger.warning("InappropriateContent: question rejected by guard.")
            raise InappropriateContent(
                "Please keep your questions appropriate and professional. "
                "Try asking about business, technology, or creative projects instead."
            )

    def _read_selection(self, raw: str) -> list[int]:
        """
        Parse and validate a selection.

        Raises:
            InvalidSelection: If the selection is empty or out of range.
        """
        numbers = parse_selection(raw)
        if not is_valid_selection(numbers, IDEA_COUNT):
            raise InvalidSelection(
                f"Please select valid numbers between 1 and {IDEA_COUNT}."
            )
        return numbers

    def _show_ideas(self, ideas: list[str]) -> None:
        self.console.show(f"\nHere are {len(ideas)} ideas for you:", "idea")
        for idea in ideas:
            self.console.show(idea, "idea")

    def _prompt_selection(self) -> str:
        self.console.show(
            "\nSelect any number of ideas by entering their numbers:", "warning"
        )
        self.console.show('   Examples: "1" or "1 3" or "1,2,3"', "hint")
        self.console.show(
            '   Or type "retry" for new ideas, "back" for previous question', "hint"
        )
        return self.console.ask("Your selection: ")

    def handle_question(self, raw: str) -> TurnOutcome:
        """
        Run one round starting from a line typed at the question prompt.

        Any failure not handled by a state is reported and ends the round as
        FAILED. End of input propagates to the caller.

        Args:
            raw (str): The question, or a command such as "back".

        Returns:
            TurnOutcome: How the round ended.
        """
        try:
            return self._run_round(raw)
        except EOFError:
            raise
        except Exception as e:
            logger.exception("Unexpected error during round: {}", e)
            self.console.show(f"\nError: {e}", "error")
            return self._finish(TurnOutcome.FAILED)

    def _run_round(self, raw: str) -> TurnOutcome:
        pending = raw
        question = ""
        ideas: list[str] = []
        selection: list[int] = []
        self.state = SessionState.AWAITING_QUESTION

        while True:
            if self.state is SessionState.AWAITING_QUESTION:
                command = normalize_command(pending)
                if command == CMD_EXIT:
                    return self._finish(TurnOutcome.EXIT)

                if command == CMD_BACK:
                    turn = self.history.go_back()
                    if turn is None:
                        self.console.show(
                            "\nNo previous questions available.", "warning"
                        )
                        return self._finish(TurnOutcome.NO_PREVIOUS)
                    self.console.show("\nGoing back to previous question:", "info")
                    self.console.show(f'"{turn.question}"\n', "info")
                    question = turn.question
                    ideas = list(turn.ideas or [])
                    if ideas:
                        self._show_ideas(ideas)
                        self.state = SessionState.AWAITING_SELECTION
                    else:
                        self.state = SessionState.GENERATING_IDEAS
                    continue

                question = pending.strip()
                try:
                    self._check_question(question)
                except (InappropriateContent, ValueError) as e:
                    self.console.show(f"\n{e}\n", "error")
                    return self._finish(TurnOutcome.REJECTED)

                self.history.add_question(question)
                self.console.show("\nGenerating ideas for you...", "info")
                self.state = SessionState.GENERATING_IDEAS

            elif self.state is SessionState.GENERATING_IDEAS:
                try:
                    ideas = self.generator.generate(self.conversation, question)
                except IdeaGenerationFailed as e:
                    self.console.show(f"\nError: {e}", "error")
                    return self._finish(TurnOutcome.FAILED)
                self.history.update_ideas(ideas)
                self._show_ideas(ideas)
                self.state = SessionState.AWAITING_SELECTION

            elif self.state is SessionState.AWAITING_SELECTION:
                reply = self._prompt_selection()
                command = normalize_command(reply)
                if command == CMD_RETRY:
                    self.history.update_ideas(None)
                    self.console.show(
                        "\nGenerating new ideas for your question...", "info"
                    )
                    self.state = SessionState.GENERATING_IDEAS
                elif command == CMD_BACK:
                    pending = CMD_BACK
                    self.state = SessionState.AWAITING_QUESTION
                elif command == CMD_EXIT:
                    return self._finish(TurnOutcome.EXIT)
                else:
                    try:
                        selection = self._read_selection(command)
                    except InvalidSelection as e:
                        self.console.show(f"\n{e}", "error")
                        continue
                    self.history.update_selection(selection)
                    self.state = SessionState.GENERATING_DETAIL

            elif self.state is SessionState.GENERATING_DETAIL:
                self.console.show("\nGenerating detailed suggestions...", "info")
                try:
                    detail = self.expander.expand(
                        self.conversation, selection, ideas
                    )
                except GenerationError as e:
                    self.console.show(
                        f"\nError generating detailed suggestions: {e}", "error"
                    )
                    return self._finish(TurnOutcome.FAILED)
                self.console.show("\nDetailed suggestions:", "idea")
                self.console.show(detail, "idea")
                self.state = SessionState.DONE

            else:
                return self._finish(TurnOutcome.COMPLETED)


def build_session(
    conversation: Conversation,
    console: Console,
    backoff: BackoffConfig | None = None,
    idea_retry: IdeaRetryConfig | None = None,
    guard_config: GuardConfig | None = None,
) -> SessionController:
    """
    Wire a controller whose retry notices are reported on the console.

    Args:
        conversation (Conversation): The conversation handle.
        console (Console): The terminal.
        backoff (BackoffConfig | None, optional): Rate-limit backoff. Defaults to None.
        idea_retry (IdeaRetryConfig | None, optional): Idea attempt budget. Defaults to None.
        guard_config (GuardConfig | None, optional): Guard vocabulary. Defaults to None.

    Returns:
        SessionController: A controller with an empty history.
    """

    def _on_wait(delay: float) -> None:
        console.show(
            f"Rate limit hit. Waiting {delay:g} seconds before retry...", "warning"
        )

    def _on_retry(attempt: int, max_attempts: int) -> None:
        console.show(
            f"\nRetrying to generate better ideas (Attempt {attempt}/{max_attempts})...",
            "warning",
        )

    guard = ContentGuard(guard_config)
    client = GenerationClient(backoff, on_wait=_on_wait)
    return SessionController(
        conversation=conversation,
        console=console,
        generator=IdeaGenerator(client, guard, idea_retry, on_retry=_on_retry),
        expander=DetailExpander(client),
        guard=guard,
    )
