"""Idea generation with output validation."""

import time
from typing import Callable

from loguru import logger

from ideaflow.agents.guard import ContentGuard
from ideaflow.agents.prompts import IDEAS_TEMPLATE
from ideaflow.core.client import GenerationClient
from ideaflow.core.errors import GenerationError, IdeaGenerationFailed
from ideaflow.core.provider import Conversation
from ideaflow.utils.env_cfg import IdeaRetryConfig

IDEA_COUNT = 3


class IdeaGenerator:
    """
    Ask the provider for three ideas and keep asking until the reply is usable.

    A reply is usable when it has exactly three non-blank lines and the guard
    flags none of them. Failed remote calls use up an attempt as well.
    """

    def __init__(
        self,
        client: GenerationClient,
        guard: ContentGuard,
        config: IdeaRetryConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        on_retry: Callable[[int, int], None] | None = None,
    ) -> None:
        """
        Initialize the IdeaGenerator.

        Args:
            client (GenerationClient): Client used for remote calls.
            guard (ContentGuard): Guard applied to every idea line.
            config (IdeaRetryConfig | None, optional): Attempt budget and pause. Defaults to None.
            sleep (Callable[[float], None], optional): Blocking wait function. Defaults to time.sleep.
            on_retry (Callable[[int, int], None] | None, optional): Called with (attempt, max_attempts) after each failed attempt. Defaults to None.
        """
        self.client = client
        self.guard = guard
        self.config = config or IdeaRetryConfig()
        self.sleep = sleep
        self.on_retry = on_retry

    @staticmethod
    def build_prompt(question: str) -> str:
        return IDEAS_TEMPLATE.format(question=question)

    @staticmethod
    def split_ideas(text: str) -> list[str]:
        """
        Split a reply into stripped, non-blank lines.

        Args:
            text (str): Raw reply text.

        Returns:
            list[str]: Candidate ideas.
        """
        return [line.strip() for line in text.splitlines() if line.strip()]

    def validate(self, ideas: list[str]) -> str | None:
        """
        Check candidate ideas.

        Args:
            ideas (list[str]): Candidate ideas.

        Returns:
            str | None: Reason for rejection, or None if the ideas are acceptable.
        """
        if len(ideas) != IDEA_COUNT:
            return f"expected {IDEA_COUNT} ideas, got {len(ideas)}"
        if any(self.guard.is_inappropriate(idea) for idea in ideas):
            return "inappropriate content in ideas"
        return None

    def generate(self, conversation: Conversation, question: str) -> list[str]:
        """
        Produce exactly three validated ideas for a question.

        Args:
            conversation (Conversation): The conversation handle.
            question (str): The user's question.

        Returns:
            list[str]: Three ideas.

        Raises:
            IdeaGenerationFailed: If every attempt failed.
        """
        prompt = self.build_prompt(question)
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                reply = self.client.send(conversation, prompt)
            except GenerationError as e:
                logger.warning(
                    "Error generating ideas (attempt {}/{}): {}",
                    attempt,
                    max_attempts,
                    e,
                )
                if self.on_retry is not None:
                    self.on_retry(attempt, max_attempts)
                if attempt < max_attempts:
                    self.sleep(self.config.retry_pause)
                continue

            ideas = self.split_ideas(reply)
            reason = self.validate(ideas)
            if reason is None:
                logger.info("Generated ideas on attempt {}/{}", attempt, max_attempts)
                return ideas

            logger.warning(
                "Rejected ideas (attempt {}/{}): {}", attempt, max_attempts, reason
            )
            if self.on_retry is not None:
                self.on_retry(attempt, max_attempts)

        logger.warning(
            "IdeaGenerationFailed: no valid ideas after {} attempts.", max_attempts
        )
        raise IdeaGenerationFailed(
            "Unable to generate appropriate ideas after multiple attempts. "
            "Please try a different question."
        )
