"""Resilient wrapper around conversation handles."""

import time
from typing import Callable

from loguru import logger

from ideaflow.core.errors import (
    ProviderError,
    RateLimited,
    RateLimitExceeded,
    TransportError,
)
from ideaflow.core.provider import Conversation
from ideaflow.utils.env_cfg import BackoffConfig


class GenerationClient:
    """
    Send prompts through a conversation handle, backing off on rate limits.
    Only rate limiting is retried; every other provider failure surfaces at once.
    """

    def __init__(
        self,
        config: BackoffConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        on_wait: Callable[[float], None] | None = None,
    ) -> None:
        """
        Initialize the GenerationClient.

        Args:
            config (BackoffConfig | None, optional): Backoff parameters. Defaults to None.
            sleep (Callable[[float], None], optional): Blocking wait function. Defaults to time.sleep.
            on_wait (Callable[[float], None] | None, optional): Notified with each delay before it is slept. Defaults to None.
        """
        self.config = config or BackoffConfig()
        self.sleep = sleep
        self.on_wait = on_wait

    def delay_for(self, retry: int) -> float:
        """
        Return the wait before the given retry (0-based).

        Args:
            retry (int): Number of retries already performed.

        Returns:
            float: Delay in seconds.
        """
        return self.config.base_delay * (self.config.factor**retry)

    def send(self, conversation: Conversation, prompt: str) -> str:
        """
        Send a prompt, retrying with exponential backoff while rate limited.

        Args:
            conversation (Conversation): The conversation handle.
            prompt (str): The prompt text.

        Returns:
            str: The reply text.

        Raises:
            RateLimitExceeded: If rate limiting outlasts the retry budget.
            TransportError: On any other provider failure.
        """
        retry = 0
        while True:
            try:
                return conversation.send_message(prompt)
            except RateLimited as e:
                if retry >= self.config.max_retries:
                    logger.info(
                        "RateLimitExceeded: gave up after {} retries.", retry
                    )
                    raise RateLimitExceeded(
                        f"Rate limit persisted after {retry} retries."
                    ) from e
                delay = self.delay_for(retry)
                logger.info(
                    "Rate limit hit. Waiting {:.1f}s before retry {}/{}",
                    delay,
                    retry + 1,
                    self.config.max_retries,
                )
                if self.on_wait is not None:
                    self.on_wait(delay)
                self.sleep(delay)
                retry += 1
            except ProviderError as e:
                logger.info("TransportError: {}", e)
                raise TransportError(str(e)) from e
