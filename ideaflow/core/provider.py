from dataclasses import dataclass, field
from typing import Any, Protocol

import openai
from loguru import logger
from openai import OpenAI
from openai.types.chat import ChatCompletionMessageParam

from ideaflow.core.errors import ProviderUnavailable, RateLimited
from ideaflow.utils.env_cfg import GenerationConfig, ProviderConfig, SafetyConfig


class Conversation(Protocol):
    """Opaque conversation handle that keeps dialogue context across calls."""

    def send_message(self, text: str) -> str:  # pragma: no cover - interface
        """Send one user message and return the reply text."""
        ...


@dataclass
class ChatConversation:
    """
    Conversation handle backed by an OpenAI-compatible chat completions endpoint.

    The running message log is replayed on every call so follow-up prompts
    (detail expansion, retries) see the ideas produced earlier.
    """

    client: OpenAI
    model: str
    generation: GenerationConfig
    safety: SafetyConfig | None = None
    messages: list[ChatCompletionMessageParam] = field(default_factory=list)

    def _request_options(self) -> dict[str, Any]:
        """
        Build the keyword arguments forwarded to the completions call.

        Returns:
            dict[str, Any]: Native sampling parameters plus pass-through extras.
        """
        extra_body: dict[str, Any] = {"top_k": self.generation.top_k}
        if self.safety is not None:
            extra_body["safety_settings"] = self.safety.as_settings()
        return {
            "temperature": self.generation.temperature,
            "top_p": self.generation.top_p,
            "max_tokens": self.generation.max_output_tokens,
            "extra_body": extra_body,
        }

    def send_message(self, text: str) -> str:
        """
        Send a user message within this conversation.

        Args:
            text (str): The user message.

        Returns:
            str: The assistant reply.

        Raises:
            RateLimited: If the endpoint answered with HTTP 429.
            ProviderUnavailable: For any other client or server failure, or a reply
                without choices.
        """
        pending: list[ChatCompletionMessageParam] = [
            *self.messages,
            {"role": "user", "content": text},
        ]
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=pending,
                **self._request_options(),
            )
        except openai.RateLimitError as e:
            logger.info("Provider rate limited the request: {}", e)
            raise RateLimited(str(e)) from e
        except openai.OpenAIError as e:
            logger.info("Provider request failed: {}", e)
            raise ProviderUnavailable(str(e)) from e

        if not response.choices:
            logger.info("Provider returned no choices for the request.")
            raise ProviderUnavailable("The provider returned an empty response.")

        reply = response.choices[0].message.content or ""
        self.messages = [*pending, {"role": "assistant", "content": reply}]
        logger.debug(
            "Exchange {} completed ({} chars)", len(self.messages) // 2, len(reply)
        )
        return reply


def build_conversation(
    provider: ProviderConfig,
    generation: GenerationConfig,
    safety: SafetyConfig | None = None,
) -> ChatConversation:
    """
    Construct the provider client and start an empty conversation.

    Args:
        provider (ProviderConfig): Endpoint, credentials and model.
        generation (GenerationConfig): Sampling parameters.
        safety (SafetyConfig | None, optional): Safety thresholds. Defaults to None.

    Returns:
        ChatConversation: A conversation with no prior messages.

    Raises:
        ValueError: If no API key is configured.
    """
    if not provider.api_key:
        logger.error("ValueError: No API key configured.")
        raise ValueError(
            "No API key configured. Set IDEAFLOW_API_KEY or OPENAI_API_KEY in .env."
        )

    kwargs: dict[str, Any] = {
        "api_key": provider.api_key,
        "timeout": provider.request_timeout,
        # Backoff is handled by GenerationClient; the SDK must not retry on its own.
        "max_retries": 0,
    }
    if provider.api_base:
        kwargs["base_url"] = provider.api_base
    client = OpenAI(**kwargs)
    logger.info("Started conversation with model '{}'", provider.model)
    return ChatConversation(
        client=client, model=provider.model, generation=generation, safety=safety
    )
