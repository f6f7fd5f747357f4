from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from ideaflow.core.errors import ProviderUnavailable, RateLimited
from ideaflow.core.provider import ChatConversation, build_conversation
from ideaflow.utils.env_cfg import GenerationConfig, ProviderConfig, SafetyConfig

GEN = GenerationConfig(temperature=0.9, top_k=1, top_p=1.0, max_output_tokens=2048)
SAFETY = SafetyConfig(
    harassment="BLOCK_LOW_AND_ABOVE",
    hate_speech="BLOCK_LOW_AND_ABOVE",
    sexually_explicit="BLOCK_LOW_AND_ABOVE",
    dangerous_content="BLOCK_MEDIUM_AND_ABOVE",
)


class _FakeCompletions:
    def __init__(self, outcomes: list[Any]) -> None:
        self.outcomes = outcomes
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(outcomes: list[Any]) -> tuple[Any, _FakeCompletions]:
    completions = _FakeCompletions(outcomes)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _status_error(cls: type[openai.APIStatusError], status: int) -> Exception:
    request = httpx.Request("POST", "https://example.invalid/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls("failure", response=response, body=None)


def test_send_message_keeps_context() -> None:
    """
    Test that replies are appended and replayed on the next call.
    """
    client, completions = _client(["ideas", "details"])
    conversation = ChatConversation(client=client, model="m", generation=GEN)

    assert conversation.send_message("first") == "ideas"
    assert conversation.send_message("second") == "details"

    second_call = completions.calls[1]["messages"]
    assert [m["content"] for m in second_call] == ["first", "ideas", "second"]
    assert len(conversation.messages) == 4


def test_request_options_pass_through() -> None:
    client, completions = _client(["ok"])
    conversation = ChatConversation(
        client=client, model="m", generation=GEN, safety=SAFETY
    )
    conversation.send_message("hi")

    call = completions.calls[0]
    assert call["model"] == "m"
    assert call["temperature"] == 0.9
    assert call["top_p"] == 1.0
    assert call["max_tokens"] == 2048
    assert call["extra_body"]["top_k"] == 1
    settings = call["extra_body"]["safety_settings"]
    assert len(settings) == 4
    assert settings[3] == {
        "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
        "threshold": "BLOCK_MEDIUM_AND_ABOVE",
    }


def test_rate_limit_is_classified() -> None:
    client, _ = _client([_status_error(openai.RateLimitError, 429)])
    conversation = ChatConversation(client=client, model="m", generation=GEN)
    with pytest.raises(RateLimited):
        conversation.send_message("hi")
    assert conversation.messages == []


def test_other_failures_are_unavailable() -> None:
    client, _ = _client([_status_error(openai.InternalServerError, 500)])
    conversation = ChatConversation(client=client, model="m", generation=GEN)
    with pytest.raises(ProviderUnavailable):
        conversation.send_message("hi")


def test_build_conversation_requires_api_key() -> None:
    provider = ProviderConfig(api_key="", api_base=None, model="m", request_timeout=5)
    with pytest.raises(ValueError):
        build_conversation(provider, GEN)


def test_build_conversation_with_custom_base() -> None:
    provider = ProviderConfig(
        api_key="sk-test",
        api_base="http://localhost:8080/v1",
        model="local-model",
        request_timeout=5,
    )
    conversation = build_conversation(provider, GEN, SAFETY)
    assert conversation.model == "local-model"
    assert str(conversation.client.base_url).startswith("http://localhost:8080/v1")
    assert conversation.messages == []


def test_empty_choices_is_unavailable() -> None:
    """
    Test that a reply without choices is classified as an unavailable provider.
    """
    client, _ = _client([None])
    conversation = ChatConversation(client=client, model="m", generation=GEN)

    with pytest.raises(ProviderUnavailable):
        conversation.send_message("hi")
    assert conversation.messages == []
