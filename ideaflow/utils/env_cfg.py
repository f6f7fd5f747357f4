import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class ProviderConfig:
    """
    Dataclass for provider configuration.
    """

    api_key: str
    api_base: str | None
    model: str
    request_timeout: float


@dataclass(frozen=True)
class GenerationConfig:
    """
    Dataclass for generation parameters passed through to the provider.
    """

    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int


@dataclass(frozen=True)
class SafetyConfig:
    """
    Dataclass for provider-side safety thresholds.
    """

    harassment: str
    hate_speech: str
    sexually_explicit: str
    dangerous_content: str

    def as_settings(self) -> list[dict[str, str]]:
        """
        Return the thresholds in the provider's category/threshold shape.

        Returns:
            list[dict[str, str]]: One entry per harm category.
        """
        return [
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": self.harassment},
            {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": self.hate_speech},
            {
                "category": "HARM_CATEGORY_SEXUALLY_EXPLICIT",
                "threshold": self.sexually_explicit,
            },
            {
                "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
                "threshold": self.dangerous_content,
            },
        ]


@dataclass(frozen=True)
class BackoffConfig:
    """
    Dataclass for rate-limit backoff configuration.
    """

    base_delay: float = 1.0
    factor: float = 2.0
    max_retries: int = 3


@dataclass(frozen=True)
class IdeaRetryConfig:
    """
    Dataclass for idea generation retry configuration.
    """

    max_attempts: int = 3
    retry_pause: float = 1.0


@dataclass(frozen=True)
class PathConfig:
    """
    Dataclass for path configuration.
    """

    logs: Path


def load_provider_env() -> ProviderConfig:
    """
    Loads provider configuration from environment variables or defaults.

    Returns:
        ProviderConfig: Dataclass containing provider configuration.
        - api_key (str): The API key for the chat endpoint.
        - api_base (str | None): Optional base URL of an OpenAI-compatible endpoint.
        - model (str): The generation model identifier.
        - request_timeout (float): The request timeout in seconds.
    """
    return ProviderConfig(
        api_key=os.getenv("IDEAFLOW_API_KEY") or os.getenv("OPENAI_API_KEY", ""),
        api_base=os.getenv("IDEAFLOW_API_BASE") or None,
        model=os.getenv("IDEAFLOW_MODEL", "gpt-4o-mini"),
        request_timeout=float(os.getenv("IDEAFLOW_REQUEST_TIMEOUT", "60")),
    )


def load_generation_env() -> GenerationConfig:
    """
    Loads generation parameters from environment variables or defaults.

    Returns:
        GenerationConfig: Dataclass containing generation parameters.
        - temperature (float): The sampling temperature.
        - top_k (int): The top_k setting for generation.
        - top_p (float): The top_p setting for generation.
        - max_output_tokens (int): Upper bound on generated tokens per reply.
    """
    return GenerationConfig(
        temperature=float(os.getenv("IDEAFLOW_TEMPERATURE", "0.9")),
        top_k=int(os.getenv("IDEAFLOW_TOP_K", "1")),
        top_p=float(os.getenv("IDEAFLOW_TOP_P", "1.0")),
        max_output_tokens=int(os.getenv("IDEAFLOW_MAX_OUTPUT_TOKENS", "2048")),
    )


def load_safety_env() -> SafetyConfig:
    """
    Loads safety thresholds from environment variables or defaults.

    Returns:
        SafetyConfig: Dataclass containing one threshold per harm category.
    """
    default = "BLOCK_LOW_AND_ABOVE"
    return SafetyConfig(
        harassment=os.getenv("IDEAFLOW_SAFETY_HARASSMENT", default),
        hate_speech=os.getenv("IDEAFLOW_SAFETY_HATE_SPEECH", default),
        sexually_explicit=os.getenv("IDEAFLOW_SAFETY_SEXUALLY_EXPLICIT", default),
        dangerous_content=os.getenv("IDEAFLOW_SAFETY_DANGEROUS_CONTENT", default),
    )


def load_backoff_env() -> BackoffConfig:
    """
    Loads rate-limit backoff configuration from environment variables or defaults.

    Returns:
        BackoffConfig: Dataclass containing backoff configuration.
        - base_delay (float): Seconds to wait before the first retry.
        - factor (float): Multiplier applied to the delay after each retry.
        - max_retries (int): Number of retries before giving up.
    """
    return BackoffConfig(
        base_delay=float(os.getenv("IDEAFLOW_BACKOFF_BASE_DELAY", "1.0")),
        factor=float(os.getenv("IDEAFLOW_BACKOFF_FACTOR", "2.0")),
        max_retries=int(os.getenv("IDEAFLOW_BACKOFF_MAX_RETRIES", "3")),
    )


def load_idea_retry_env() -> IdeaRetryConfig:
    """
    Loads idea generation retry configuration from environment variables or defaults.

    Returns:
        IdeaRetryConfig: Dataclass containing retry configuration.
        - max_attempts (int): Attempts per question, counting the first.
        - retry_pause (float): Seconds to pause after a failed remote call.
    """
    return IdeaRetryConfig(
        max_attempts=int(os.getenv("IDEAFLOW_IDEA_MAX_ATTEMPTS", "3")),
        retry_pause=float(os.getenv("IDEAFLOW_IDEA_RETRY_PAUSE", "1.0")),
    )


def load_blocked_terms_env() -> list[str]:
    """
    Loads extra blocked terms for the content guard.

    Returns:
        list[str]: Terms from the comma-separated IDEAFLOW_BLOCKED_TERMS variable.
    """
    raw = os.getenv("IDEAFLOW_BLOCKED_TERMS", "")
    return [term.strip() for term in raw.split(",") if term.strip()]


def load_path_env() -> PathConfig:
    """
    Loads path configuration from environment variables or defaults.

    Returns:
        PathConfig: Dataclass containing path configuration.
        - logs (Path): Path to the logs file.
    """
    project_root: Path = Path(__file__).parents[2].resolve()
    return PathConfig(
        logs=Path(
            os.getenv("LOG_PATH", project_root / ".logs" / "ideaflow.log")
        ).expanduser(),
    )
