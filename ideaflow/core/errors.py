"""Exception hierarchy shared by the session core and the provider adapter."""


class IdeaflowError(Exception):
    """Base class for all ideaflow errors."""


class InappropriateContent(IdeaflowError):
    """Raised when user input or generated text trips the content guard."""


class InvalidSelection(IdeaflowError):
    """Raised when a selection is empty or references a missing idea."""


# --- Provider classification ---
class ProviderError(IdeaflowError):
    """Failure reported by a conversation handle."""


class RateLimited(ProviderError):
    """The provider rejected the request because of rate limiting."""


class ProviderUnavailable(ProviderError):
    """Any provider failure other than rate limiting."""


# --- Generation ---
class GenerationError(IdeaflowError):
    """A remote generation call failed after the client gave up on it."""


class RateLimitExceeded(GenerationError):
    """Rate limiting persisted past the backoff budget."""


class TransportError(GenerationError):
    """A non rate-limit remote failure; never retried by the client."""


class IdeaGenerationFailed(IdeaflowError):
    """No valid set of ideas could be produced within the attempt budget."""
