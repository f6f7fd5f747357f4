"""Pattern-based content guard."""

import re
from dataclasses import dataclass, field
from typing import Iterable

DEFAULT_BLOCKED_TERMS: dict[str, list[str]] = {
    "sexual": ["sex", "porn", "nude", "explicit", "nsfw"],
    "violence": ["terrorist", "bomb", "attack plans"],
    "drugs": ["illegal drugs", "cocaine", "heroin"],
}


@dataclass
class GuardConfig:
    """
    Vocabulary for the content guard, grouped by topic.
    """

    patterns: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_BLOCKED_TERMS.items()}
    )
    extra_terms: list[str] = field(default_factory=list)


class ContentGuard:
    """
    Flags text mentioning any blocked term as a whole word, case-insensitively.
    """

    def __init__(self, config: GuardConfig | None = None) -> None:
        """
        Initialize the ContentGuard.

        Args:
            config (GuardConfig | None, optional): Blocked vocabulary. Defaults to None.
        """
        self.config = config or GuardConfig()
        groups: list[Iterable[str]] = list(self.config.patterns.values())
        if self.config.extra_terms:
            groups.append(self.config.extra_terms)
        self._patterns = [self._compile(terms) for terms in groups if terms]

    @staticmethod
    def _compile(terms: Iterable[str]) -> re.Pattern[str]:
        alternatives = "|".join(re.escape(term) for term in terms)
        return re.compile(rf"\b(?:{alternatives})\b", flags=re.IGNORECASE)

    def is_inappropriate(self, text: str) -> bool:
        """
        Return True if the text matches any blocked pattern.

        Args:
            text (str): The text to check.

        Returns:
            bool: Whether the text should be rejected.
        """
        return any(pattern.search(text) for pattern in self._patterns)
