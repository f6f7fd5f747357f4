"""Idea generation agents.

Provides the content guard, selection parsing, idea generation with output
validation, and detail expansion for selected ideas.
"""

from ideaflow.agents.detail import DetailExpander
from ideaflow.agents.guard import DEFAULT_BLOCKED_TERMS, ContentGuard, GuardConfig
from ideaflow.agents.ideas import IDEA_COUNT, IdeaGenerator
from ideaflow.agents.selection import is_valid_selection, parse_selection

__all__ = [
    "ContentGuard",
    "DEFAULT_BLOCKED_TERMS",
    "DetailExpander",
    "GuardConfig",
    "IDEA_COUNT",
    "IdeaGenerator",
    "is_valid_selection",
    "parse_selection",
]
