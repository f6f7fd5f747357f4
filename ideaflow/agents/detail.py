"""Detail expansion for selected ideas."""

from loguru import logger

from ideaflow.agents.prompts import DETAIL_TEMPLATE
from ideaflow.core.client import GenerationClient
from ideaflow.core.provider import Conversation


class DetailExpander:
    """
    Turn a selection of ideas into implementation guidance.
    """

    def __init__(self, client: GenerationClient) -> None:
        self.client = client

    @staticmethod
    def selected_text(selection: list[int], ideas: list[str]) -> str:
        """
        Join the ideas picked by 1-based indices.

        Args:
            selection (list[int]): 1-based idea numbers.
            ideas (list[str]): The ideas on offer.

        Returns:
            str: Selected ideas separated by ", ".

        Raises:
            ValueError: If a number does not refer to an idea.
        """
        picked = []
        for number in selection:
            if not 1 <= number <= len(ideas):
                logger.error("ValueError: Selection {} is out of range.", number)
                raise ValueError(f"Selection {number} is out of range.")
            picked.append(ideas[number - 1])
        return ", ".join(picked)

    def expand(
        self, conversation: Conversation, selection: list[int], ideas: list[str]
    ) -> str:
        """
        Request detailed suggestions for the selected ideas.

        Args:
            conversation (Conversation): The conversation handle.
            selection (list[int]): 1-based idea numbers.
            ideas (list[str]): The ideas on offer.

        Returns:
            str: The detailed guidance text.
        """
        prompt = DETAIL_TEMPLATE.format(ideas=self.selected_text(selection, ideas))
        logger.info("Expanding ideas {}", selection)
        return self.client.send(conversation, prompt)
