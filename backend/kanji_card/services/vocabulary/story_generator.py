"""
Story Generator

Writes a short N5-level story using the words of a full set. Stories are
optional enrichment: the intake pipeline treats any failure here as
non-fatal and stores the set without one.
"""

import logging
from typing import Optional

from kanji_card.config.settings import settings
from kanji_card.middleware.error_handling import UpstreamContentError
from kanji_card.models.vocabulary import Card
from kanji_card.services.llm.client import LLMClient, build_messages
from kanji_card.services.vocabulary.prompts import get_prompt

logger = logging.getLogger(__name__)


class StoryGenerator:
    """Generates (sentences, translations) for a list of cards via an LLM."""

    def __init__(
        self,
        llm_client: LLMClient,
        language: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.language = language or settings.TRANSLATION_LANGUAGE
        self.max_tokens = max_tokens or settings.STORY_MAX_TOKENS

    async def generate(self, cards: list[Card]) -> tuple[list[str], list[str]]:
        """
        Generate a story that uses every card's word.

        Returns:
            Tuple of (sentences, translations), one translation per sentence

        Raises:
            UpstreamContentError: If the LLM call fails or the reply is malformed
        """
        logger.info(f"Generating story from {len(cards)} words")
        words = "\n".join(f"{card.word} - {card.translation}" for card in cards)
        prompt = get_prompt("generate_story").format(words=words, language=self.language)

        try:
            data = await self.llm_client.complete(
                messages=build_messages(prompt),
                temperature=0.7,
                max_tokens=self.max_tokens,
                json_mode=True,
            )
        except Exception as e:
            raise UpstreamContentError(f"Story generation failed: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamContentError("Story generation returned an unexpected payload")

        sentences = data.get("story")
        translations = data.get("story_translate")
        if (
            not isinstance(sentences, list)
            or not isinstance(translations, list)
            or not sentences
            or len(sentences) != len(translations)
        ):
            raise UpstreamContentError(
                "Story generation returned mismatched sentences and translations"
            )

        logger.info(f"Generated story with {len(sentences)} sentences")
        return [str(s) for s in sentences], [str(t) for t in translations]
