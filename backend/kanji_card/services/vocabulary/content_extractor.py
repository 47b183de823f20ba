"""
Content Extractor

Asks an LLM for the Japanese words in a piece of text or an image, with
translations. The result is a list of candidates for the user to review;
nothing is saved here.

Usage:
    extractor = ContentExtractor(get_llm_client())
    candidates = await extractor.extract_from_text("猫が本を読む")
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from kanji_card.config.settings import settings
from kanji_card.middleware.error_handling import UpstreamContentError
from kanji_card.models.api import CandidateWord
from kanji_card.services.llm.client import (
    LLMClient,
    build_image_messages,
    build_messages,
)
from kanji_card.services.vocabulary.prompts import get_prompt

logger = logging.getLogger(__name__)


class ContentExtractor:
    """Extracts candidate words from text or images via an LLM."""

    def __init__(
        self,
        llm_client: LLMClient,
        language: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.language = language or settings.TRANSLATION_LANGUAGE
        self.max_tokens = max_tokens or settings.EXTRACTION_MAX_TOKENS

    async def extract_from_text(self, text: str) -> list[CandidateWord]:
        """
        Extract candidate words from text.

        Raises:
            UpstreamContentError: If the LLM call fails or returns garbage
        """
        logger.info(f"Extracting words from text ({len(text)} chars)")
        prompt = get_prompt("extract_words_from_text").format(
            text=text, language=self.language
        )
        data = await self._request(build_messages(prompt))
        words = parse_candidates(data)
        logger.info(f"Extracted {len(words)} words from text")
        return words

    async def extract_from_image(
        self, image_data: bytes, mime_type: str = "image/png"
    ) -> list[CandidateWord]:
        """
        Extract candidate words from an image.

        Raises:
            UpstreamContentError: If the LLM call fails or returns garbage
        """
        logger.info(f"Extracting words from image ({len(image_data)} bytes)")
        prompt = get_prompt("extract_words_from_image").format(language=self.language)
        data = await self._request(
            build_image_messages(prompt, image_data, mime_type),
            model=self.llm_client.vision_model,
        )
        words = parse_candidates(data)
        logger.info(f"Extracted {len(words)} words from image")
        return words

    async def _request(self, messages: list[dict], model: Optional[str] = None) -> Any:
        try:
            return await self.llm_client.complete(
                messages=messages,
                temperature=0.1,
                max_tokens=self.max_tokens,
                json_mode=True,
                model=model,
            )
        except Exception as e:
            raise UpstreamContentError(f"Word extraction failed: {e}") from e


def parse_candidates(data: Any) -> list[CandidateWord]:
    """
    Turn ``{"words": [{"word": ..., "translation": ...}]}`` into candidates.

    Entries that don't validate are dropped with a warning.

    Raises:
        UpstreamContentError: If the payload has no ``words`` list
    """
    if not isinstance(data, dict) or not isinstance(data.get("words"), list):
        raise UpstreamContentError("Word extraction returned an unexpected payload")

    words = []
    for entry in data["words"]:
        try:
            words.append(CandidateWord.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Dropping malformed extracted word {entry!r}: {e}")
    return words
