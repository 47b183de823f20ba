"""
Unit tests for ContentExtractor and StoryGenerator.

The LLM client is mocked; these tests cover prompt wiring and how
replies are validated.
"""

import pytest

from kanji_card.middleware.error_handling import UpstreamContentError
from kanji_card.services.llm.client import build_image_messages, build_messages
from kanji_card.services.vocabulary.content_extractor import (
    ContentExtractor,
    parse_candidates,
)
from kanji_card.services.vocabulary.story_generator import StoryGenerator
from tests.factories import make_set


class TestMessageBuilders:
    """Tests for build_messages() and build_image_messages()."""

    def test_text_message(self):
        messages = build_messages("hello")
        assert messages[-1] == {"role": "user", "content": "hello"}

    def test_image_message_uses_data_url(self):
        messages = build_image_messages("describe", b"\x89PNG", "image/png")
        parts = messages[-1]["content"]

        assert parts[0] == {"type": "text", "text": "describe"}
        assert parts[1]["type"] == "image_url"
        assert parts[1]["image_url"]["url"].startswith("data:image/png;base64,")


class TestParseCandidates:
    """Tests for parse_candidates()."""

    def test_valid_payload(self):
        words = parse_candidates(
            {"words": [{"word": "猫", "translation": "cat"}, {"word": "犬", "translation": "dog"}]}
        )
        assert [w.word for w in words] == ["猫", "犬"]

    def test_malformed_entries_dropped(self):
        words = parse_candidates(
            {
                "words": [
                    {"word": "猫", "translation": "cat"},
                    {"word": "", "translation": "nothing"},
                    {"word": "犬"},
                    "not an object",
                ]
            }
        )
        assert [w.word for w in words] == ["猫"]

    @pytest.mark.parametrize("payload", [None, [], {"items": []}, {"words": "猫"}])
    def test_unexpected_payload(self, payload):
        with pytest.raises(UpstreamContentError):
            parse_candidates(payload)


class TestContentExtractor:
    """Tests for ContentExtractor."""

    @pytest.mark.asyncio
    async def test_extract_from_text(self, mock_llm_client):
        mock_llm_client.complete.return_value = {
            "words": [{"word": "猫", "translation": "cat"}]
        }
        extractor = ContentExtractor(mock_llm_client, language="German")

        words = await extractor.extract_from_text("猫がいる")

        assert [w.word for w in words] == ["猫"]
        kwargs = mock_llm_client.complete.call_args.kwargs
        assert kwargs["json_mode"] is True
        prompt = kwargs["messages"][-1]["content"]
        assert "猫がいる" in prompt
        assert "German" in prompt

    @pytest.mark.asyncio
    async def test_extract_from_image_uses_vision_model(self, mock_llm_client):
        mock_llm_client.complete.return_value = {"words": []}
        extractor = ContentExtractor(mock_llm_client)

        words = await extractor.extract_from_image(b"\xff\xd8", "image/jpeg")

        assert words == []
        kwargs = mock_llm_client.complete.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o"

    @pytest.mark.asyncio
    async def test_llm_failure_wrapped(self, mock_llm_client):
        mock_llm_client.complete.side_effect = TimeoutError("provider timeout")
        extractor = ContentExtractor(mock_llm_client)

        with pytest.raises(UpstreamContentError):
            await extractor.extract_from_text("猫")

        # No retries
        assert mock_llm_client.complete.await_count == 1


class TestStoryGenerator:
    """Tests for StoryGenerator."""

    @pytest.mark.asyncio
    async def test_generate(self, mock_llm_client):
        mock_llm_client.complete.return_value = {
            "story": ["猫がいます。", "犬もいます。"],
            "story_translate": ["There is a cat.", "There is a dog too."],
        }
        generator = StoryGenerator(mock_llm_client)
        cards = make_set(count=2).cards

        sentences, translations = await generator.generate(cards)

        assert sentences == ["猫がいます。", "犬もいます。"]
        assert translations == ["There is a cat.", "There is a dog too."]
        prompt = mock_llm_client.complete.call_args.kwargs["messages"][-1]["content"]
        assert "猫 - cat" in prompt
        assert "犬 - dog" in prompt

    @pytest.mark.asyncio
    async def test_mismatched_lengths(self, mock_llm_client):
        mock_llm_client.complete.return_value = {
            "story": ["猫がいます。", "犬もいます。"],
            "story_translate": ["There is a cat."],
        }
        generator = StoryGenerator(mock_llm_client)

        with pytest.raises(UpstreamContentError):
            await generator.generate(make_set(count=2).cards)

    @pytest.mark.asyncio
    async def test_llm_failure_wrapped(self, mock_llm_client):
        mock_llm_client.complete.side_effect = ValueError("bad json")
        generator = StoryGenerator(mock_llm_client)

        with pytest.raises(UpstreamContentError):
            await generator.generate(make_set(count=2).cards)
