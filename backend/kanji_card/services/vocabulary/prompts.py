"""
LLM prompts for word extraction and story generation.

Each prompt can be replaced without a code change by adding an entry with
the same key under ``prompts:`` in config/default.yaml. Prompts are
rendered with str.format, so literal braces are doubled.
"""

from kanji_card.config.settings import yaml_config

EXTRACT_WORDS_FROM_TEXT = """You are an expert in the Japanese language. Extract every Japanese word from the text below and give an accurate {language} translation for each.

RULES:
1. Extract ONLY Japanese words (hiragana, katakana, kanji or mixed)
2. Ignore punctuation, numbers and non-Japanese text
3. Extract each word separately, do not merge phrases
4. Include particles only when they appear on their own
5. Skip duplicates: list a word only once

Return ONLY valid JSON in exactly this format:
{{"words": [{{"word": "japanese_word", "translation": "translation"}}]}}

Text:
{text}"""

EXTRACT_WORDS_FROM_IMAGE = """You are an expert in the Japanese language. Extract every Japanese word visible in this image and give an accurate {language} translation for each.

RULES:
1. Extract ONLY Japanese words (hiragana, katakana, kanji or mixed)
2. Ignore punctuation, numbers and non-Japanese text
3. Extract each word separately, do not merge phrases
4. Skip duplicates: list a word only once

Return ONLY valid JSON in exactly this format:
{{"words": [{{"word": "japanese_word", "translation": "translation"}}]}}"""

GENERATE_STORY = """You are a Japanese teacher and storyteller. Write a short coherent story that uses the Japanese words below. Use ONLY JLPT N5 grammar.

RULES:
1. Use ALL of the given words
2. Basic words (particles, common verbs, adjectives) may be added
3. The story is 3-5 sentences long, one sentence per list entry
4. Give an accurate {language} translation for every sentence

Words:
{words}

Return ONLY valid JSON in exactly this format:
{{"story": ["sentence1", "sentence2"], "story_translate": ["translation1", "translation2"]}}"""

_DEFAULTS = {
    "extract_words_from_text": EXTRACT_WORDS_FROM_TEXT,
    "extract_words_from_image": EXTRACT_WORDS_FROM_IMAGE,
    "generate_story": GENERATE_STORY,
}


def get_prompt(name: str) -> str:
    """Prompt template by key, preferring the YAML override."""
    overrides = yaml_config.get("prompts") or {}
    return overrides.get(name) or _DEFAULTS[name]
