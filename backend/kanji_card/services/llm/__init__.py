"""
LLM Service Module

Provides a unified interface to LLM providers via LiteLLM.

Usage:
    from kanji_card.services.llm import get_llm_client, build_messages

    client = get_llm_client()
    text = await client.complete(messages=build_messages("Hello"))
"""

from kanji_card.services.llm.client import (
    LLMClient,
    build_image_messages,
    build_messages,
    get_llm_client,
)

__all__ = [
    "LLMClient",
    "build_image_messages",
    "build_messages",
    "get_llm_client",
]
