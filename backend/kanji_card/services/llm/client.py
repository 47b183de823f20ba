"""
LLM Client via LiteLLM.

LiteLLM provides a unified interface to many LLM providers using the
format "provider/model-name". The vocabulary core uses it for two things:
extracting words from text or images, and writing a short story for each
full set.

Calls are made once. Retrying is left to the caller; the vocabulary core
never retries.

See: https://docs.litellm.ai/

Usage:
    from kanji_card.services.llm import get_llm_client, build_messages

    client = get_llm_client()
    data = await client.complete(
        messages=build_messages("Extract words from ..."),
        json_mode=True,
    )
"""

import base64
import json
import logging
import os
import time
from functools import lru_cache
from typing import Any, Optional, Union

import litellm
from litellm import acompletion

from kanji_card.config.settings import settings

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, Any]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


def build_image_messages(
    prompt: str,
    image_data: bytes,
    mime_type: str = "image/png",
) -> list[dict[str, Any]]:
    """Build a single user message carrying a prompt and an inline image."""
    encoded = base64.b64encode(image_data).decode("ascii")
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                },
            ],
        }
    ]


class LLMClient:
    """
    Thin async wrapper around LiteLLM completions.

    Attributes:
        text_model: Model for text-only prompts
        vision_model: Model for prompts that carry an image
    """

    def __init__(
        self,
        text_model: Optional[str] = None,
        vision_model: Optional[str] = None,
    ):
        self.text_model = text_model or settings.TEXT_MODEL
        self.vision_model = vision_model or settings.VISION_MODEL
        self._validate_api_keys()

    def _validate_api_keys(self):
        """Warn when no provider key is configured."""
        available_keys = []

        if os.getenv("OPENAI_API_KEY") or settings.OPENAI_API_KEY:
            available_keys.append("OpenAI")
        if os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY:
            available_keys.append("Anthropic")

        if not available_keys:
            logger.warning(
                "No LLM API keys configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY"
            )
        else:
            logger.info(f"LLM client initialized with providers: {available_keys}")

    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.1,
        max_tokens: int = 4096,
        json_mode: bool = False,
        model: Optional[str] = None,
    ) -> Union[str, Any]:
        """
        Generate a completion.

        Args:
            messages: Chat messages in OpenAI format
            temperature: Sampling temperature (0-1, lower = more deterministic)
            max_tokens: Maximum tokens in response
            json_mode: Request JSON output and return it parsed
            model: Model override (defaults to text_model)

        Returns:
            Response text, or the parsed JSON value if json_mode

        Raises:
            json.JSONDecodeError: If json_mode and the response isn't JSON
            Exception: Whatever LiteLLM raises for provider failures
        """
        model = model or self.text_model

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        start_time = time.perf_counter()

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            logger.error(f"LLM completion failed after {latency_ms}ms: {e} (model={model})")
            raise

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(f"LLM completion [{model}] took {latency_ms}ms")

        content = response.choices[0].message.content

        if json_mode:
            try:
                content = json.loads(content)
            except json.JSONDecodeError:
                logger.warning(f"LLM returned invalid JSON (model={model})")
                raise

        return content


@lru_cache()
def get_llm_client() -> LLMClient:
    """Get the process-wide LLM client."""
    return LLMClient()