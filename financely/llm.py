"""
llm.py

Gemini-backed text generation used by the chat assistant.

The advice responder only needs something with an async
``generate(prompt) -> str``; GeminiClient is the production
implementation, tests pass their own.
"""

import logging
from typing import Optional, Protocol

import google.generativeai as genai

from financely import config

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


class GeminiClient:
    def __init__(self, api_key: str, model_name: str = config.MODEL_NAME):
        if not api_key:
            raise ValueError("GeminiClient needs an API key")
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name)

    async def generate(self, prompt: str) -> str:
        response = await self._model.generate_content_async(prompt)
        # .text raises ValueError when the candidate was blocked
        text = response.text
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"{self.model_name} returned an empty response")
        return text


def get_client(api_key: Optional[str] = None) -> Optional[GeminiClient]:
    """Return a configured client, or None when no credential is available."""
    key = api_key or config.get_api_key()
    if not key:
        logger.info("GEMINI_API_KEY not configured; chat will use templated answers")
        return None
    return GeminiClient(key)
