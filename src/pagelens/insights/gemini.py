"""
Google Gemini text-generation collaborator.
"""

from __future__ import annotations

import google.generativeai as genai
import structlog

logger = structlog.get_logger(__name__)


class GeminiTextGenerator:
    """Thin async wrapper over a Gemini generative model.

    Constructed explicitly with its credentials; nothing is initialised on
    first use.
    """

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash-lite") -> None:
        if not api_key:
            raise ValueError("Gemini API key is not configured")
        genai.configure(api_key=api_key)
        self.model_name = model
        self._model = genai.GenerativeModel(model)
        logger.info("Gemini text generator initialized", model=model)

    async def generate(self, prompt: str) -> str:
        response = await self._model.generate_content_async(prompt)
        return response.text.strip()
