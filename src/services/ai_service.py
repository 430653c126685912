"""Generative text model access using Google GenAI."""

import logging
from typing import Optional, Protocol

from google.genai import Client
from google.genai import types

from models.moment import GenerationSettings
from utils.retry import classify_error, retry_api_call

logger = logging.getLogger(__name__)


class TextModel(Protocol):
    """Anything that turns a prompt into raw completion text."""

    async def generate(self, prompt: str, settings: GenerationSettings) -> str:
        ...


class AIService:
    """Gemini-backed text model used by moment discovery."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        client: Optional[Client] = None,
    ):
        """Initialize Google GenAI client.

        Args:
            api_key: Google GenAI API key
            model_name: Gemini model to use
            client: Pre-built client (tests inject a mock here)
        """
        self.api_key = api_key
        self.model_name = model_name
        self.client = client or Client(api_key=api_key)

        logger.info(f"Initialized AI service with model: {model_name}")

    @retry_api_call(max_retries=2, base_delay=2.0)
    async def generate(self, prompt: str, settings: GenerationSettings) -> str:
        """Run one completion and return its raw text.

        Args:
            prompt: Full prompt text
            settings: Sampling configuration for this call

        Returns:
            Completion text, possibly wrapped in prose or markdown

        Raises:
            NetworkError, APIRateLimitError, TemporaryServiceError: Transient failures
            Exception: Anything else the SDK raises
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=settings.temperature,
                    top_p=settings.top_p,
                    top_k=settings.top_k,
                    max_output_tokens=settings.max_output_tokens,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            classified = classify_error(e)
            if classified is e:
                raise
            raise classified from e

        text = response.text or ""
        logger.debug(f"Gemini returned {len(text)} characters")
        return text
