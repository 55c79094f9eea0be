"""
Gemini LLM Provider for AgentChain.

Uses Google's Gemini models in JSON mode for routing decisions.
"""

from __future__ import annotations

import logging
from typing import Any

from .base import (
    BaseLLMProvider,
    LLMConfig,
    LLMProviderError,
    LLMResponse,
    LLMUnavailableError,
    Message,
    MessageRole,
)

logger = logging.getLogger(__name__)


class GeminiLLMProvider(BaseLLMProvider):
    """
    Google Gemini LLM provider.

    Requirements:
    - google-generativeai package
    - AGENTCHAIN_GEMINI_API_KEY environment variable
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        super().__init__(default_model=model)
        self._api_key = api_key
        self._genai = None
        self._model_cache: dict[str, Any] = {}

    @property
    def name(self) -> str:
        return "gemini"

    def _configure_genai(self):
        if not self._api_key:
            raise LLMUnavailableError("Gemini API key is missing or invalid")

        if self._genai is None:
            try:
                import google.generativeai as genai
            except ImportError:
                raise ImportError(
                    "google-generativeai package is required for Gemini LLM. "
                    "Install with: pip install google-generativeai"
                )

            genai.configure(api_key=self._api_key)
            self._genai = genai
        return self._genai

    def _get_model(self, model_name: str, system_instruction: str, json_mode: bool):
        genai = self._configure_genai()

        cache_key = f"{model_name}:{system_instruction}:{json_mode}"
        if cache_key not in self._model_cache:
            model_config: dict[str, Any] = {}
            if json_mode:
                model_config["generation_config"] = {"response_mime_type": "application/json"}
            if system_instruction:
                model_config["system_instruction"] = system_instruction

            self._model_cache[cache_key] = genai.GenerativeModel(model_name, **model_config)

        return self._model_cache[cache_key]

    @staticmethod
    def _convert_messages(messages: list[Message]) -> tuple[str, list[dict[str, Any]]]:
        """Split system messages into the instruction; map assistant to 'model'."""
        system_parts: list[str] = []
        conversation: list[dict[str, Any]] = []

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_parts.append(msg.content)
            else:
                role = "user" if msg.role == MessageRole.USER else "model"
                conversation.append({"role": role, "parts": [msg.content]})

        return "\n\n".join(system_parts), conversation

    async def complete(
        self,
        messages: list[Message],
        config: LLMConfig | None = None,
    ) -> LLMResponse:
        if config is None:
            config = LLMConfig()

        system_instruction, conversation = self._convert_messages(messages)
        model_name = config.model or self.default_model
        model = self._get_model(model_name, system_instruction, config.response_format == "json")

        try:
            response = await model.generate_content_async(
                conversation,
                generation_config={
                    "temperature": config.temperature,
                    "max_output_tokens": config.max_tokens,
                },
            )
        except Exception as e:
            logger.error(f"[gemini] Completion error: {e}", exc_info=True)
            raise LLMProviderError(f"Gemini API Error: {e}") from e

        try:
            content = response.text
        except ValueError:
            logger.warning("[gemini] Response was blocked or empty")
            content = ""

        return LLMResponse(content=content, model=model_name, provider=self.name, raw=response)
