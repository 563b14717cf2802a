"""
Career-coach chat and resume content generation.
"""

from typing import Sequence

from shared.logging import get_logger

from ..adapters.gemini_client import GeminiClient, shape_reply
from ..adapters.openai_client import OpenAIClient, shape_completion
from ..domain.results import ChatMessage


class ChatService:
    """Front for the generative providers.

    Failures propagate as ``ClassifiedError``; the HTTP layer turns them into
    user-facing messages.
    """

    def __init__(self, gemini: GeminiClient, openai: OpenAIClient):
        self.gemini = gemini
        self.openai = openai
        self.logger = get_logger("gateway.chat")

    async def generate_chat_response(self, messages: Sequence[ChatMessage]) -> str:
        self.logger.info("Generating chat response", message_count=len(messages))
        payload = await self.gemini.generate(messages)
        return shape_reply(payload)

    async def generate_content(self, prompt: str) -> str:
        self.logger.info("Generating resume content", prompt_length=len(prompt))
        payload = await self.openai.complete(prompt)
        return shape_completion(payload)
