"""
OpenAI chat-completions adapter used for resume content generation.
"""

from typing import Any, Dict, Optional, Tuple

from shared.errors import ErrorKind

from ..gateway.client import ProviderGateway


RESUME_WRITER_PROMPT = (
    "You are a professional resume writer and career coach. Your task is to help users create "
    "professional, concise, and impactful resume content. Focus on achievements and skills that "
    "employers value."
)

OPENAI_ERROR_KINDS: Dict[str, ErrorKind] = {
    "invalid_api_key": ErrorKind.KEY_INVALID,
    "authentication_error": ErrorKind.KEY_INVALID,
    "rate_limit_exceeded": ErrorKind.RATE_LIMITED,
    "insufficient_quota": ErrorKind.RATE_LIMITED,
    "invalid_request_error": ErrorKind.BAD_PARAMETERS,
    "server_error": ErrorKind.SERVICE_UNAVAILABLE,
}


def detect_openai_error(payload: Any) -> Optional[Tuple[ErrorKind, str]]:
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return None
    kind = OPENAI_ERROR_KINDS.get(error.get("code") or "") or OPENAI_ERROR_KINDS.get(error.get("type") or "")
    return kind or ErrorKind.UNKNOWN, error.get("message") or "Unknown error from OpenAI"


def shape_completion(payload: Any) -> str:
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not choices:
        return ""
    message = choices[0].get("message") or {}
    return message.get("content") or ""


class OpenAIClient:
    def __init__(self, gateway: ProviderGateway, model: str):
        self.gateway = gateway
        self.model = model

    async def complete(self, prompt: str) -> Any:
        request = self.gateway.build_request(
            "/chat/completions",
            method="POST",
            json_body={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": RESUME_WRITER_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                "temperature": 0.7,
                "max_tokens": 500,
            },
        )
        return await self.gateway.fetch_endpoint(request, "content generation")
