"""
Gemini chat adapter for the Gateway.

Uses the REST ``generateContent`` endpoint so the call goes through the
same gateway as every other provider.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from shared.errors import ErrorKind

from ..domain.results import ChatMessage
from ..gateway.client import ProviderGateway


CAREER_COACH_INSTRUCTION = (
    "You are a professional career coach and job search expert on the PathWise platform. "
    "Always provide concise, practical career advice. Be direct and avoid unnecessary pleasantries. "
    "Keep responses brief with short paragraphs (2-3 sentences). Focus on actionable advice related "
    "to career development, job searching, skill improvement, and professional growth."
)

DEFAULT_PROMPT = "How can I help with your career questions?"
EMPTY_REPLY = "I'm sorry, I couldn't generate a response. Please try again."

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topP": 0.95,
    "topK": 40,
    "maxOutputTokens": 500,
}

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

# google.rpc status names carried in {"error": {"status": ...}}
GEMINI_STATUS_KINDS: Dict[str, ErrorKind] = {
    "INVALID_ARGUMENT": ErrorKind.BAD_PARAMETERS,
    "FAILED_PRECONDITION": ErrorKind.BAD_PARAMETERS,
    "NOT_FOUND": ErrorKind.BAD_PARAMETERS,
    "UNAUTHENTICATED": ErrorKind.KEY_INVALID,
    "PERMISSION_DENIED": ErrorKind.KEY_INVALID,
    "RESOURCE_EXHAUSTED": ErrorKind.RATE_LIMITED,
    "UNAVAILABLE": ErrorKind.SERVICE_UNAVAILABLE,
    "INTERNAL": ErrorKind.SERVICE_UNAVAILABLE,
    "DEADLINE_EXCEEDED": ErrorKind.SERVICE_UNAVAILABLE,
}


def detect_gemini_error(payload: Any) -> Optional[Tuple[ErrorKind, str]]:
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return None
    kind = GEMINI_STATUS_KINDS.get(error.get("status") or "", ErrorKind.UNKNOWN)
    return kind, error.get("message") or "Unknown error from Gemini"


def build_contents(messages: Sequence[ChatMessage]) -> Tuple[List[Dict[str, Any]], List[str]]:
    """Split a conversation into Gemini ``contents`` and extra system text."""
    contents: List[Dict[str, Any]] = []
    system_notes: List[str] = []
    for message in messages:
        if message.role == "system":
            system_notes.append(message.content)
            continue
        role = "model" if message.role == "assistant" else "user"
        contents.append({"role": role, "parts": [{"text": message.content}]})

    if not any(item["role"] == "user" for item in contents):
        contents.append({"role": "user", "parts": [{"text": DEFAULT_PROMPT}]})
    return contents, system_notes


def shape_reply(payload: Any) -> str:
    """Text of the first candidate, or a fixed apology when there is none."""
    candidates = payload.get("candidates") if isinstance(payload, dict) else None
    if not candidates:
        return EMPTY_REPLY

    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    return text or EMPTY_REPLY


class GeminiClient:
    def __init__(self, gateway: ProviderGateway, model: str):
        self.gateway = gateway
        self.model = model

    async def generate(self, messages: Sequence[ChatMessage]) -> Any:
        """Raw ``generateContent`` payload for a conversation."""
        contents, system_notes = build_contents(messages)
        instruction = "\n\n".join([CAREER_COACH_INSTRUCTION, *system_notes])
        request = self.gateway.build_request(
            f"/models/{self.model}:generateContent",
            method="POST",
            json_body={
                "systemInstruction": {"parts": [{"text": instruction}]},
                "contents": contents,
                "generationConfig": GENERATION_CONFIG,
                "safetySettings": SAFETY_SETTINGS,
            },
        )
        return await self.gateway.fetch_endpoint(request, "chat response")
