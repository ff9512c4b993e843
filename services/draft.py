import logging
from typing import Optional

import httpx

from config import Settings
from models import GenerationRequest, ReplyResult
from .llm import ProviderError, complete

logger = logging.getLogger(__name__)

INSTRUCTION = (
    "Generate only a professional email reply for the following email content. "
    "Do not include a subject line or any introductory text. "
    "Write exactly one email reply. "
    "Include an appropriate greeting (such as Hello) and a sign-off (such as Sincerely or Best regards)."
)

SEPARATOR = "\nOriginal email:\n"


def build_prompt(request: GenerationRequest) -> str:
    prompt = INSTRUCTION
    if request.tone:
        prompt += f" Use a {request.tone} tone."
    return prompt + SEPARATOR + request.email_content


class ReplyGenerator:
    """
    Turns an email into a drafted reply with a single Gemini call.

    Holds only read-only state (settings and a shared AsyncClient), so one
    instance can serve concurrent requests. Cancel the awaiting task to
    abort the outbound call.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    async def generate_result(
        self, request: GenerationRequest, timeout: Optional[float] = None
    ) -> ReplyResult:
        prompt = build_prompt(request)
        logger.info(
            "Drafting reply (tone=%r, %d chars of email)",
            request.tone or None,
            len(request.email_content),
        )
        try:
            text = await complete(self.client, self.settings, prompt, timeout=timeout)
        except ProviderError as e:
            logger.warning("Reply generation failed [%s]: %s", e.kind, e)
            return ReplyResult.failure(e.kind, str(e))
        except Exception as e:
            logger.exception("Unexpected error while drafting reply")
            return ReplyResult.failure("transport", f"{type(e).__name__}: {e}")
        return ReplyResult.success(text)

    async def generate(self, request: GenerationRequest, timeout: Optional[float] = None) -> str:
        """Always returns text: the reply, or 'Error processing request: ...'."""
        result = await self.generate_result(request, timeout=timeout)
        return result.as_text()
