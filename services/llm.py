import logging
from typing import Any, Dict, Optional

import httpx

from config import Settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-goog-api-key"

# candidates[0].content.parts[0].text
REPLY_PATH = ("candidates", 0, "content", "parts", 0, "text")


class ProviderError(Exception):
    kind = "transport"


class ProviderTransportError(ProviderError):
    kind = "transport"


class MalformedResponseError(ProviderError):
    kind = "malformed_response"


class UnexpectedShapeError(ProviderError):
    kind = "unexpected_shape"


def build_envelope(prompt: str) -> Dict[str, Any]:
    return {"contents": [{"parts": [{"text": prompt}]}]}


def build_headers(settings: Settings) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        API_KEY_HEADER: settings.gemini_api_key.strip(),
    }


def extract_text(data: Any) -> str:
    """Pull the first candidate's first text part out of a parsed response."""
    node = data
    walked = ""
    for step in REPLY_PATH:
        if isinstance(step, int):
            if not isinstance(node, list) or len(node) <= step:
                raise UnexpectedShapeError(f"response has no {walked}[{step}]")
            walked = f"{walked}[{step}]"
        else:
            where = f"{walked}.{step}" if walked else step
            if not isinstance(node, dict) or step not in node:
                raise UnexpectedShapeError(f"response has no {where}")
            walked = where
        node = node[step]

    if not isinstance(node, str):
        raise UnexpectedShapeError(f"{walked} is {type(node).__name__}, expected a string")
    return node


async def complete(
    client: httpx.AsyncClient,
    settings: Settings,
    prompt: str,
    timeout: Optional[float] = None,
) -> str:
    """Send one prompt to Gemini and return the generated text."""
    if timeout is None:
        timeout = settings.request_timeout

    try:
        r = await client.post(
            settings.gemini_api_url,
            headers=build_headers(settings),
            json=build_envelope(prompt),
            timeout=timeout,
        )
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ProviderTransportError(
            f"provider returned HTTP {e.response.status_code}: {e.response.text[:200]}"
        ) from e
    except httpx.TimeoutException as e:
        raise ProviderTransportError(f"provider timed out after {timeout}s") from e
    except httpx.RequestError as e:
        raise ProviderTransportError(f"could not reach provider: {e!r}") from e
    except (httpx.InvalidURL, UnicodeEncodeError) as e:
        raise ProviderTransportError(f"could not build provider request: {e}") from e

    try:
        data = r.json()
    except ValueError as e:
        raise MalformedResponseError(f"response is not valid JSON: {e}") from e

    logger.debug("Gemini response keys: %s", list(data) if isinstance(data, dict) else type(data).__name__)
    return extract_text(data)
