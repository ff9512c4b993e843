import json
import os

os.environ.setdefault("GEMINI_API_URL", "https://gemini.test/v1beta/models/test-model:generateContent")
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import httpx
import pytest

from config import Settings
from services.draft import ReplyGenerator

API_URL = "https://gemini.test/v1beta/models/test-model:generateContent"


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def settings():
    return Settings(gemini_api_url=API_URL, gemini_api_key="  secret-key \n", request_timeout=5)


@pytest.fixture
def sent():
    """Requests seen by the mock provider, in order."""
    return []


@pytest.fixture
def make_generator(settings, sent):
    def factory(handler):
        def recording(request):
            sent.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        return ReplyGenerator(settings, client)

    return factory


def sent_prompt(request):
    return json.loads(request.content)["contents"][0]["parts"][0]["text"]
