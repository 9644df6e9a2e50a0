"""Shared fakes for the upstream OpenAI API.

Living at the project root also puts `gpt_gateway` on sys.path for pytest.
"""

import pytest


class FakeResponse:
    def __init__(self, data=None, status_code: int = 200, headers=None, text=None):
        self._data = data
        self.status_code = status_code
        self.headers = headers or {}
        self.text = text if text is not None else ""

    def json(self):
        if self._data is None:
            raise ValueError("no JSON body")
        return self._data


class FakeAsyncClient:
    """Records every POST; returns `next_response` or raises `next_error`."""

    def __init__(self):
        self.calls = []
        self.init_kwargs = {}
        self.next_response = FakeResponse(completion_body())
        self.next_error = None

    def __call__(self, *args, **kwargs):
        # Stands in for the httpx.AsyncClient constructor
        self.init_kwargs = kwargs
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def post(self, path, headers=None, json=None):
        self.calls.append({"path": path, "headers": headers or {}, "json": json})
        if self.next_error is not None:
            raise self.next_error
        return self.next_response


def completion_body(
    content="你好",
    finish_reason="stop",
    prompt_tokens=12,
    completion_tokens=30,
    total_tokens=42,
):
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-3.5-turbo-0125",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": finish_reason,
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": total_tokens,
        },
    }


@pytest.fixture
def fake_upstream(monkeypatch):
    fake = FakeAsyncClient()
    monkeypatch.setattr("gpt_gateway.providers.openai_chat.httpx.AsyncClient", fake)
    return fake
