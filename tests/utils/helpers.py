"""Test helper functions and fakes."""

import json
from collections import deque
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Sequence, Union
import httpx
from habitus.models.chat import ChatTurn


class MutableClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeGateway:
    """
    Stand-in for ModelGateway.

    Queue results with `respond` (text) or `fail` (exception); each call pops
    the next one. Every call's turns are recorded.
    """

    def __init__(self, default_response: str = "Default model response."):
        self.default_response = default_response
        self.calls: list[list[ChatTurn]] = []
        self._results: deque = deque()
        self.closed = False

    def respond(self, text: str) -> "FakeGateway":
        self._results.append(text)
        return self

    def fail(self, error: Exception) -> "FakeGateway":
        self._results.append(error)
        return self

    async def complete(self, turns: Sequence[ChatTurn], stream: bool = False) -> str:
        self.calls.append(list(turns))
        result: Union[str, Exception] = self._results.popleft() if self._results else self.default_response
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.calls)


def create_chat_completion(content: Optional[str] = "Model says hi.", finish_reason: str = "stop") -> Dict[str, Any]:
    """Create a chat-completions success body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": finish_reason,
            }
        ],
    }


def create_sse_body(chunks: Sequence[str]) -> str:
    """Create a server-sent events body streaming the given content chunks."""
    lines = []
    for chunk in chunks:
        payload = {"choices": [{"index": 0, "delta": {"content": chunk}, "finish_reason": None}]}
        lines.append(f"data: {json.dumps(payload)}\n\n")
    lines.append("data: [DONE]\n\n")
    return "".join(lines)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def json_response(status_code: int, body: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None):
    """Handler that always returns the given JSON response."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body or {}, headers=headers)
    return handler
