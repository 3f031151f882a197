# ------------------------------------------------------------------------------
# Stub transport for the Anthropic Messages API
# ------------------------------------------------------------------------------
from __future__ import annotations

import json
from typing import Any, Callable

import httpx
from anthropic import AsyncAnthropic

from execution_anthropic.base import ExecutionOptions

TEST_API_KEY = "sk-ant-REDACTED"


def message_payload(
        content: list[dict[str, Any]],
        *,
        model: str = "claude-3-opus-20240229",
        input_tokens: int = 12,
        output_tokens: int = 34,
) -> dict[str, Any]:
    """A Messages API response body as the vendor returns it."""
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "model": model,
        "content": content,
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }


class AnthropicStub:
    """
    Records every outbound request and answers with a canned response.

    `response` may be a JSON body, an httpx.Response, or an exception to raise
    from the transport (simulating a network failure).
    """

    def __init__(self, response: Any) -> None:
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self._response, Exception):
            raise self._response
        if isinstance(self._response, httpx.Response):
            return self._response
        assert request.method == "POST"
        assert request.url.path == "/v1/messages"
        return httpx.Response(status_code=200, json=self._response)

    @property
    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content.decode("utf-8"))

    def client_factory(self) -> Callable[[str, ExecutionOptions], AsyncAnthropic]:
        def factory(api_key: str, options: ExecutionOptions) -> AsyncAnthropic:
            return AsyncAnthropic(
                api_key=api_key,
                max_retries=0,
                http_client=httpx.AsyncClient(transport=httpx.MockTransport(self)),
            )

        return factory
