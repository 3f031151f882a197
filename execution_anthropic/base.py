"""Provider interface.

This module defines the neutral contract shared by every model backend. The
provider is:
- swappable (Anthropic, OpenAI, local, etc.)
- mockable (deterministic tests)
- stateless (one request in, one response out)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal, Sequence, Union

from execution_anthropic.schemas import ResponseFormat

Role = Literal['user', 'assistant', 'system', 'developer', 'tool']

# str | sequence of str | None
MessageContent = Union[str, Sequence[str], None]


@dataclass(frozen=True)
class Message:
    """A single role-tagged message.

    Attributes:
        role: Who produced the message.
        content: Text, an ordered sequence of text parts, or None.
        name: Optional author name.
    """

    role: Role
    content: MessageContent
    name: str | None = None


@dataclass
class Request:
    """A request to generate model output.

    Attributes:
        messages: Ordered conversation messages.
        model: Target model identifier.
        response_format: Optional structured-output descriptor.
        validator: Optional caller-side validator (ignored by providers).
    """

    messages: list[Message]
    model: str
    response_format: ResponseFormat | dict[str, Any] | None = None
    validator: Any | None = None

    def add_message(self, message: Message) -> None:
        self.messages.append(message)


@dataclass(frozen=True)
class ExecutionOptions:
    """Per-call overrides.

    `timeout` and `retries` are handed to the vendor client; providers do not
    enforce them.
    """

    api_key: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    timeout: float | None = None
    retries: int | None = None


@dataclass(frozen=True)
class Usage:
    """Token usage as reported by the vendor."""

    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class ToolCallFunction:
    """The function a tool call invokes; `arguments` is JSON text."""

    name: str
    arguments: str


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation in the neutral `{id, type, function: {name, arguments}}` shape."""

    id: str
    function: ToolCallFunction
    type: Literal['function'] = 'function'


@dataclass(frozen=True)
class ProviderResponse:
    """A normalized response.

    Attributes:
        content: Model output text (pretty-printed JSON for structured output).
        model: Model identifier the vendor actually used.
        usage: Token usage, when reported.
        tool_calls: Tool invocations, when the provider surfaces them.
    """

    content: str
    model: str
    usage: Usage | None = None
    tool_calls: list[ToolCall] | None = None


class Provider(ABC):
    """Model backend adapter."""

    name: str

    @abstractmethod
    async def execute(self, request: Request, options: ExecutionOptions | None = None) -> ProviderResponse:
        """Execute a request against the backend."""
        raise NotImplementedError

    def supports_model(self, model: str) -> bool:
        return False
