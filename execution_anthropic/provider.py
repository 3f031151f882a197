"""Anthropic Messages API provider.

Translates the neutral Request into a `messages.create` call and normalizes
the result into a ProviderResponse.

Rules:
- No retries here (callers own retry policy).
- No streaming.
- Every call builds its own client; nothing is shared between calls.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Sequence

import pydantic
from anthropic import AsyncAnthropic

from execution_anthropic.base import (
    ExecutionOptions,
    Message,
    MessageContent,
    Provider,
    ProviderResponse,
    Request,
    Usage,
)
from execution_anthropic.config import Settings, get_settings
from execution_anthropic.errors import ConfigurationError, CredentialError, TransportError, ValidationError
from execution_anthropic.observability import log_event, new_trace_id, normalize_usage, traced
from execution_anthropic.redaction import ErrorSanitizer, SecretRedactor, default_redactor
from execution_anthropic.schemas import build_structured_output_tool, coerce_response_format

ClientFactory = Callable[[str, ExecutionOptions], AsyncAnthropic]

_SYSTEM_ROLES = ('system', 'developer')


def default_client_factory(api_key: str, options: ExecutionOptions) -> AsyncAnthropic:
    """Build a vendor client. Timeout and retries are enforced by the client, not the provider."""
    kwargs: dict[str, Any] = {'api_key': api_key}
    if options.timeout is not None:
        kwargs['timeout'] = options.timeout
    if options.retries is not None:
        kwargs['max_retries'] = options.retries
    return AsyncAnthropic(**kwargs)


class AnthropicProvider(Provider):
    """Provider backed by Anthropic's Messages API."""

    name = 'anthropic'

    def __init__(
            self,
            *,
            redactor: SecretRedactor | None = None,
            sanitizer: ErrorSanitizer | None = None,
            client_factory: ClientFactory | None = None,
            settings_factory: Callable[[], Settings] = get_settings,
    ) -> None:
        """Create a provider.

        Args:
            redactor: Key-format registry used to validate credentials.
            sanitizer: Converts client failures into TransportErrors. Built from
                settings on each call when omitted.
            client_factory: Builds the vendor client for one call.
            settings_factory: Reads configuration for one call.
        """
        self._redactor = redactor or (sanitizer.redactor if sanitizer else None)
        self._sanitizer = sanitizer
        self._client_factory = client_factory or default_client_factory
        self._settings_factory = settings_factory

    def _load_settings(self) -> Settings:
        invalid: list[str] = []
        try:
            return self._settings_factory()
        except pydantic.ValidationError as exc:
            # Field names only; the rejected input values may hold secrets.
            invalid = sorted({str(err['loc'][0]) for err in exc.errors() if err.get('loc')})
        raise ConfigurationError(f'Invalid provider settings: {", ".join(invalid) or "unknown field"}')

    def supports_model(self, model: str) -> bool:
        if not model:
            return False
        return model.startswith('claude')

    async def execute(self, request: Request, options: ExecutionOptions | None = None) -> ProviderResponse:
        """Execute a request against Anthropic.

        Raises:
            ConfigurationError: Settings in the environment are invalid.
            CredentialError: No API key in options or ANTHROPIC_API_KEY.
            ValidationError: The API key does not match the Anthropic key format.
            TransportError: The client call failed (message is credential-free).
        """
        options = options or ExecutionOptions()
        settings = self._load_settings()

        api_key = options.api_key or settings.anthropic_api_key
        if not api_key:
            raise CredentialError('Anthropic API key is required. Set ANTHROPIC_API_KEY environment variable.')

        redactor = self._redactor or default_redactor(settings.redaction_text)
        if not redactor.validate_key(api_key, self.name).valid:
            raise ValidationError('Invalid Anthropic API key format')

        sanitizer = self._sanitizer or ErrorSanitizer.from_settings(settings, redactor)
        model = options.model or request.model or settings.anthropic_default_model
        response_format = coerce_response_format(request.response_format)
        structured = response_format is not None and response_format.is_json_schema

        system_prompt, turns = split_messages(request.messages)
        params: dict[str, Any] = {
            'model': model,
            'messages': turns,
            'max_tokens': options.max_tokens or settings.anthropic_max_tokens,
        }
        if system_prompt:
            params['system'] = system_prompt
        if options.temperature is not None:
            params['temperature'] = options.temperature
        if structured:
            spec = response_format.json_schema
            params['tools'] = [build_structured_output_tool(spec)]
            params['tool_choice'] = {'type': 'tool', 'name': spec.name}

        trace_id = new_trace_id()
        log_event(
            'provider.request.start',
            trace_id=trace_id,
            provider=self.name,
            model=model,
            turns=len(turns),
            structured=structured,
        )

        failure: TransportError | None = None
        with traced('anthropic.messages.create', trace_id=trace_id, model=model) as span:
            try:
                async with self._client_factory(api_key, options) as client:
                    response = await client.messages.create(**params)
                text = extract_tool_output(response) if structured else extract_text(response)
                usage = extract_usage(response)
            except Exception as exc:  # noqa: BLE001 - boundary wrapper for client failures
                failure = sanitizer.sanitize(
                    exc,
                    provider=self.name,
                    secrets=(api_key,),
                    correlation_id=trace_id,
                )
            else:
                span.attributes['usage'] = normalize_usage(usage)

            if failure is not None:
                log_event(
                    'provider.request.failed',
                    trace_id=trace_id,
                    provider=self.name,
                    error_type=failure.error_type,
                    status_code=failure.status_code,
                )
                # Raised outside the handler so the original exception is not attached as context.
                raise failure

        return ProviderResponse(content=text, model=response.model, usage=usage)


def serialize_content(content: MessageContent) -> str:
    """Render message content as a single string (JSON for non-strings)."""
    if isinstance(content, str):
        return content
    if content is None:
        return json.dumps(None)
    return json.dumps(list(content), ensure_ascii=False, separators=(',', ':'))


def split_messages(messages: Sequence[Message]) -> tuple[str, list[dict[str, str]]]:
    """Separate system/developer messages from conversation turns.

    Returns:
        The trimmed system prompt (blank-line separated) and the ordered turns.
    """
    system_prompt = ''
    turns: list[dict[str, str]] = []
    for msg in messages:
        if msg.role in _SYSTEM_ROLES:
            system_prompt += serialize_content(msg.content) + '\n\n'
        else:
            turns.append({'role': msg.role, 'content': serialize_content(msg.content)})
    return system_prompt.strip(), turns


def extract_tool_output(response: Any) -> str:
    # No tool_use block means the model declined the forced tool; that is an empty result, not an error.
    for block in response.content or []:
        if getattr(block, 'type', None) == 'tool_use':
            return json.dumps(block.input, indent=2, ensure_ascii=False)
    return ''


def extract_text(response: Any) -> str:
    if not response.content:
        return ''
    first = response.content[0]
    if getattr(first, 'type', None) == 'text':
        return first.text
    return ''


def extract_usage(response: Any) -> Usage | None:
    usage = getattr(response, 'usage', None)
    if usage is None:
        return None
    return Usage(input_tokens=usage.input_tokens, output_tokens=usage.output_tokens)


def create_anthropic_provider(**kwargs: Any) -> AnthropicProvider:
    """Create a new Anthropic provider instance."""
    return AnthropicProvider(**kwargs)
