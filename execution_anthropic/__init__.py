"""Anthropic provider for LLM execution.

This package intentionally contains ONLY the provider adapter.

Rules:
- No retries or rate limiting here.
- No streaming.
- No session state.

Those belong in calling layers.
"""

from .base import (
    ExecutionOptions,
    Message,
    Provider,
    ProviderResponse,
    Request,
    ToolCall,
    ToolCallFunction,
    Usage,
)
from .errors import ConfigurationError, CredentialError, ProviderError, TransportError, ValidationError
from .provider import AnthropicProvider, create_anthropic_provider
from .redaction import ErrorSanitizer, KeyPattern, SecretRedactor, default_redactor
from .schemas import JsonSchemaSpec, ResponseFormat

VERSION = '0.0.1'

__all__ = [
    'AnthropicProvider',
    'ConfigurationError',
    'CredentialError',
    'ErrorSanitizer',
    'ExecutionOptions',
    'JsonSchemaSpec',
    'KeyPattern',
    'Message',
    'Provider',
    'ProviderError',
    'ProviderResponse',
    'Request',
    'ResponseFormat',
    'SecretRedactor',
    'ToolCall',
    'ToolCallFunction',
    'TransportError',
    'Usage',
    'ValidationError',
    'VERSION',
    'create_anthropic_provider',
    'default_redactor',
]
