"""Credential redaction for provider errors.

Core principles:
- Key formats are registered explicitly on a redactor instance (no global state)
- Keys are validated against the vendor format before any network call
- Error text is redacted and bounded before it leaves a provider
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from execution_anthropic.config import Settings
from execution_anthropic.errors import TransportError

_DEFAULT_REDACTION_TEXT = '[REDACTED]'
_DEFAULT_MAX_MESSAGE_CHARS = 500


@dataclass(frozen=True)
class KeyPattern:
    name: str
    patterns: tuple[re.Pattern[str], ...]
    validator: re.Pattern[str]
    description: str = ''


@dataclass(frozen=True)
class KeyValidation:
    valid: bool
    reason: str | None = None


ANTHROPIC_KEY_PATTERN = KeyPattern(
    name='anthropic',
    patterns=(
        re.compile(r'sk-ant-api\d+-[a-zA-Z0-9_-]+'),
        re.compile(r'sk-ant-[a-zA-Z0-9_-]+'),
    ),
    validator=re.compile(r'^sk-ant(-api\d+)?-[a-zA-Z0-9_-]+$'),
    description='Anthropic API keys',
)


class SecretRedactor:
    """Registry of credential formats used to validate and scrub text."""

    def __init__(self, redaction_text: str = _DEFAULT_REDACTION_TEXT) -> None:
        self._redaction_text = redaction_text
        self._patterns: dict[str, KeyPattern] = {}

    def register(self, pattern: KeyPattern) -> None:
        self._patterns[pattern.name] = pattern

    def validate_key(self, key: str, name: str) -> KeyValidation:
        pattern = self._patterns.get(name)
        if pattern is None:
            return KeyValidation(valid=False, reason=f"No key pattern registered for '{name}'")
        if not pattern.validator.fullmatch(key):
            return KeyValidation(valid=False, reason=f'Key does not match {pattern.description or name} format')
        return KeyValidation(valid=True)

    def redact(self, text: str, extra_secrets: Iterable[str] = ()) -> str:
        """Replace literal secrets and every registered key pattern in text."""
        # Longest first so a secret containing another is fully replaced.
        for secret in sorted({s for s in extra_secrets if s}, key=len, reverse=True):
            text = text.replace(secret, self._redaction_text)
        for pattern in self._patterns.values():
            for regex in pattern.patterns:
                text = regex.sub(self._redaction_text, text)
        return text


def default_redactor(redaction_text: str = _DEFAULT_REDACTION_TEXT) -> SecretRedactor:
    """Return a fresh redactor with the Anthropic key formats registered."""
    redactor = SecretRedactor(redaction_text=redaction_text)
    redactor.register(ANTHROPIC_KEY_PATTERN)
    return redactor


class ErrorSanitizer:
    """Convert arbitrary client failures into credential-free TransportErrors."""

    def __init__(
            self,
            redactor: SecretRedactor,
            *,
            production: bool = False,
            max_message_length: int = _DEFAULT_MAX_MESSAGE_CHARS,
    ) -> None:
        self._redactor = redactor
        self._production = production
        self._max_message_length = max_message_length

    @classmethod
    def from_settings(cls, settings: Settings, redactor: SecretRedactor | None = None) -> 'ErrorSanitizer':
        return cls(
            redactor or default_redactor(settings.redaction_text),
            production=settings.is_production,
            max_message_length=settings.error_max_message_length,
        )

    @property
    def redactor(self) -> SecretRedactor:
        return self._redactor

    def sanitize(
            self,
            exc: BaseException,
            *,
            provider: str,
            secrets: Iterable[str] = (),
            correlation_id: str | None = None,
    ) -> TransportError:
        error_type = type(exc).__name__
        status_code = getattr(exc, 'status_code', None)
        if not isinstance(status_code, int):
            status_code = None

        if self._production:
            message = f'{provider} request failed ({error_type})'
            if status_code is not None:
                message += f' [status {status_code}]'
        else:
            detail = self._redactor.redact(str(exc), extra_secrets=secrets)
            message = f'{provider} request failed ({error_type}): {detail}'

        message = self.bound(message)
        if correlation_id:
            message = f'{message} [correlation_id={correlation_id}]'

        return TransportError(
            message,
            provider=provider,
            correlation_id=correlation_id,
            error_type=error_type,
            status_code=status_code,
        )

    def bound(self, text: str) -> str:
        text = text.strip()
        if len(text) > self._max_message_length:
            text = text[:self._max_message_length] + '…'
        return text
