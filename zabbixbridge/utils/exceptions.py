"""
Exception hierarchy and error handling utilities for zabbixbridge.

Provides:
- Error classes for the five failure kinds a call can end in
- Error categorization (retryable, fatal, validation, ...)
- Safe error message formatting (no credentials in logs)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


class ZabbixBridgeError(Exception):
    """Base exception for all zabbixbridge errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(ZabbixBridgeError):
    """Payload rejected locally before anything is sent."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)


class TransportFailure(ZabbixBridgeError):
    """Network, HTTP or envelope-level failure. Never interpreted by the client."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "TRANSPORT_ERROR",
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        if code == "TRANSPORT_TIMEOUT":
            category = ErrorCategory.TIMEOUT
        elif retryable:
            category = ErrorCategory.RETRYABLE
        else:
            category = ErrorCategory.FATAL
        super().__init__(
            message,
            code=code,
            category=category,
            details={"status_code": status_code, "retryable": retryable},
        )
        self.status_code = status_code
        self.retryable = retryable


class ProtocolError(ZabbixBridgeError):
    """Structured error reported by the server in the response envelope."""

    def __init__(self, rpc_code: int, rpc_message: str, rpc_data: str = "", method: str | None = None):
        super().__init__(
            f"{rpc_code} ({rpc_message}): {rpc_data}",
            code="PROTOCOL_ERROR",
            category=_category_for_rpc_code(rpc_code, rpc_data),
            details={"rpc_code": rpc_code, "rpc_message": rpc_message, "rpc_data": rpc_data, "method": method},
        )
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message
        self.rpc_data = rpc_data
        self.method = method


class CardinalityError(ZabbixBridgeError):
    """A lookup that expected an exact number of results got a different number."""

    def __init__(self, count: int, expected: int = 1, resource: str | None = None):
        if expected == 1:
            message = f"Expected exactly one result, got {count}."
        else:
            message = f"Expected {expected}, got {count}."
        super().__init__(
            message,
            code="CARDINALITY_ERROR",
            category=ErrorCategory.NOT_FOUND if count == 0 else ErrorCategory.VALIDATION,
            details={"count": count, "expected": expected, "resource": resource},
        )
        self.count = count
        self.expected = expected
        self.resource = resource


class UnsupportedFeatureError(ZabbixBridgeError):
    """Operation denied locally because the detected server version lacks the feature."""

    def __init__(self, feature: str, version: str):
        super().__init__(
            f"{feature} not supported in Zabbix version {version or 'unknown'}",
            code="UNSUPPORTED_FEATURE",
            category=ErrorCategory.UNSUPPORTED,
            details={"feature": feature, "version": version},
        )
        self.feature = feature
        self.version = version


class DecodeError(ZabbixBridgeError):
    """A payload field matched neither known wire shape."""

    def __init__(self, field: str, value: Any, reason: str | None = None):
        message = f"Cannot decode field '{field}' from {type(value).__name__}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            code="DECODE_ERROR",
            category=ErrorCategory.VALIDATION,
            details={"field": field, "value_type": type(value).__name__},
        )
        self.field = field


def _category_for_rpc_code(rpc_code: int, rpc_data: str) -> ErrorCategory:
    data = (rpc_data or "").lower()
    if "permission" in data or "not authorized" in data or "session terminated" in data:
        return ErrorCategory.PERMISSION
    if rpc_code in (-32600, -32602, -32700):
        return ErrorCategory.VALIDATION
    return ErrorCategory.FATAL


# Patterns for sensitive data that should be redacted
_SENSITIVE_PATTERNS = [
    (re.compile(r'("password"\s*:\s*)"(?:[^"\\]|\\.)*"'), r'\1"[REDACTED]"'),
    (re.compile(r'("auth"\s*:\s*)"(?:[^"\\]|\\.)*"'), r'\1"[REDACTED]"'),
    (re.compile(r'("result"\s*:\s*)"([0-9a-f]{32}|[0-9a-f]{64})"'), r'\1"[REDACTED]"'),
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+"), r"\1[REDACTED]"),
    (re.compile(r"(password[=:]\s*)\S+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(https?://[^:/\s]+:)[^@\s]+(@)"), r"\1[REDACTED]\2"),
]


def sanitize_error_message(message: str) -> str:
    """Remove credentials and tokens from a message or trace line."""
    result = message
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception into (error_code, category, is_retryable).

    Callers use this to decide on their own retry policy; the client never retries.
    """
    if isinstance(exc, TransportFailure):
        return exc.code, exc.category, exc.retryable
    if isinstance(exc, ZabbixBridgeError):
        return exc.code, exc.category, exc.category == ErrorCategory.RETRYABLE

    name = type(exc).__name__.lower()
    if "timeout" in name:
        return "TIMEOUT", ErrorCategory.TIMEOUT, True
    if "connection" in name or "network" in name:
        return "NETWORK_ERROR", ErrorCategory.RETRYABLE, True
    if isinstance(exc, (ValueError, TypeError)):
        return "VALIDATION_ERROR", ErrorCategory.VALIDATION, False
    return "UNKNOWN_ERROR", ErrorCategory.FATAL, False
