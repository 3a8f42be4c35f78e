"""Utility functions for zabbixbridge."""

from zabbixbridge.utils.exceptions import (
    CardinalityError,
    DecodeError,
    ErrorCategory,
    ProtocolError,
    TransportFailure,
    UnsupportedFeatureError,
    ValidationError,
    ZabbixBridgeError,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "ZabbixBridgeError",
    "TransportFailure",
    "ProtocolError",
    "CardinalityError",
    "UnsupportedFeatureError",
    "DecodeError",
    "ValidationError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
