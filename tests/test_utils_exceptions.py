"""Tests for zabbixbridge.utils.exceptions module."""

from __future__ import annotations

import httpx
import pytest

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


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_base_error_to_dict(self) -> None:
        exc = ZabbixBridgeError("test message", code="TEST_CODE")
        assert exc.to_dict() == {
            "error": "TEST_CODE",
            "message": "test message",
            "category": ErrorCategory.FATAL.value,
            "details": {},
        }

    def test_all_errors_share_the_base(self) -> None:
        for exc in (
            TransportFailure("x"),
            ProtocolError(-32602, "Invalid params.", "x"),
            CardinalityError(0),
            UnsupportedFeatureError("mfa", "6.4.0"),
            DecodeError("headers", 42),
            ValidationError("bad"),
        ):
            assert isinstance(exc, ZabbixBridgeError)

    def test_protocol_error_keeps_server_fields_verbatim(self) -> None:
        exc = ProtocolError(-32500, "Application error.", "No permissions to referred object.", method="host.update")
        assert exc.message == "-32500 (Application error.): No permissions to referred object."
        assert exc.details["rpc_code"] == -32500
        assert exc.details["method"] == "host.update"
        assert exc.category == ErrorCategory.PERMISSION

    def test_protocol_error_invalid_params_is_validation(self) -> None:
        assert ProtocolError(-32602, "Invalid params.", "Invalid parameter \"/1\".").category == ErrorCategory.VALIDATION

    def test_transport_failure_categories(self) -> None:
        assert TransportFailure("t", code="TRANSPORT_TIMEOUT", retryable=True).category == ErrorCategory.TIMEOUT
        assert TransportFailure("n", code="TRANSPORT_NETWORK_ERROR", retryable=True).category == ErrorCategory.RETRYABLE
        bad = TransportFailure("b", code="TRANSPORT_BAD_RESPONSE")
        assert bad.category == ErrorCategory.FATAL
        assert bad.details == {"status_code": None, "retryable": False}

    def test_cardinality_error_distinguishes_zero_from_many(self) -> None:
        assert CardinalityError(0).category == ErrorCategory.NOT_FOUND
        assert CardinalityError(3).category == ErrorCategory.VALIDATION
        assert CardinalityError(3).message == "Expected exactly one result, got 3."

    def test_unsupported_feature_message(self) -> None:
        assert str(UnsupportedFeatureError("mfa", "6.4.0")) == "[UNSUPPORTED_FEATURE] mfa not supported in Zabbix version 6.4.0"
        assert "unknown" in UnsupportedFeatureError("mfa", "").message

    def test_decode_error_reports_type_not_value(self) -> None:
        exc = DecodeError("headers", "secret-ish text", "neither object nor array")
        assert exc.details == {"field": "headers", "value_type": "str"}
        assert "secret-ish" not in exc.message


class TestSanitizeErrorMessage:
    def test_redacts_password_member(self) -> None:
        out = sanitize_error_message('{"username": "Admin", "password": "zabbix"}')
        assert "zabbix" not in out
        assert "Admin" in out

    def test_redacts_auth_member(self) -> None:
        out = sanitize_error_message('{"method": "host.get", "auth": "0424bd59b807674191e7d77572075f33"}')
        assert "0424bd59" not in out

    def test_redacts_login_result_token(self) -> None:
        out = sanitize_error_message('{"jsonrpc": "2.0", "result": "0424bd59b807674191e7d77572075f33", "id": 1}')
        assert "0424bd59" not in out

    def test_keeps_ordinary_results(self) -> None:
        line = '{"jsonrpc": "2.0", "result": "7.0.0", "id": 1}'
        assert sanitize_error_message(line) == line

    def test_redacts_bearer_and_url_credentials(self) -> None:
        out = sanitize_error_message("Authorization: Bearer abc.def-123 to https://admin:pw@zbx.example/api")
        assert "abc.def-123" not in out
        assert ":pw@" not in out


class TestClassifyException:
    def test_transport_failure(self) -> None:
        exc = TransportFailure("x", code="TRANSPORT_HTTP_ERROR", status_code=503, retryable=True)
        assert classify_exception(exc) == ("TRANSPORT_HTTP_ERROR", ErrorCategory.RETRYABLE, True)

    def test_protocol_error_is_never_retryable(self) -> None:
        code, _, retryable = classify_exception(ProtocolError(-32500, "Application error.", ""))
        assert code == "PROTOCOL_ERROR"
        assert retryable is False

    @pytest.mark.parametrize(
        "exc,expected",
        [
            (httpx.ConnectTimeout("slow"), ("TIMEOUT", ErrorCategory.TIMEOUT, True)),
            (ConnectionResetError("reset"), ("NETWORK_ERROR", ErrorCategory.RETRYABLE, True)),
            (ValueError("bad"), ("VALIDATION_ERROR", ErrorCategory.VALIDATION, False)),
            (RuntimeError("boom"), ("UNKNOWN_ERROR", ErrorCategory.FATAL, False)),
        ],
    )
    def test_foreign_exceptions(self, exc, expected) -> None:
        assert classify_exception(exc) == expected
