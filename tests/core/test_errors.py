"""Error Hierarchy - verifies codes, categories and the response envelope."""

from modelproxy.core.errors import (
    ConfigurationError, DatabaseError, ErrorCategory, ErrorContext,
    ErrorSeverity, ModelProxyError, RecordNotFoundError,
)


def test_configuration_error_names_missing_model():
    err = ConfigurationError("Ghost")
    assert isinstance(err, ModelProxyError)
    assert err.code == "PROXY_TARGET_UNRESOLVED"
    assert err.category is ErrorCategory.CONFIGURATION
    assert err.severity is ErrorSeverity.CRITICAL
    assert err.internal_type_name == "Ghost"
    assert "Ghost" in str(err)


def test_to_response_includes_context():
    ctx = ErrorContext(public_type="Public", internal_type="Ghost", operation="find")
    body = ConfigurationError("Ghost", context=ctx).to_response()["error"]
    assert body["code"] == "PROXY_TARGET_UNRESOLVED"
    assert body["category"] == "configuration"
    assert body["context"] == {
        "public_type": "Public", "internal_type": "Ghost", "operation": "find",
    }


def test_record_not_found_carries_identifier():
    err = RecordNotFoundError("Internal", 7)
    assert err.record_id == 7
    assert err.message == "Internal '7' not found"


def test_database_error_prefixes_operation():
    err = DatabaseError("boom", "commit")
    assert err.message == "Database commit failed: boom"
    assert err.operation == "commit"
