from __future__ import annotations

from datetime import datetime

import pytest

from securefetch import ErrorKind, SecureFetchError, create_error

###############################
#     Tests for ErrorKind     #
###############################


def test_error_kind_has_six_members() -> None:
    assert {kind.value for kind in ErrorKind} == {
        "NETWORK_ERROR",
        "TIMEOUT_ERROR",
        "HTTP_ERROR",
        "ABORT_ERROR",
        "CSRF_ERROR",
        "VALIDATION_ERROR",
    }


@pytest.mark.parametrize("kind", [ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT_ERROR])
def test_error_kind_retryable(kind: ErrorKind) -> None:
    assert kind.retryable


@pytest.mark.parametrize(
    "kind",
    [
        ErrorKind.HTTP_ERROR,
        ErrorKind.ABORT_ERROR,
        ErrorKind.CSRF_ERROR,
        ErrorKind.VALIDATION_ERROR,
    ],
)
def test_error_kind_not_retryable(kind: ErrorKind) -> None:
    assert not kind.retryable


def test_error_kind_every_member_is_classified() -> None:
    """Test that no kind falls through the retryable match."""
    for kind in ErrorKind:
        assert isinstance(kind.retryable, bool)


def test_error_kind_compares_to_string() -> None:
    assert ErrorKind.HTTP_ERROR == "HTTP_ERROR"


######################################
#     Tests for SecureFetchError     #
######################################


def test_secure_fetch_error_attributes() -> None:
    error = SecureFetchError("boom", ErrorKind.HTTP_ERROR, {"status": 500})
    assert error.message == "boom"
    assert str(error) == "boom"
    assert error.kind is ErrorKind.HTTP_ERROR
    assert error.details == {"status": 500}


def test_secure_fetch_error_default_kind_is_network_error() -> None:
    assert SecureFetchError("boom").kind is ErrorKind.NETWORK_ERROR


def test_secure_fetch_error_accepts_kind_string() -> None:
    assert SecureFetchError("boom", "TIMEOUT_ERROR").kind is ErrorKind.TIMEOUT_ERROR


def test_secure_fetch_error_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError, match=r"UNKNOWN"):
        SecureFetchError("boom", "UNKNOWN")


def test_secure_fetch_error_timestamp_is_iso8601() -> None:
    error = SecureFetchError("boom")
    parsed = datetime.fromisoformat(error.timestamp)
    assert parsed.tzinfo is not None


def test_secure_fetch_error_explicit_timestamp() -> None:
    error = SecureFetchError("boom", timestamp="2024-01-01T00:00:00+00:00")
    assert error.timestamp == "2024-01-01T00:00:00+00:00"


def test_secure_fetch_error_to_dict() -> None:
    error = SecureFetchError("boom", ErrorKind.CSRF_ERROR, None, timestamp="t")
    assert error.to_dict() == {
        "kind": "CSRF_ERROR",
        "message": "boom",
        "details": None,
        "timestamp": "t",
    }


def test_secure_fetch_error_repr() -> None:
    assert repr(SecureFetchError("boom", ErrorKind.ABORT_ERROR)) == (
        "SecureFetchError(kind=ABORT_ERROR, message='boom')"
    )


##################################
#     Tests for create_error     #
##################################


def test_create_error_returns_error() -> None:
    error = create_error("failed", ErrorKind.VALIDATION_ERROR, {"original_error": "x"})
    assert isinstance(error, SecureFetchError)
    assert error.kind is ErrorKind.VALIDATION_ERROR
    assert error.details == {"original_error": "x"}


def test_create_error_defaults() -> None:
    error = create_error("failed")
    assert error.kind is ErrorKind.NETWORK_ERROR
    assert error.details is None
