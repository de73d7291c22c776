"""Tests for error types and codes."""

from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from unitcache.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    LoadError,
    UnitCacheError,
    ViewError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.VIEW_INVALID_URI, 3000),
            (ErrorCode.VIEW_NO_UNITS, 3000),
            (ErrorCode.LOAD_FAILED, 4000),
            (ErrorCode.LOAD_NOT_FOUND, 4000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestUnitCacheError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = UnitCacheError(
            code=ErrorCode.LOAD_FAILED,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 4001,
            "error": "LOAD_FAILED",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = UnitCacheError(
            code=ErrorCode.INTERNAL_ERROR,
            message="Something broke",
        )

        # When
        result = str(error)

        # Then
        assert result == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are real exceptions."""
        with pytest.raises(UnitCacheError) as exc_info:
            raise ViewError.no_units("/repo/a.go")

        assert exc_info.value.code == ErrorCode.VIEW_NO_UNITS


class TestConfigError:
    """ConfigError factory method tests."""

    @pytest.mark.parametrize(
        ("factory", "kwargs", "expected_code"),
        [
            (
                "parse_error",
                {"path": "/foo", "reason": "bad yaml"},
                ErrorCode.CONFIG_PARSE_ERROR,
            ),
            (
                "invalid_value",
                {"field": "loader.max_file_size_mb", "value": -1, "reason": "negative"},
                ErrorCode.CONFIG_INVALID_VALUE,
            ),
            ("file_not_found", {"path": "/missing"}, ErrorCode.CONFIG_FILE_NOT_FOUND),
        ],
    )
    def test_given_factory_when_called_then_correct_code(
        self, factory: str, kwargs: dict[str, object], expected_code: ErrorCode
    ) -> None:
        """Factory methods produce errors with correct error codes."""
        # Given
        factory_method = getattr(ConfigError, factory)

        # When
        error = factory_method(**kwargs)

        # Then
        assert error.code == expected_code

    def test_given_invalid_value_when_created_then_value_stringified(self) -> None:
        """Invalid value details carry the offending value as a string."""
        error = ConfigError.invalid_value("loader.tests", 3, "not a bool")

        assert error.details == {"field": "loader.tests", "value": "3", "reason": "not a bool"}


class TestViewError:
    """ViewError factory tests."""

    def test_given_invalid_uri_when_created_then_uri_in_details(self) -> None:
        """Invalid URI error names the URI and reason."""
        # Given
        uri = "http://example.com/a.go"

        # When
        error = ViewError.invalid_uri(uri, "unsupported scheme 'http'")

        # Then
        assert error.code == ErrorCode.VIEW_INVALID_URI
        assert error.details["uri"] == uri
        assert "unsupported scheme" in error.message

    def test_given_no_units_when_created_then_message_names_file(self) -> None:
        """No-units error is distinguishable from loader errors."""
        error = ViewError.no_units("/repo/a.go")

        assert error.code == ErrorCode.VIEW_NO_UNITS
        assert error.message == "no packages found for /repo/a.go"
        assert not isinstance(error, LoadError)


class TestLoadError:
    """LoadError factory tests."""

    def test_given_failed_when_retryable_then_flag_set(self) -> None:
        """Retryable flag is carried through."""
        error = LoadError.failed("/repo", "boom", retryable=True)

        assert error.code == ErrorCode.LOAD_FAILED
        assert error.retryable is True
        assert error.details == {"target": "/repo", "reason": "boom"}

    def test_given_not_found_when_created_then_not_retryable(self) -> None:
        """Missing paths are not retryable by default."""
        error = LoadError.not_found("/repo/missing")

        assert error.code == ErrorCode.LOAD_NOT_FOUND
        assert error.retryable is False

    def test_given_error_raised_in_context_manager_when_it_exits_then_type_kept(self) -> None:
        """Leaving a @contextmanager rebinds __traceback__ on the error."""

        @contextmanager
        def guarded() -> Iterator[None]:
            yield

        # When
        with pytest.raises(LoadError) as exc_info, guarded():
            raise LoadError.failed("/repo", "go.mod: syntax error")

        # Then
        assert exc_info.value.code == ErrorCode.LOAD_FAILED
        assert exc_info.value.__traceback__ is not None


class TestInternalError:
    """InternalError factory tests."""

    def test_given_unexpected_when_created_then_details_kept(self) -> None:
        error = InternalError.unexpected("lock misuse", lock="read")

        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {"lock": "read"}
