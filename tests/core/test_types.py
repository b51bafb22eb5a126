"""Tests for Outcome and error messages."""

from weft.core.types import UNKNOWN_ERROR, Outcome, error_message


class TestErrorMessage:
    """Tests for error_message."""

    def test_single_string_argument(self):
        """Test a single string argument is used without repr quoting."""
        assert error_message(KeyError("x")) == "x"
        assert error_message(RuntimeError("Test error")) == "Test error"

    def test_empty_message(self):
        """Test missing or empty messages fall back to 'Unknown error'."""
        assert error_message(ValueError()) == UNKNOWN_ERROR
        assert error_message(ValueError("")) == UNKNOWN_ERROR

    def test_multiple_arguments(self):
        """Test exceptions with several arguments use their str()."""
        assert error_message(OSError(2, "No such file")) == "[Errno 2] No such file"


class TestOutcome:
    """Tests for Outcome."""

    def test_failure_from_key_error(self):
        """Test failures built from a KeyError keep the bare key."""
        exc = KeyError("user_id")
        outcome = Outcome.failure(exc)

        assert outcome == Outcome.failure("user_id")
        assert outcome.exception is exc
        assert outcome.to_dict() == {"succeeded": False, "error": "user_id"}

    def test_failure_from_empty_string(self):
        """Test an empty message string falls back to 'Unknown error'."""
        assert Outcome.failure("").error == UNKNOWN_ERROR
        assert Outcome.failure(None).error == UNKNOWN_ERROR
