"""Tests for retry and error handling utilities."""

from unittest.mock import Mock

import pytest

from podcastpro.utils.retry import (
    NonRetryableError,
    RateLimitError,
    RetryableError,
    ServerError,
    TEST_RETRY_CONFIG,
    classify_api_error,
    with_retry,
)


class TestClassifyApiError:
    """Test generic API error classification."""

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("429 Too Many Requests", RateLimitError),
            ("Rate limit exceeded", RateLimitError),
            ("Deadline exceeded", ServerError),
            ("Request timed out", ServerError),
            ("Network is unreachable", ServerError),
            ("429 Resource exhausted", RateLimitError),
            ("503 Service Unavailable", ServerError),
            ("Internal error encountered", ServerError),
            ("API key not valid", NonRetryableError),
        ],
    )
    def test_classification(self, message, expected):
        error = classify_api_error(Exception(message))
        assert isinstance(error, expected)
        assert str(error) == message


class TestWithRetry:
    """Test the with_retry decorator."""

    def test_success_first_try(self):
        func = Mock(return_value="ok")
        decorated = with_retry(config=TEST_RETRY_CONFIG)(func)

        assert decorated() == "ok"
        assert func.call_count == 1

    def test_retries_transient_errors(self):
        """Test that retryable errors are retried until success."""
        func = Mock(side_effect=[ServerError("503"), RateLimitError("429"), "ok"])
        decorated = with_retry(config=TEST_RETRY_CONFIG)(func)

        assert decorated() == "ok"
        assert func.call_count == 3

    def test_gives_up_after_max_attempts(self):
        func = Mock(side_effect=RateLimitError("429"))
        decorated = with_retry(config=TEST_RETRY_CONFIG)(func)

        with pytest.raises(RateLimitError):
            decorated()
        assert func.call_count == TEST_RETRY_CONFIG.max_attempts

    def test_non_retryable_raises_immediately(self):
        func = Mock(side_effect=NonRetryableError("bad key"))
        decorated = with_retry(config=TEST_RETRY_CONFIG)(func)

        with pytest.raises(NonRetryableError):
            decorated()
        assert func.call_count == 1

    def test_passes_arguments_through(self):
        @with_retry(config=TEST_RETRY_CONFIG)
        def add(a, b=0):
            return a + b

        assert add(1, b=2) == 3

    def test_permanent_errors_are_not_retryable(self):
        assert not isinstance(classify_api_error(Exception("400 Bad request")), RetryableError)
