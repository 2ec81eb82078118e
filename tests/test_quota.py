"""Tests for quota/rate-limit error classification."""

from __future__ import annotations

import json

import pytest

from resume_builder.pipeline.quota import (
    DEFAULT_RETRY_AFTER,
    classify_error,
    is_quota_error,
    retry_delay_seconds,
)


def _retry_info_body(delay: str) -> dict:
    return {
        "error": {
            "code": 429,
            "status": "RESOURCE_EXHAUSTED",
            "details": [
                {"@type": "type.googleapis.com/google.rpc.QuotaFailure"},
                {"@type": "type.googleapis.com/google.rpc.RetryInfo", "retryDelay": delay},
            ],
        }
    }


class TestIsQuotaError:
    def test_status_429(self, status_error):
        assert is_quota_error(status_error("Too Many Requests", status_code=429))

    def test_status_in_mapping(self):
        assert is_quota_error({"statusCode": 429, "message": "slow down"})

    @pytest.mark.parametrize(
        "message",
        ["You exceeded your current quota", "Rate limit reached for requests", "RATE LIMIT"],
    )
    def test_message_markers(self, message):
        assert is_quota_error(Exception(message))

    @pytest.mark.parametrize("message", ["quota exceeded", "Rate limit hit"])
    def test_bare_string_message(self, message):
        assert is_quota_error(message)
        assert classify_error(message).is_quota

    def test_body_resource_exhausted(self, status_error):
        err = status_error("upstream error", status_code=500, body=_retry_info_body("5s"))
        assert is_quota_error(err)

    def test_body_as_string(self, status_error):
        err = status_error("upstream error", body='{"status": "RESOURCE_EXHAUSTED"}')
        assert is_quota_error(err)

    @pytest.mark.parametrize(
        "error",
        [
            Exception("connection reset"),
            {"statusCode": 500, "message": "internal"},
            ValueError("Could not extract JSON from text"),
            None,
            "",
            42,
        ],
    )
    def test_non_quota_inputs(self, error):
        assert not is_quota_error(error)

    def test_status_500_is_not_quota(self, status_error):
        assert not is_quota_error(status_error("Internal Server Error", status_code=500))


class TestRetryDelay:
    @pytest.mark.parametrize("delay, expected", [("7s", 7), ("30s", 30), ("0s", 0)])
    def test_retry_info_delay(self, status_error, delay, expected):
        err = status_error("quota", status_code=429, body=_retry_info_body(delay))
        assert retry_delay_seconds(err) == expected

    def test_fractional_delay_rounds_up(self, status_error):
        err = status_error("quota", status_code=429, body=_retry_info_body("2.4s"))
        assert retry_delay_seconds(err) == 3

    def test_retry_info_in_string_body(self, status_error):
        err = status_error("quota", body=json.dumps(_retry_info_body("12s")))
        assert retry_delay_seconds(err) == 12

    def test_missing_retry_info_uses_default(self, status_error):
        err = status_error("quota", status_code=429, body={"error": {"details": []}})
        assert retry_delay_seconds(err) == DEFAULT_RETRY_AFTER
        assert retry_delay_seconds(err, default=15) == 15

    def test_malformed_delay_uses_default(self, status_error):
        err = status_error("quota", status_code=429, body=_retry_info_body("soon"))
        assert retry_delay_seconds(err, default=45) == 45

    def test_retry_after_header(self, status_error):
        err = status_error("rate limit", status_code=429, headers={"retry-after": "20"})
        assert retry_delay_seconds(err) == 20

    def test_retry_info_wins_over_header(self, status_error):
        err = status_error(
            "rate limit",
            status_code=429,
            body=_retry_info_body("9s"),
            headers={"retry-after": "20"},
        )
        assert retry_delay_seconds(err) == 9


class TestClassifyError:
    def test_quota_with_delay(self, status_error):
        result = classify_error(status_error("quota", status_code=429, body=_retry_info_body("4s")))
        assert result.is_quota is True
        assert result.retry_after_seconds == 4

    def test_non_quota_keeps_default(self):
        result = classify_error(RuntimeError("boom"), default_retry_after=30)
        assert result.is_quota is False
        assert result.retry_after_seconds == 30

    def test_never_raises_on_odd_shapes(self):
        class Weird:
            status_code = "not-a-number"
            body = object()
            headers = "not-a-mapping"

        result = classify_error(Weird())
        assert result.is_quota is False
        assert result.retry_after_seconds == DEFAULT_RETRY_AFTER
