"""Tests for failure classification."""

import asyncio

import pytest

from tutorverse.core.errors import (
    ERROR_MESSAGES, ErrorCategory, FailureStage, HandlerError, RoutingError,
    classify_failure, classify_message, user_message
)


@pytest.mark.parametrize("message, expected", [
    ("400 API key not valid. Please pass a valid API key.", ErrorCategory.PROVIDER_AUTH),
    ("Permission denied on resource project", ErrorCategory.PROVIDER_AUTH),
    ("429 Resource has been exhausted (e.g. check quota).", ErrorCategory.PROVIDER_QUOTA),
    ("Rate limit reached for model", ErrorCategory.PROVIDER_QUOTA),
    ("Billing account not active", ErrorCategory.PROVIDER_QUOTA),
    ("Request timeout after 60s", ErrorCategory.PROVIDER_TIMEOUT),
    ("The model `llama-9` does not exist: model_not_found", ErrorCategory.PROVIDER_MODEL_UNAVAILABLE),
    ("something odd happened", ErrorCategory.UNKNOWN),
])
def test_classify_message_keywords(message, expected):
    assert classify_message(message) == expected


def test_auth_wins_over_quota_when_both_match():
    assert classify_message("invalid api key and quota exceeded") == ErrorCategory.PROVIDER_AUTH


def test_classification_is_deterministic():
    message = "Resource has been exhausted"
    assert classify_message(message) == classify_message(message)
    exc = RuntimeError(message)
    assert classify_failure(exc, FailureStage.HANDLER) == classify_failure(exc, FailureStage.HANDLER)


def test_stage_defaults_apply_when_nothing_matches():
    assert classify_failure(RoutingError("bad subject"), FailureStage.ROUTING) == ErrorCategory.ROUTING_FAILURE
    assert classify_failure(HandlerError("empty"), FailureStage.HANDLER) == ErrorCategory.HANDLER_FAILURE
    assert classify_failure(ValueError("boom")) == ErrorCategory.UNKNOWN


def test_status_code_is_preferred_over_message():
    class ProviderError(Exception):
        status_code = 429

    exc = ProviderError("api key looks fine")
    assert classify_failure(exc, FailureStage.HANDLER) == ErrorCategory.PROVIDER_QUOTA


def test_status_code_on_response_attribute():
    class Response:
        status_code = 401

    class ProviderError(Exception):
        response = Response()

    assert classify_failure(ProviderError("nope")) == ErrorCategory.PROVIDER_AUTH


def test_wrapped_cause_is_inspected():
    try:
        try:
            raise asyncio.TimeoutError()
        except asyncio.TimeoutError as inner:
            raise HandlerError("generation failed") from inner
    except HandlerError as outer:
        assert classify_failure(outer, FailureStage.HANDLER) == ErrorCategory.PROVIDER_TIMEOUT


def test_every_category_has_a_message():
    for category in ErrorCategory:
        assert user_message(category) == ERROR_MESSAGES[category]
        assert user_message(category)
