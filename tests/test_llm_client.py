"""Tests for the OpenAI chat adapter and its error classification."""

from unittest.mock import MagicMock

import httpx
import pytest
from openai import APIConnectionError, BadRequestError, RateLimitError

from tube2notes.llm_client import (
    CapacityExceededError,
    Completion,
    CompletionRequest,
    LLMError,
    OpenAIChatClient,
    classify_error,
    parse_requested_tokens,
)
from tube2notes.prompts import SUMMARY_SYSTEM_MESSAGE

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

CONTEXT_MESSAGE = (
    "This model's maximum context length is 128000 tokens. However, your messages "
    "resulted in 150123 tokens. Please reduce the length of the messages."
)


def _bad_request(message, code=None):
    return BadRequestError(
        message,
        response=httpx.Response(400, request=_REQUEST),
        body={"message": message, "code": code, "type": "invalid_request_error"},
    )


def _response(content, prompt_tokens=10, completion_tokens=5):
    response = MagicMock()
    choice = MagicMock()
    choice.message.content = content
    response.choices = [choice]
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    return response


def _client(sdk):
    return OpenAIChatClient(api_key="sk-test", client=sdk)


def test_complete_sends_system_and_user_messages():
    sdk = MagicMock()
    sdk.chat.completions.create.return_value = _response("  - point one  ")

    completion = _client(sdk).complete(
        CompletionRequest(prompt_text="Summarize this", max_output_tokens=250, model_id="gpt-4o")
    )

    assert completion == Completion(content="- point one", input_tokens=10, output_tokens=5)
    kwargs = sdk.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["max_tokens"] == 250
    assert kwargs["messages"] == [
        {"role": "system", "content": SUMMARY_SYSTEM_MESSAGE},
        {"role": "user", "content": "Summarize this"},
    ]


def test_complete_returns_empty_content_for_missing_message():
    sdk = MagicMock()
    sdk.chat.completions.create.return_value = _response(None)

    completion = _client(sdk).complete(CompletionRequest("p", 10, "gpt-4o"))

    assert completion.content == ""


def test_context_length_error_code_becomes_capacity_exceeded():
    sdk = MagicMock()
    sdk.chat.completions.create.side_effect = _bad_request(
        CONTEXT_MESSAGE, code="context_length_exceeded"
    )

    with pytest.raises(CapacityExceededError) as excinfo:
        _client(sdk).complete(CompletionRequest("p", 10, "gpt-4o"))

    assert excinfo.value.requested_tokens == 150123
    assert isinstance(excinfo.value.__cause__, BadRequestError)


def test_capacity_detected_from_message_without_code():
    error = classify_error(_bad_request(CONTEXT_MESSAGE))
    assert isinstance(error, CapacityExceededError)


def test_capacity_without_token_hint():
    error = classify_error(_bad_request("context too big", code="context_length_exceeded"))
    assert isinstance(error, CapacityExceededError)
    assert error.requested_tokens is None


def test_other_bad_request_is_generic_error():
    error = classify_error(_bad_request("Invalid value for temperature", code="invalid_value"))
    assert type(error) is LLMError


def test_rate_limit_is_generic_error():
    rate_limited = RateLimitError(
        "Rate limit reached",
        response=httpx.Response(429, request=_REQUEST),
        body=None,
    )
    error = classify_error(rate_limited)
    assert type(error) is LLMError
    assert "Rate limit" in str(error)


def test_connection_error_is_wrapped():
    sdk = MagicMock()
    sdk.chat.completions.create.side_effect = APIConnectionError(request=_REQUEST)

    with pytest.raises(LLMError):
        _client(sdk).complete(CompletionRequest("p", 10, "gpt-4o"))


@pytest.mark.parametrize(
    "message, expected",
    [
        (CONTEXT_MESSAGE, 150123),
        ("However, you requested 130500 tokens (130000 in the messages, 500 in the completion).", 130500),
        ("something else went wrong", None),
        ("", None),
    ],
)
def test_parse_requested_tokens(message, expected):
    assert parse_requested_tokens(message) == expected


def test_requires_api_key():
    with pytest.raises(ValueError):
        OpenAIChatClient(api_key="")
