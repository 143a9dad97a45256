# backend/tutorverse/core/errors.py - Failure types and user-safe error classification

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TutorError(Exception):
    """Base class for failures raised inside the tutor pipeline"""


class ConstantNotFoundError(TutorError, KeyError):
    """Raised when a physical constant key is not in the lookup table"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f'Constant with key "{key}" not found. Please use a valid key name like '
            f'"speedOfLight", "plancksConstant", etc. Refer to the available constants list if unsure.'
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class LLMNotConfiguredError(TutorError):
    """Raised when no usable chat model could be built from the settings"""


class RoutingError(TutorError):
    """The intent router failed or produced a subject outside the enumeration"""


class HandlerError(TutorError):
    """The selected subject handler failed to produce an answer"""


class FailureStage(str, Enum):
    """Where in the dispatch pipeline a failure happened"""
    ROUTING = "routing"
    HANDLER = "handler"
    OTHER = "other"


class ErrorCategory(str, Enum):
    """User-facing error categories"""
    INPUT_EMPTY = "input_empty"
    ROUTING_FAILURE = "routing_failure"
    HANDLER_FAILURE = "handler_failure"
    PROVIDER_AUTH = "provider_auth"
    PROVIDER_QUOTA = "provider_quota"
    PROVIDER_TIMEOUT = "provider_timeout"
    PROVIDER_MODEL_UNAVAILABLE = "provider_model_unavailable"
    UNKNOWN = "unknown"


ERROR_MESSAGES: Dict[ErrorCategory, str] = {
    ErrorCategory.INPUT_EMPTY: "Question cannot be empty. Please enter your question.",
    ErrorCategory.ROUTING_FAILURE: (
        "Could not determine the subject. Please try rephrasing your question or be more specific."
    ),
    ErrorCategory.HANDLER_FAILURE: "The tutor could not finish answering your question. Please try again.",
    ErrorCategory.PROVIDER_AUTH: (
        "There seems to be an issue with the API configuration. Please contact support if this persists."
    ),
    ErrorCategory.PROVIDER_QUOTA: (
        "The AI service is currently experiencing high demand or a usage limit has been reached. "
        "Please try again in a little while."
    ),
    ErrorCategory.PROVIDER_TIMEOUT: "The request to the AI service timed out. Please try again.",
    ErrorCategory.PROVIDER_MODEL_UNAVAILABLE: "The AI model is currently unavailable. Please try again later.",
    ErrorCategory.UNKNOWN: (
        "An unexpected error occurred while processing your question. Please try again later."
    ),
}

# Checked in order, first match wins
PROVIDER_KEYWORDS: List[Tuple[ErrorCategory, Tuple[str, ...]]] = [
    (ErrorCategory.PROVIDER_AUTH, ("api key", "invalid api key", "api_key", "permission denied", "access token")),
    (ErrorCategory.PROVIDER_QUOTA, ("quota", "limit exceeded", "rate limit", "resource has been exhausted", "billing")),
    (ErrorCategory.PROVIDER_TIMEOUT, ("timeout", "timed out")),
    (ErrorCategory.PROVIDER_MODEL_UNAVAILABLE, ("model_not_found", "model not found")),
]

STATUS_CODES: Dict[int, ErrorCategory] = {
    401: ErrorCategory.PROVIDER_AUTH,
    403: ErrorCategory.PROVIDER_AUTH,
    402: ErrorCategory.PROVIDER_QUOTA,
    429: ErrorCategory.PROVIDER_QUOTA,
    404: ErrorCategory.PROVIDER_MODEL_UNAVAILABLE,
    408: ErrorCategory.PROVIDER_TIMEOUT,
    504: ErrorCategory.PROVIDER_TIMEOUT,
}

STAGE_DEFAULTS: Dict[FailureStage, ErrorCategory] = {
    FailureStage.ROUTING: ErrorCategory.ROUTING_FAILURE,
    FailureStage.HANDLER: ErrorCategory.HANDLER_FAILURE,
    FailureStage.OTHER: ErrorCategory.UNKNOWN,
}


def user_message(category: ErrorCategory) -> str:
    """Fixed, user-safe message for an error category"""
    return ERROR_MESSAGES[category]


def classify_message(message: str, stage: FailureStage = FailureStage.OTHER) -> ErrorCategory:
    """Classify a failure message by keyword.

    Pure function of its arguments: the same message and stage always give the
    same category. Provider keywords win over the stage default.
    """
    lowered = (message or "").lower()
    for category, keywords in PROVIDER_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return STAGE_DEFAULTS[stage]


def _status_code(exc: BaseException) -> Optional[int]:
    code = getattr(exc, "status_code", None)
    if code is None:
        response = getattr(exc, "response", None)
        code = getattr(response, "status_code", None)
    if code is None:
        # google.api_core exceptions expose the HTTP status as `code`
        code = getattr(exc, "code", None)
    return code if isinstance(code, int) else None


def _exception_chain(exc: BaseException) -> List[BaseException]:
    chain = []
    current: Optional[BaseException] = exc
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def classify_failure(exc: BaseException, stage: FailureStage = FailureStage.OTHER) -> ErrorCategory:
    """Classify an exception into a user-facing category.

    Structured signals (timeouts, HTTP status codes) anywhere in the exception
    chain are preferred; the message keywords are the fallback.
    """
    chain = _exception_chain(exc)

    for link in chain:
        if isinstance(link, (asyncio.TimeoutError, TimeoutError)):
            return ErrorCategory.PROVIDER_TIMEOUT
        code = _status_code(link)
        if code in STATUS_CODES:
            return STATUS_CODES[code]

    for link in chain:
        category = classify_message(str(link))
        if category != ErrorCategory.UNKNOWN:
            return category

    return STAGE_DEFAULTS[stage]
