# backend/tutorverse/agents/tutor_agent.py
import logging
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from tutorverse.agents.math_agent import MathAgent
from tutorverse.agents.physics_agent import PhysicsAgent
from tutorverse.agents.routing_agent import IntentRouter
from tutorverse.core.errors import (
    ErrorCategory, FailureStage, HandlerError, RoutingError, classify_failure, user_message
)
from tutorverse.models.schemas import (
    AnswerEnvelope, ErrorEnvelope, GeneralEnvelope, MathEnvelope, MathSolution,
    PhysicsAnswer, PhysicsEnvelope, Subject
)
from tutorverse.services.llm_service import TutorLLMService

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to TutorVerse! Ask me anything about Math or Physics."


class DispatchState(str, Enum):
    """States a question moves through during one dispatch"""
    RECEIVED = "received"
    VALIDATED = "validated"
    ROUTED = "routed"
    ANSWERED = "answered"
    COMPLETED = "completed"
    ERRORED = "errored"


class Router(Protocol):
    async def route(self, question: str) -> Subject: ...


class Handler(Protocol):
    async def solve(self, question: str) -> Any: ...


class TutorAgent:
    """Main orchestrating agent: validate, route, answer, wrap in an envelope.

    ``ask`` never raises. Every failure from the router or a handler comes back
    as an error envelope carrying a fixed, user-safe message.
    """

    def __init__(
        self,
        router: Optional[Router] = None,
        handlers: Optional[Dict[Subject, Handler]] = None,
        llm_service: Optional[TutorLLMService] = None,
    ):
        llm_service = llm_service or TutorLLMService()
        self.router = router or IntentRouter(llm_service)
        self.handlers: Dict[Subject, Handler] = handlers or {
            Subject.MATH: MathAgent(llm_service),
            Subject.PHYSICS: PhysicsAgent(llm_service),
        }
        missing = [subject.value for subject in Subject if subject not in self.handlers]
        if missing:
            raise ValueError(f"No handler registered for: {', '.join(missing)}")
        logger.info("Tutor Agent initialized successfully")

    def welcome(self) -> GeneralEnvelope:
        return GeneralEnvelope(message=WELCOME_MESSAGE, original_query="")

    async def ask(self, question: Optional[str]) -> AnswerEnvelope:
        """Answer one question end to end"""
        self._transition(DispatchState.RECEIVED)

        if not isinstance(question, str) or not question.strip():
            logger.warning("Rejected empty question")
            return self._error(ErrorCategory.INPUT_EMPTY, "")
        self._transition(DispatchState.VALIDATED, question)

        try:
            subject = await self.router.route(question)
            if not isinstance(subject, Subject):
                raise RoutingError(f"Router returned an unknown subject: {subject!r}")
        except Exception as e:
            return self._failure(e, FailureStage.ROUTING, question)
        self._transition(DispatchState.ROUTED, question, subject.value)

        try:
            payload = await self.handlers[subject].solve(question)
            envelope = self._build_envelope(subject, payload, question)
        except Exception as e:
            return self._failure(e, FailureStage.HANDLER, question)
        self._transition(DispatchState.ANSWERED, question)
        self._transition(DispatchState.COMPLETED, question, envelope.kind)
        return envelope

    @staticmethod
    def _build_envelope(subject: Subject, payload: Any, question: str) -> AnswerEnvelope:
        if subject is Subject.MATH:
            solution = MathSolution.model_validate(payload, from_attributes=True)
            if not solution.solution.strip():
                raise HandlerError("Handler returned an empty solution")
            return MathEnvelope(solution=solution.solution, original_query=question)
        if subject is Subject.PHYSICS:
            answer = PhysicsAnswer.model_validate(payload, from_attributes=True)
            if not answer.answer.strip():
                raise HandlerError("Handler returned an empty answer")
            return PhysicsEnvelope(
                answer=answer.answer,
                constants_used=list(answer.constants_used),
                original_query=question,
            )
        raise RoutingError(f"No envelope for subject {subject!r}")

    def _failure(self, exc: Exception, stage: FailureStage, question: str) -> ErrorEnvelope:
        category = classify_failure(exc, stage)
        logger.error(f"❌ {stage.value} failed ({category.value}): {str(exc)}")
        return self._error(category, question)

    def _error(self, category: ErrorCategory, question: str) -> ErrorEnvelope:
        self._transition(DispatchState.ERRORED, question, category.value)
        return ErrorEnvelope(error=user_message(category), category=category, original_query=question)

    @staticmethod
    def _transition(state: DispatchState, question: str = "", detail: str = "") -> None:
        suffix = f" ({detail})" if detail else ""
        logger.info(f"🔄 [{state.value}] {question[:50]}{suffix}")
