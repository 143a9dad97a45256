# backend/tutorverse/agents/routing_agent.py - LLM intent classification

import logging
from typing import Optional

from tutorverse.core.errors import RoutingError
from tutorverse.models.schemas import RouteDecision, Subject
from tutorverse.services.llm_service import TutorLLMService, system_and_user

logger = logging.getLogger(__name__)

ROUTING_SYSTEM_PROMPT = """You are a classifier for a tutoring service.
Decide which subject-matter expert should answer the user's query.
The only valid answers are "Math" and "Physics"."""

ROUTING_USER_PROMPT = """Determine whether the following query is related to Math or Physics.

Query: {query}

Respond with either "Math" or "Physics"."""


class IntentRouter:
    """Routes a question to exactly one Subject using a structured LLM call"""

    def __init__(self, llm_service: Optional[TutorLLMService] = None):
        self.llm_service = llm_service or TutorLLMService()

    async def route(self, question: str) -> Subject:
        logger.info(f"🧭 Routing question: {question[:100]}...")
        messages = system_and_user(ROUTING_SYSTEM_PROMPT, ROUTING_USER_PROMPT.format(query=question))

        try:
            decision = await self.llm_service.generate_structured(messages, RouteDecision)
        except Exception as e:
            logger.error(f"❌ Routing call failed: {str(e)}")
            raise RoutingError(str(e)) from e

        subject = decision.route
        if not isinstance(subject, Subject):
            raise RoutingError(f"Router returned an unknown subject: {subject!r}")

        logger.info(f"📍 Routing decision: {subject.value}")
        return subject
