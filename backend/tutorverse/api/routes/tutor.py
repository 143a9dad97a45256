from fastapi import APIRouter, Depends, Form
from typing import Optional
import logging
import time

from tutorverse.agents.tutor_agent import TutorAgent
from tutorverse.api.deps import get_tutor_agent
from tutorverse.models.schemas import AnswerEnvelope

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/ask", response_model=AnswerEnvelope)
async def ask_tutor(
    question: Optional[str] = Form(None),
    agent: TutorAgent = Depends(get_tutor_agent),
):
    """
    Answer a Math or Physics question submitted as the form field ``question``.

    Always returns an answer envelope; failures come back as ``kind="error"``
    with a user-safe message rather than as HTTP errors.
    """
    start_time = time.time()
    envelope = await agent.ask(question)
    logger.info(f"📝 Tutor request answered as {envelope.kind} in {time.time() - start_time:.2f}s")
    return envelope


@router.get("/welcome", response_model=AnswerEnvelope)
async def welcome(agent: TutorAgent = Depends(get_tutor_agent)):
    """Initial envelope shown before the first question"""
    return agent.welcome()
