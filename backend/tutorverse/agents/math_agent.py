# backend/tutorverse/agents/math_agent.py
import logging
from typing import Optional

from tutorverse.core.errors import HandlerError
from tutorverse.models.schemas import MathSolution
from tutorverse.services.llm_service import TutorLLMService, system_and_user
from tutorverse.services.tools import MATH_TOOLS

logger = logging.getLogger(__name__)

MATH_SYSTEM_PROMPT = """You are a math tutor helping students learn mathematics.
Provide a step-by-step solution to the question you are given.
If needed, use the calculator tool to perform calculations instead of doing arithmetic in your head.
The calculator understands + - * / ^ and parentheses; write percentages as multiplication (15% of 200 -> 0.15*200).
If the calculator returns NaN the expression was invalid: fix it and try again.
Finish with a clearly stated final answer."""

MATH_USER_PROMPT = """Question: {question}

Solution:"""


class MathAgent:
    """Answers math questions with a step-by-step solution"""

    def __init__(self, llm_service: Optional[TutorLLMService] = None):
        self.llm_service = llm_service or TutorLLMService()

    async def solve(self, question: str) -> MathSolution:
        logger.info(f"➗ Solving math question: {question[:50]}...")

        try:
            run = await self.llm_service.generate_with_tools(
                system_and_user(MATH_SYSTEM_PROMPT, MATH_USER_PROMPT.format(question=question)),
                tools=MATH_TOOLS,
                schema=MathSolution,
            )
        except Exception as e:
            logger.error(f"❌ Error generating math solution: {str(e)}")
            raise HandlerError(str(e)) from e

        solution = run.output
        if not solution.solution.strip():
            raise HandlerError("Math model returned an empty solution")

        logger.info(f"✅ Math solution generated ({len(run.tool_calls)} calculator call(s))")
        return solution
