# backend/tutorverse/agents/physics_agent.py
import logging
from typing import Iterable, List, Optional

from tutorverse.core.errors import HandlerError
from tutorverse.models.schemas import PhysicsAnswer
from tutorverse.services.constants import constant_keys, get_constants_table
from tutorverse.services.llm_service import TutorLLMService, system_and_user
from tutorverse.services.tools import PHYSICS_TOOLS, get_constant_tool

logger = logging.getLogger(__name__)

PHYSICS_SYSTEM_PROMPT = """You are a physics tutor. Answer the physics question you are given.
You can use the 'getConstant' tool to look up physical constants by their key name.
Valid key names are: {keys}.
You also have a 'calculator' tool for arithmetic expressions (e.g., "2*3.14", "9.8^2").
When providing the solution, clearly state any constants used by their full name and value with units.
In the 'constants_used' output field, list the key names of the constants you retrieved using the 'getConstant' tool."""

PHYSICS_USER_PROMPT = """Question: {question}

Answer:"""


class PhysicsAgent:
    """Answers physics questions, reporting which constants were looked up"""

    def __init__(self, llm_service: Optional[TutorLLMService] = None):
        self.llm_service = llm_service or TutorLLMService()

    async def solve(self, question: str) -> PhysicsAnswer:
        logger.info(f"🔭 Answering physics question: {question[:50]}...")
        system_prompt = PHYSICS_SYSTEM_PROMPT.format(keys=", ".join(constant_keys()))

        try:
            run = await self.llm_service.generate_with_tools(
                system_and_user(system_prompt, PHYSICS_USER_PROMPT.format(question=question)),
                tools=PHYSICS_TOOLS,
                schema=PhysicsAnswer,
            )
        except Exception as e:
            logger.error(f"❌ Error generating physics answer: {str(e)}")
            raise HandlerError(str(e)) from e

        answer = run.output
        if not answer.answer.strip():
            raise HandlerError("Physics model returned an empty answer")

        retrieved = [call.args.get("name") for call in run.successful_calls(get_constant_tool.name)]
        constants_used = reconcile_constants(answer.constants_used, retrieved)

        logger.info(f"✅ Physics answer generated, constants used: {constants_used}")
        return PhysicsAnswer(answer=answer.answer, constants_used=constants_used)


def reconcile_constants(reported: Iterable[str], retrieved: Iterable[str]) -> List[str]:
    """Merge model-reported and actually retrieved constant keys.

    Keys that are not in the constants table are dropped; order is reported
    keys first, then any retrieved keys the model forgot to mention.
    """
    table = get_constants_table()
    result: List[str] = []
    for key in list(reported) + list(retrieved):
        if key in result:
            continue
        if key not in table:
            logger.warning(f"⚠️ Dropping unknown constant key {key!r} from answer")
            continue
        result.append(key)
    return result
