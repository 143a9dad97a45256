# backend/tutorverse/services/tools.py - Tools exposed to the tutor LLM

import logging

from langchain_core.tools import ToolException, tool

from tutorverse.core.errors import ConstantNotFoundError
from tutorverse.services.calculator import evaluate
from tutorverse.services.constants import lookup

logger = logging.getLogger(__name__)


@tool("calculator")
def calculator_tool(expression: str) -> float:
    """Parse and execute arithmetic expressions. Can be used for basic math operations like
    addition, subtraction, multiplication, division, and exponentiation.

    Args:
        expression: The arithmetic expression to evaluate (e.g., "2+2", "10/5", "3^2").
            Returns NaN when the expression is invalid.
    """
    result = evaluate(expression)
    logger.info(f"🧮 calculator({expression!r}) -> {result}")
    return result


@tool("getConstant")
def get_constant_tool(name: str) -> str:
    """Looks up a physical constant by its key name (e.g., "speedOfLight", "plancksConstant",
    "electronMass"). Returns the constant as a string with its value and unit.

    Args:
        name: The key name of the constant to look up (e.g., "speedOfLight", "gravitationalConstant").
    """
    try:
        constant = lookup(name)
    except ConstantNotFoundError as e:
        logger.warning(f"⚠️ Model asked for unknown constant {name!r}")
        raise ToolException(str(e)) from e
    return f"{constant.value} {constant.unit}"


# Unknown keys and malformed arguments go back to the model as error tool messages
get_constant_tool.handle_tool_error = True
get_constant_tool.handle_validation_error = True
calculator_tool.handle_validation_error = True

MATH_TOOLS = [calculator_tool]
PHYSICS_TOOLS = [get_constant_tool, calculator_tool]
