from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Optional, Union
from enum import Enum
import time

from tutorverse.core.errors import ErrorCategory


def _now_ms() -> int:
    return int(time.time() * 1000)


class Subject(str, Enum):
    """Subjects the intent router can choose"""
    MATH = "Math"
    PHYSICS = "Physics"


class ConstantEntry(BaseModel):
    """A physical constant in the lookup table"""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Lookup key, e.g. speedOfLight")
    name: str = Field(..., description="Human readable name")
    value: float = Field(..., description="Numeric value in SI units")
    unit: str = Field(..., description="Unit of the value")
    symbol: str = Field(..., description="Conventional symbol")


# Structured LLM outputs

class RouteDecision(BaseModel):
    """Subject chosen for a query"""
    route: Subject = Field(..., description="The subject to which the query should be routed.")


class MathSolution(BaseModel):
    """Answer produced by the math handler"""
    solution: str = Field(..., description="The step-by-step solution to the math question.")


class PhysicsAnswer(BaseModel):
    """Answer produced by the physics handler"""
    answer: str = Field(..., description="The answer to the physics question.")
    constants_used: List[str] = Field(
        default_factory=list,
        description='The key names of the physical constants used in the answer (e.g., "speedOfLight").',
    )


# Answer envelopes returned to the presentation layer

class _EnvelopeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_query: str = Field(default="", description="The question as submitted")
    timestamp: int = Field(default_factory=_now_ms, description="Creation time in milliseconds since epoch")


class MathEnvelope(_EnvelopeBase):
    kind: Literal["math"] = "math"
    solution: str


class PhysicsEnvelope(_EnvelopeBase):
    kind: Literal["physics"] = "physics"
    answer: str
    constants_used: List[str] = Field(default_factory=list)


class ErrorEnvelope(_EnvelopeBase):
    kind: Literal["error"] = "error"
    error: str
    category: ErrorCategory


class GeneralEnvelope(_EnvelopeBase):
    kind: Literal["general"] = "general"
    message: str


class EmptyEnvelope(_EnvelopeBase):
    """Placeholder a client shows before any question; the dispatcher never returns it"""

    kind: Literal["empty"] = "empty"


AnswerEnvelope = Annotated[
    Union[MathEnvelope, PhysicsEnvelope, ErrorEnvelope, GeneralEnvelope, EmptyEnvelope],
    Field(discriminator="kind"),
]


# HTTP request/response bodies

class CalculatorRequest(BaseModel):
    """Request for evaluating an arithmetic expression"""
    expression: str = Field(..., description='Arithmetic expression, e.g. "(2+3)*4" or "3^2"')


class CalculatorResponse(BaseModel):
    expression: str
    result: Optional[float] = Field(None, description="Numeric result, null when the expression is invalid")
    ok: bool
