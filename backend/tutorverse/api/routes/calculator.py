from fastapi import APIRouter
import math

from tutorverse.models.schemas import CalculatorRequest, CalculatorResponse
from tutorverse.services.calculator import evaluate

router = APIRouter()


@router.post("/evaluate", response_model=CalculatorResponse)
async def evaluate_expression(request: CalculatorRequest):
    """Evaluate an arithmetic expression with the same evaluator the tutor uses"""
    result = evaluate(request.expression)
    ok = not math.isnan(result)
    return CalculatorResponse(expression=request.expression, result=result if ok else None, ok=ok)
