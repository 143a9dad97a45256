from fastapi import APIRouter, HTTPException
from typing import List

from tutorverse.core.errors import ConstantNotFoundError
from tutorverse.models.schemas import ConstantEntry
from tutorverse.services.constants import list_constants, lookup

router = APIRouter()


@router.get("", response_model=List[ConstantEntry])
async def get_constants():
    """All physical constants available to the physics tutor"""
    return list_constants()


@router.get("/{key}", response_model=ConstantEntry)
async def get_constant(key: str):
    try:
        return lookup(key)
    except ConstantNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
