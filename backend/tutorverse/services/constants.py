import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional

from tutorverse.core.config import settings
from tutorverse.core.errors import ConstantNotFoundError
from tutorverse.models.schemas import ConstantEntry

logger = logging.getLogger(__name__)

DEFAULT_CONSTANTS_FILE = Path(__file__).resolve().parent.parent / "data" / "physical_constants.json"


def load_constants(path: Optional[Path] = None) -> Mapping[str, ConstantEntry]:
    """Read a constants file into a read-only mapping keyed by constant key.

    The file is a JSON object of ``key -> {name, value, unit, symbol}``.
    """
    path = Path(path or settings.CONSTANTS_FILE or DEFAULT_CONSTANTS_FILE)
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    table = {key: ConstantEntry(key=key, **fields) for key, fields in raw.items()}
    logger.info(f"📚 Loaded {len(table)} physical constants from {path.name}")
    return MappingProxyType(table)


@lru_cache(maxsize=1)
def get_constants_table() -> Mapping[str, ConstantEntry]:
    """Process-wide constants table, loaded on first use"""
    return load_constants()


def lookup(key: str) -> ConstantEntry:
    """Return the constant stored under ``key`` or raise ConstantNotFoundError."""
    entry = get_constants_table().get(key)
    if entry is None:
        raise ConstantNotFoundError(key)
    return entry


def list_constants() -> List[ConstantEntry]:
    return list(get_constants_table().values())


def constant_keys() -> List[str]:
    return list(get_constants_table().keys())
