"""Tests for the physical constants table and the getConstant tool."""

import json

import pytest

from tutorverse.core.errors import ConstantNotFoundError
from tutorverse.services.constants import (
    constant_keys, get_constants_table, list_constants, load_constants, lookup
)
from tutorverse.services.tools import get_constant_tool


def test_lookup_speed_of_light():
    entry = lookup("speedOfLight")
    assert entry.key == "speedOfLight"
    assert entry.unit
    assert entry.value > 0
    assert entry.symbol == "c"


def test_lookup_unknown_key_raises_not_found():
    with pytest.raises(ConstantNotFoundError) as excinfo:
        lookup("doesNotExist")
    assert excinfo.value.key == "doesNotExist"
    assert 'Constant with key "doesNotExist" not found' in str(excinfo.value)


def test_table_is_loaded_once_and_read_only():
    table = get_constants_table()
    assert get_constants_table() is table
    with pytest.raises(TypeError):
        table["speedOfLight"] = None


def test_every_entry_is_complete():
    entries = list_constants()
    assert len(entries) == len(constant_keys()) >= 20
    for entry in entries:
        assert entry.name and entry.unit and entry.symbol
        assert entry.value > 0


def test_load_constants_from_custom_file(tmp_path):
    path = tmp_path / "constants.json"
    path.write_text(json.dumps({
        "answer": {"name": "The answer", "value": 42, "unit": "1", "symbol": "A"}
    }), encoding="utf-8")

    table = load_constants(path)

    assert list(table) == ["answer"]
    assert table["answer"].value == 42.0


def test_get_constant_tool_formats_value_and_unit():
    result = get_constant_tool.invoke({"name": "speedOfLight"})
    assert result == "299792458.0 m/s"


def test_get_constant_tool_reports_unknown_key_to_model():
    message = get_constant_tool.invoke({
        "name": "getConstant",
        "args": {"name": "warpFactor"},
        "id": "call_0",
        "type": "tool_call",
    })
    assert message.status == "error"
    assert 'Constant with key "warpFactor" not found' in message.content
