"""Stub pipeline pieces and a scripted chat model used across the tests."""

from typing import Any, List, Optional

from langchain_core.messages import AIMessage

from tutorverse.models.schemas import Subject


class StubRouter:
    def __init__(self, subject: Any = Subject.MATH, error: Optional[Exception] = None):
        self.subject = subject
        self.error = error
        self.calls: List[str] = []

    async def route(self, question: str):
        self.calls.append(question)
        if self.error:
            raise self.error
        return self.subject


class StubHandler:
    def __init__(self, payload: Any = None, error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls: List[str] = []

    async def solve(self, question: str):
        self.calls.append(question)
        if self.error:
            raise self.error
        return self.payload


class _Bound:
    def __init__(self, model: "ScriptedChatModel"):
        self.model = model

    async def ainvoke(self, messages):
        self.model.tool_round_inputs.append(list(messages))
        if self.model.error:
            raise self.model.error
        if self.model.tool_turns:
            return self.model.tool_turns.pop(0)
        return AIMessage(content="done")


class _Structured:
    def __init__(self, model: "ScriptedChatModel", schema):
        self.model = model
        self.schema = schema

    async def ainvoke(self, messages):
        self.model.structured_inputs.append((self.schema, list(messages)))
        if self.model.error:
            raise self.model.error
        return self.model.structured_outputs.pop(0)


class ScriptedChatModel:
    """Duck-typed stand-in for a LangChain chat model.

    ``tool_turns`` are returned, in order, by the tool-bound model; once they
    run out it answers without tool calls. ``structured_outputs`` are returned,
    in order, by ``with_structured_output``.
    """

    def __init__(self, tool_turns=None, structured_outputs=None, error: Optional[Exception] = None):
        self.tool_turns = list(tool_turns or [])
        self.structured_outputs = list(structured_outputs or [])
        self.error = error
        self.bound_tool_names: List[str] = []
        self.tool_round_inputs: List[list] = []
        self.structured_inputs: List[tuple] = []

    def bind_tools(self, tools):
        self.bound_tool_names = [t.name for t in tools]
        return _Bound(self)

    def with_structured_output(self, schema):
        return _Structured(self, schema)


def tool_call_message(*calls) -> AIMessage:
    """AIMessage requesting the given (name, args) tool calls"""
    return AIMessage(
        content="",
        tool_calls=[
            {"name": name, "args": args, "id": f"call_{i}", "type": "tool_call"}
            for i, (name, args) in enumerate(calls)
        ],
    )


