import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar
from uuid import UUID

from langchain_core.callbacks import AsyncCallbackHandler
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_core.tools import BaseTool
from pydantic import BaseModel

from tutorverse.core.config import settings
from tutorverse.core.errors import LLMNotConfiguredError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

FINAL_ANSWER_INSTRUCTION = (
    "Using the work above, give your final answer in the required format."
)


class LLMCallbackHandler(AsyncCallbackHandler):
    """Async callback handler for LLM timing logs"""

    def __init__(self):
        # Keyed by run id: one handler serves every concurrent call on the shared model
        self.start_times: Dict[UUID, float] = {}

    async def on_chat_model_start(
        self, serialized: Dict[str, Any], messages: List[List[BaseMessage]], *, run_id: UUID, **kwargs
    ):
        self.start_times[run_id] = time.time()
        logger.info("LLM generation started")

    async def on_llm_end(self, response, *, run_id: UUID, **kwargs):
        start_time = self.start_times.pop(run_id, None)
        if start_time is not None:
            duration = time.time() - start_time
            logger.info(f"LLM generation completed in {duration:.2f}s")

    async def on_llm_error(self, error: BaseException, *, run_id: UUID, **kwargs):
        self.start_times.pop(run_id, None)


@dataclass
class ToolInvocation:
    """One tool call made by the model during a generation"""
    name: str
    args: Dict[str, Any]
    output: str
    ok: bool


@dataclass
class ToolRun:
    """Result of a tool-calling generation"""
    output: Any
    tool_calls: List[ToolInvocation] = field(default_factory=list)

    def successful_calls(self, name: str) -> List[ToolInvocation]:
        return [call for call in self.tool_calls if call.name == name and call.ok]


def build_chat_model():
    """Create the LangChain chat model selected by the settings"""
    provider = settings.LLM_PROVIDER.lower()
    callbacks = [LLMCallbackHandler()]

    if provider == "groq":
        if not settings.GROQ_API_KEY:
            raise LLMNotConfiguredError("GROQ_API_KEY is not set")
        from langchain_groq import ChatGroq

        llm = ChatGroq(
            model=settings.LLM_MODEL.replace("groq/", ""),  # Remove groq/ prefix
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT,
            max_retries=settings.LLM_MAX_RETRIES,
            groq_api_key=settings.GROQ_API_KEY,
            callbacks=callbacks,
        )
        logger.info(f"Initialized Groq LLM: {settings.LLM_MODEL}")
        return llm

    if provider == "gemini":
        if not settings.GOOGLE_API_KEY:
            raise LLMNotConfiguredError("GOOGLE_API_KEY is not set")
        from langchain_google_genai import ChatGoogleGenerativeAI

        llm = ChatGoogleGenerativeAI(
            model=settings.LLM_MODEL.replace("gemini/", ""),
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT,
            max_retries=settings.LLM_MAX_RETRIES,
            google_api_key=settings.GOOGLE_API_KEY,
            callbacks=callbacks,
        )
        logger.info(f"Initialized Gemini LLM: {settings.LLM_MODEL}")
        return llm

    raise LLMNotConfiguredError(f"Unsupported LLM provider: {settings.LLM_PROVIDER}")


class TutorLLMService:
    """Thin wrapper over a LangChain chat model.

    Offers the two call shapes the tutor needs: a schema-constrained
    generation, and a generation that may call tools before producing a
    schema-constrained answer. Both either return a schema instance or raise.
    """

    def __init__(self, llm=None):
        self._llm = llm

    @property
    def llm(self):
        # Built lazily so the app can start (and report health) without credentials
        if self._llm is None:
            self._llm = build_chat_model()
        return self._llm

    @property
    def is_configured(self) -> bool:
        try:
            return self.llm is not None
        except LLMNotConfiguredError:
            return False

    async def generate_structured(
        self,
        messages: Sequence[BaseMessage],
        schema: Type[SchemaT],
    ) -> SchemaT:
        """Run one generation constrained to ``schema``"""
        structured_llm = self.llm.with_structured_output(schema)
        result = await structured_llm.ainvoke(list(messages))
        return self._coerce(result, schema)

    async def generate_with_tools(
        self,
        messages: Sequence[BaseMessage],
        tools: Sequence[BaseTool],
        schema: Type[SchemaT],
        max_rounds: Optional[int] = None,
    ) -> ToolRun:
        """Let the model call ``tools`` until it stops, then extract ``schema``.

        Tool failures are fed back to the model as error tool messages; only a
        failure of the generation itself propagates.
        """
        max_rounds = max_rounds or settings.MAX_TOOL_ROUNDS
        tools_by_name = {t.name: t for t in tools}
        llm_with_tools = self.llm.bind_tools(list(tools))

        history: List[BaseMessage] = list(messages)
        invocations: List[ToolInvocation] = []

        for round_number in range(1, max_rounds + 1):
            ai_message: AIMessage = await llm_with_tools.ainvoke(history)
            history.append(ai_message)

            if not ai_message.tool_calls:
                break

            logger.info(f"🔧 Round {round_number}: model requested {len(ai_message.tool_calls)} tool call(s)")
            for call in ai_message.tool_calls:
                tool_message = await self._run_tool(tools_by_name, call)
                history.append(tool_message)
                invocations.append(ToolInvocation(
                    name=call["name"],
                    args=dict(call.get("args") or {}),
                    output=str(tool_message.content),
                    ok=getattr(tool_message, "status", "success") != "error",
                ))
        else:
            logger.warning(f"⚠️ Tool loop stopped after {max_rounds} rounds")

        history.append(HumanMessage(content=FINAL_ANSWER_INSTRUCTION))
        output = await self.generate_structured(history, schema)
        return ToolRun(output=output, tool_calls=invocations)

    async def _run_tool(self, tools_by_name: Dict[str, BaseTool], call: Dict[str, Any]) -> ToolMessage:
        tool = tools_by_name.get(call["name"])
        if tool is None:
            logger.warning(f"⚠️ Model called unknown tool {call['name']!r}")
            return ToolMessage(
                content=f"Unknown tool {call['name']!r}. Available tools: {', '.join(tools_by_name)}",
                tool_call_id=call["id"],
                name=call["name"],
                status="error",
            )
        return await tool.ainvoke({**call, "type": "tool_call"})

    @staticmethod
    def _coerce(result: Any, schema: Type[SchemaT]) -> SchemaT:
        if result is None:
            raise ValueError(f"Model returned no {schema.__name__} output")
        if isinstance(result, schema):
            return result
        # Some providers hand back a dict when structured output falls back to JSON mode
        return schema.model_validate(result)


def system_and_user(system_prompt: str, user_prompt: str) -> List[BaseMessage]:
    return [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
