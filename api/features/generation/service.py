"""Response generation: one model reply from history plus few-shot examples.

The backend is any LangChain chat model. Calls are single-shot: no retry,
no timeout, no backoff. Backend failures surface as ``GenerationError``; an
empty completion is not a failure and maps to ``FALLBACK_REPLY``.
"""
from __future__ import annotations

import time
from typing import Any, Callable, List, Optional, Protocol, Sequence

import structlog
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from api.features.generation.exceptions import GenerationError
from api.features.transcript.entities.message import MessageRole
from rag.prompts.few_shot.system_instruction import ExampleLike, build_system_instruction

logger = structlog.get_logger("rlchat.generation")

FALLBACK_REPLY = "I'm sorry, I couldn't generate a response."


class TurnLike(Protocol):
    role: str
    content: str


def to_chat_messages(history: Sequence[TurnLike]) -> List[BaseMessage]:
    out: List[BaseMessage] = []
    for turn in history:
        if turn.role == MessageRole.MODEL.value:
            out.append(AIMessage(content=turn.content))
        else:
            out.append(HumanMessage(content=turn.content))
    return out


def extract_text(message: Any) -> str:
    """Pull plain text out of a chat model result."""
    content = getattr(message, "content", message)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts: List[str] = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts)


class ResponseGenerator:
    """Pass a ready ``llm``, or an ``llm_factory`` that builds it per call.

    Factory errors such as missing credentials count as backend failures.
    """

    def __init__(
        self,
        *,
        llm: Optional[BaseChatModel] = None,
        llm_factory: Optional[Callable[[], BaseChatModel]] = None,
        model: str = "gpt-4o-mini",
    ):
        if llm is None and llm_factory is None:
            raise ValueError("ResponseGenerator needs llm or llm_factory")
        self.llm = llm
        self.llm_factory = llm_factory
        self.model = model

    async def generate(
        self, *, history: Sequence[TurnLike], examples: Sequence[ExampleLike]
    ) -> str:
        system_instruction = build_system_instruction(examples=examples)
        messages = [SystemMessage(content=system_instruction), *to_chat_messages(history)]

        start = time.time()
        try:
            llm = self.llm if self.llm is not None else self.llm_factory()
            result = await llm.ainvoke(messages)
        except Exception as e:
            logger.error(
                "generation_failed",
                model=self.model,
                error=str(e),
                latency_ms=int((time.time() - start) * 1000),
            )
            raise GenerationError(str(e), model=self.model) from e

        text = extract_text(result)
        logger.info(
            "generation_completed",
            model=self.model,
            examples=len(examples),
            turns=len(history),
            empty=not text,
            latency_ms=int((time.time() - start) * 1000),
        )
        return text or FALLBACK_REPLY
