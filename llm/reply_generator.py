"""Reply generator: Gemini via LangChain with the support persona prepended.

- Uses Google Gemini through LangChain (ChatGoogleGenerativeAI) for replies
- Context is the prior turns plus the current prompt, passed separately
- Never raises: every upstream failure becomes the fixed fallback reply
"""
from __future__ import annotations

import time
from typing import Any, List, Optional, Sequence

import structlog
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from api.features.chat.exceptions import GenerationFailure
from api.features.chat.history import ContextTurn
from llm.prompts.support.system_instruction import (
    FALLBACK_REPLY,
    MODEL_ACKNOWLEDGEMENT,
    SYSTEM_INSTRUCTION,
)

logger = structlog.get_logger("chat.llm")


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    # Gemini may answer with a list of parts
    parts: List[str] = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts)


class ReplyGenerator:
    def __init__(
        self,
        *,
        api_key: str = "",
        model: str = "gemini-2.5-flash",
        max_output_tokens: int = 500,
        timeout: float = 30.0,
        max_retries: int = 1,
        llm: Optional[BaseChatModel] = None,
    ):
        self.model = model
        self.max_output_tokens = max_output_tokens
        if llm is not None:
            self.llm = llm
        elif api_key:
            self.llm = ChatGoogleGenerativeAI(
                model=self.model,
                google_api_key=api_key,
                max_output_tokens=self.max_output_tokens,
                timeout=timeout,
                max_retries=max_retries,
            )
        else:
            self.llm = None
            logger.warning(
                "gemini_api_key_missing",
                model=self.model,
                detail="every reply will be the fallback text",
            )

    def build_messages(
        self, turns: Sequence[ContextTurn], prompt: str
    ) -> List[BaseMessage]:
        messages: List[BaseMessage] = [
            HumanMessage(content=SYSTEM_INSTRUCTION),
            AIMessage(content=MODEL_ACKNOWLEDGEMENT),
        ]
        for turn in turns:
            if turn.role == "user":
                messages.append(HumanMessage(content=turn.text))
            else:
                messages.append(AIMessage(content=turn.text))
        messages.append(HumanMessage(content=prompt))
        return messages

    async def generate(self, turns: Sequence[ContextTurn], prompt: str) -> str:
        """Return Gemini's reply, or ``FALLBACK_REPLY`` if anything goes wrong."""
        start = time.time()
        try:
            reply = await self._generate(turns, prompt)
        except Exception as e:
            logger.error(
                "reply_generation_failed",
                model=self.model,
                error=str(e),
                latency_ms=int((time.time() - start) * 1000),
            )
            return FALLBACK_REPLY
        logger.info(
            "reply_generated",
            model=self.model,
            prior_turns=len(turns),
            latency_ms=int((time.time() - start) * 1000),
        )
        return reply

    async def _generate(self, turns: Sequence[ContextTurn], prompt: str) -> str:
        if self.llm is None:
            raise GenerationFailure("Gemini API key not configured")
        out = await self.llm.ainvoke(self.build_messages(turns, prompt))
        text = _content_text(out.content).strip()
        if not text:
            raise GenerationFailure("Gemini returned an empty response")
        return text
