from __future__ import annotations

import asyncio
import logging
import math
import re
import time
from typing import Any

import openai
from langchain_core.prompts import ChatPromptTemplate

from src.core.contracts.agent import AgentResponse, ResponseMetadata
from src.core.exceptions import AgentUnavailable, ProviderRateLimited

SYSTEM = """You are a specialist agent ({model}) working for a development orchestrator.
The orchestrator delegated this task to you as part of a larger plan.
Task category: {role_hint}
Give a thorough, expert-level answer in your area. Do not ask follow-up questions."""

RATE_LIMIT_PATTERN = re.compile(r"\b429\b|rate_limit_exceeded|rate limit")


def estimate_tokens(*texts: str) -> int:
    return sum(math.ceil(len(t) / 4) for t in texts if t)


def is_rate_limit_signal(error: BaseException) -> bool:
    if isinstance(error, (ProviderRateLimited, openai.RateLimitError)):
        return True
    if isinstance(error, openai.APIStatusError):
        return error.status_code == 429
    return RATE_LIMIT_PATTERN.search(str(error).lower()) is not None


class ChatModelAgent:
    """Uniform Agent capability on top of a LangChain chat model."""

    def __init__(self, provider: str, model: str, llm: Any, cost_per_token: float = 0.0):
        self.provider = provider
        self.model = model
        self.llm = llm
        self.cost_per_token = cost_per_token
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", SYSTEM),
            ("human", "{input}"),
        ])
        self.log = logging.getLogger(f"agent.{provider}")

    def _response(self, success: bool, result: str, tokens: int, start: float, estimated: bool = False, error: str | None = None) -> AgentResponse:
        return AgentResponse(
            success=success,
            result=result,
            metadata=ResponseMetadata(
                tokens_used=tokens,
                cost=tokens * self.cost_per_token,
                duration_ms=int((time.perf_counter() - start) * 1000),
                model=self.model,
                estimated=estimated,
            ),
            error=error,
        )

    async def execute(self, prompt: str, role_hint: str) -> AgentResponse:
        start = time.perf_counter()
        messages = self.prompt.format_messages(model=self.model, role_hint=role_hint or "general", input=prompt)
        try:
            out = await self.llm.ainvoke(messages)
        except (openai.APITimeoutError, openai.APIConnectionError, asyncio.TimeoutError) as e:
            raise AgentUnavailable(f"{self.provider}/{self.model}: {e}") from e
        except Exception as e:
            if is_rate_limit_signal(e):
                raise ProviderRateLimited(f"{self.provider}/{self.model}: {e}") from e
            self.log.warning("%s failed: %s", self.model, e)
            return self._response(False, "", 0, start, error=str(e))

        text = out.content if hasattr(out, "content") else str(out)
        if not isinstance(text, str):
            text = str(text)
        usage = getattr(out, "usage_metadata", None) or {}
        tokens = usage.get("total_tokens") or 0
        estimated = not tokens
        if estimated:
            tokens = estimate_tokens(prompt, text)
        if not text.strip():
            return self._response(False, "", tokens, start, estimated, error="Empty response from model")
        return self._response(True, text, tokens, start, estimated)
