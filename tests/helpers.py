"""Test doubles: scripted in-memory agents, a controllable clock, config builders."""
from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

from src.core.config.models import ModelPriorityConfig
from src.core.contracts.agent import AgentResponse, ResponseMetadata


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockAgent:
    """Agent double. Each call pops the next scripted outcome (the last one repeats).

    An outcome is a result string (success), an AgentResponse, an Exception
    instance (raised), or a callable taking the prompt.
    """

    def __init__(self, name: str, *outcomes: Any, cost: float = 0.001, delay: float = 0.0, on_call: Callable | None = None):
        self.name = name
        self.outcomes = list(outcomes) or [f"{name} done"]
        self.cost = cost
        self.delay = delay
        self.on_call = on_call
        self.calls: list[tuple[str, str]] = []

    async def execute(self, prompt: str, role_hint: str) -> AgentResponse:
        self.calls.append((prompt, role_hint))
        if self.on_call:
            self.on_call(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if callable(outcome) and not isinstance(outcome, AgentResponse):
            outcome = outcome(prompt)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, AgentResponse):
            return outcome
        return AgentResponse(
            success=True,
            result=outcome,
            metadata=ResponseMetadata(tokens_used=10, cost=self.cost, duration_ms=1, model=self.name),
        )


def failed(name: str, error: str = "model refused") -> AgentResponse:
    return AgentResponse(success=False, result="", metadata=ResponseMetadata(model=name), error=error)


def make_config(roles: dict[str, list[tuple[str, list[str], int]]], rate_limits: dict | None = None) -> ModelPriorityConfig:
    """roles: role -> [(provider, [models], priority), ...]"""
    return ModelPriorityConfig.model_validate({
        "roles": {
            role: {"providers": [{"name": n, "models": m, "priority": p} for n, m, p in providers]}
            for role, providers in roles.items()
        },
        "rateLimits": rate_limits or {},
    })


def plan_json(*steps: tuple[str, str, str], fenced: bool = True) -> str:
    body = json.dumps({
        "steps": [
            {"stepId": sid, "agent": role, "action": f"do {sid}", "input": inp, "expectedOutput": "ok"}
            for sid, role, inp in steps
        ],
    })
    return f"Here is the plan:\n```json\n{body}\n```" if fenced else body

