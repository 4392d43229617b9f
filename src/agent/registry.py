from __future__ import annotations

import logging
from typing import Callable

from src.core.contracts.agent import Agent

log = logging.getLogger("agent.registry")

AgentFactory = Callable[[str], Agent]


class AgentRegistry:
    """Maps exact (provider, model) identifiers to agents.

    A provider-level factory builds the agent for any model id of that
    provider on first use; exact registrations take precedence.
    """

    def __init__(self) -> None:
        self._agents: dict[tuple[str, str], Agent] = {}
        self._factories: dict[str, AgentFactory] = {}

    def register(self, provider: str, model: str, agent: Agent) -> None:
        self._agents[(provider, model)] = agent

    def register_factory(self, provider: str, factory: AgentFactory) -> None:
        self._factories[provider] = factory

    def resolve(self, provider: str, model: str) -> Agent | None:
        agent = self._agents.get((provider, model))
        if agent is not None:
            return agent
        factory = self._factories.get(provider)
        if factory is None:
            return None
        agent = factory(model)
        self._agents[(provider, model)] = agent
        log.info("Built agent for %s/%s", provider, model)
        return agent

    def names(self) -> list[str]:
        names = {f"{provider}/{model}" for provider, model in self._agents}
        names.update(f"{provider}/*" for provider in self._factories)
        return sorted(names)

    def __len__(self) -> int:
        return len(self._agents) + len(self._factories)
