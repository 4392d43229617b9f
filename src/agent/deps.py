from __future__ import annotations

import logging
from dataclasses import dataclass

from langchain_openai import ChatOpenAI

from src.core.config.models import ModelPriorityConfig
from src.agent.registry import AgentRegistry
from src.agent.worker import ChatModelAgent

log = logging.getLogger("agent.deps")


@dataclass(frozen=True)
class ProviderSpec:
    api_key_env: str
    base_url: str | None
    cost_per_token: float  # estimate, not vendor pricing


# OpenAI-compatible chat endpoints.
PROVIDERS: dict[str, ProviderSpec] = {
    "openai": ProviderSpec("OPENAI_API_KEY", None, 0.00001),
    "groq": ProviderSpec("GROQ_API_KEY", "https://api.groq.com/openai/v1", 0.0000009),
    "openrouter": ProviderSpec("OPENROUTER_API_KEY", "https://openrouter.ai/api/v1", 0.000001),
    "perplexity": ProviderSpec("PERPLEXITY_API_KEY", "https://api.perplexity.ai", 0.000001),
}


def build_chat_agent(provider: str, model: str, api_key: str, timeout_s: float = 30.0) -> ChatModelAgent:
    spec = PROVIDERS[provider]
    llm = ChatOpenAI(
        model=model,
        api_key=api_key,
        base_url=spec.base_url,
        temperature=0.7,
        timeout=timeout_s,
        max_retries=0,
    )
    return ChatModelAgent(provider, model, llm, cost_per_token=spec.cost_per_token)


def build_registry(config: ModelPriorityConfig, env: dict[str, str], timeout_s: float = 30.0) -> AgentRegistry:
    """Register a chat-agent factory for every configured provider that has an API key."""
    registry = AgentRegistry()
    for provider in sorted(config.provider_names()):
        spec = PROVIDERS.get(provider)
        if spec is None:
            log.warning("Provider %s has no built-in client; its models will be skipped", provider)
            continue
        api_key = env.get(spec.api_key_env)
        if not api_key:
            log.warning("%s not set; provider %s disabled", spec.api_key_env, provider)
            continue

        def factory(model: str, provider: str = provider, api_key: str = api_key) -> ChatModelAgent:
            return build_chat_agent(provider, model, api_key, timeout_s)

        registry.register_factory(provider, factory)
    return registry
