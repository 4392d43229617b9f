"""Execute one step against its role's prioritized (provider, model) candidates."""
from __future__ import annotations

import asyncio
import logging
import time

from src.agent.registry import AgentRegistry
from src.agent.worker import is_rate_limit_signal
from src.core.config.models import ModelPriorityConfig
from src.core.contracts.agent import AgentResponse
from src.core.contracts.orchestrator import OrchestrationStep, Task
from src.core.exceptions import NoModelsConfigured, StepExecutionError
from src.orchestrator.rate_limiter import RateLimiter

log = logging.getLogger("executor")

DEFAULT_TIMEOUT_S = 30.0


class StepExecutor:
    def __init__(
        self,
        config: ModelPriorityConfig,
        registry: AgentRegistry,
        rate_limiter: RateLimiter,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ):
        self.config = config
        self.registry = registry
        self.rate_limiter = rate_limiter
        self.timeout_s = timeout_s

    def candidates(self, role: str) -> list[tuple[str, str]]:
        role_config = self.config.get_role(role)
        pairs = role_config.candidates() if role_config else []
        if not pairs:
            raise NoModelsConfigured(role)
        return pairs

    async def execute_step(self, step: OrchestrationStep, task: Task) -> AgentResponse:
        role = step.role
        attempts: list[str] = []
        for provider, model in self.candidates(role):
            admission = self.rate_limiter.admit(provider)
            if not admission.allowed:
                log.warning("Step %s: %s Skipping to next provider.", step.step_id, admission.reason)
                attempts.append(f"{provider}/{model}: rate limited")
                continue

            try:
                agent = self.registry.resolve(provider, model)
            except Exception as e:
                log.error("Could not build agent for %s/%s: %s. Skipping.", provider, model, e)
                attempts.append(f"{provider}/{model}: {e}")
                continue
            if agent is None:
                log.warning("No agent available for model %s on provider %s. Skipping.", model, provider)
                attempts.append(f"{provider}/{model}: no agent")
                continue

            log.info("→ step %s [%s] %s/%s", step.step_id, role, provider, model)
            start = time.perf_counter()
            try:
                result = await asyncio.wait_for(agent.execute(step.input, task.type), timeout=self.timeout_s)
            except asyncio.TimeoutError:
                latency_ms = int((time.perf_counter() - start) * 1000)
                log.warning("← step %s %s/%s: timed out after %s ms", step.step_id, provider, model, latency_ms)
                attempts.append(f"{provider}/{model}: timeout")
                continue
            except Exception as e:
                latency_ms = int((time.perf_counter() - start) * 1000)
                log.error("← step %s %s/%s: error %s (%s ms)", step.step_id, provider, model, e, latency_ms)
                if is_rate_limit_signal(e):
                    self.rate_limiter.enter_cooldown(provider)
                attempts.append(f"{provider}/{model}: {e}")
                continue

            latency_ms = int((time.perf_counter() - start) * 1000)
            if result.success:
                log.info(
                    "← step %s completed -> %s (%s) | Cost: %.6f (%s ms)",
                    step.step_id, model, provider, result.metadata.cost, latency_ms,
                )
                return result
            reason = result.error or result.result or "Unknown failure"
            log.warning("← step %s %s/%s failed: %s. Trying next model.", step.step_id, provider, model, reason)
            attempts.append(f"{provider}/{model}: {reason}")

        raise StepExecutionError(step.step_id, role, attempts)
