"""
Task lifecycle: plan through the director, run each step in order, summarize.

A task moves planning -> executing -> completed | failed. Any step failure
aborts the whole plan; no partial TaskResult is returned.
"""
from __future__ import annotations

import logging
import time

from src.agent.registry import AgentRegistry
from src.core.config.models import ModelPriorityConfig
from src.core.contracts.agent import AgentResponse
from src.core.contracts.orchestrator import (
    OrchestrationPlan,
    OrchestrationStep,
    Task,
    TaskHistoryEntry,
    TaskProgress,
    TaskResult,
    TaskStatus,
    TaskType,
)
from src.core.exceptions import ConfigError, StepExecutionError
from src.orchestrator.executor import DEFAULT_TIMEOUT_S, StepExecutor
from src.orchestrator.planner import build_planning_prompt, describe_role, parse_plan
from src.orchestrator.rate_limiter import RateLimiter
from src.orchestrator.reporter import build_summary_step, model_breakdown

log = logging.getLogger("orchestrator")

DIRECTOR_PROMPT = """You are an intelligent development orchestrator. You coordinate multiple AI models to help with development tasks. When users interact with you directly, answer them yourself.

When a request calls for a specialist, say which role you would assign it to (for example "Let me assign this to our coder") and what you expect back.

Context: {context}

Question: {question}"""


class Orchestrator:
    def __init__(
        self,
        config: ModelPriorityConfig,
        registry: AgentRegistry,
        rate_limiter: RateLimiter | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        project_context: str | None = None,
    ):
        self.config = config
        self.registry = registry
        self.rate_limiter = rate_limiter or RateLimiter(config.rate_limits)
        self.executor = StepExecutor(config, registry, self.rate_limiter, timeout_s=timeout_s)
        self.project_context = project_context
        self._history: list[TaskHistoryEntry] = []
        self._progress: dict[str, TaskProgress] = {}

    async def execute_task(self, task: Task) -> TaskResult:
        progress = self._progress[task.id] = TaskProgress(task_id=task.id, status=TaskStatus.PLANNING)
        log.info("Starting task: %s (ID: %s)", task.description, task.id)
        try:
            plan = await self.create_plan(task)
            progress.total_steps = len(plan.steps)
            progress.status = TaskStatus.EXECUTING
            log.info(
                "Plan created with %s steps. Estimated cost: %.4f, time: %s",
                len(plan.steps), plan.estimated_cost, plan.estimated_time,
            )
            result = await self.execute_plan(plan, task)
            progress.status = TaskStatus.COMPLETED
            return result
        except Exception:
            progress.status = TaskStatus.FAILED
            log.exception("Error executing task %s", task.id)
            raise
        finally:
            self._progress.pop(task.id, None)

    async def create_plan(self, task: Task) -> OrchestrationPlan:
        director_step = OrchestrationStep(
            step_id="0-plan",
            role="director",
            action="Create orchestration plan",
            input=build_planning_prompt(task, self.config),
            expected_output="A valid JSON orchestration plan.",
        )
        response = await self.executor.execute_step(director_step, task)
        parsed = parse_plan(response.result, task)
        if parsed.is_fallback:
            log.warning("Director output for task %s was not a usable plan: %s", task.id, parsed.reason)
        return parsed.plan

    async def execute_plan(self, plan: OrchestrationPlan, task: Task) -> TaskResult:
        owns_progress = task.id not in self._progress
        progress = self._progress.setdefault(task.id, TaskProgress(task_id=task.id))
        progress.total_steps = len(plan.steps)
        progress.status = TaskStatus.EXECUTING
        start = time.perf_counter()
        results: list[AgentResponse] = []
        try:
            for step in plan.steps:
                try:
                    result = await self.executor.execute_step(step, task)
                except (StepExecutionError, ConfigError) as e:
                    log.error("Step %s failed: %s", step.step_id, e)
                    raise
                results.append(result)
                progress.completed_steps += 1
                log.info(
                    "Progress: %.2f%% - Completed step %s: %s",
                    progress.completed_steps / progress.total_steps * 100, step.step_id, step.action,
                )

            summary_step = build_summary_step(task, results, self.config)
            summary = await self.executor.execute_step(summary_step, task)
            results.append(summary)
        except Exception:
            progress.status = TaskStatus.FAILED
            raise
        finally:
            if owns_progress:
                self._progress.pop(task.id, None)

        total_time_ms = int((time.perf_counter() - start) * 1000)
        task_result = TaskResult(
            results=results,
            total_cost=sum(r.metadata.cost for r in results),
            total_time_ms=total_time_ms,
            summary=summary.result,
        )
        self._history.append(TaskHistoryEntry(task=task, result=task_result))

        log.info("Task completed in %.1fs", total_time_ms / 1000)
        log.info("Cost: %.6f", task_result.total_cost)
        log.info("Steps: %s", len(results))
        breakdown = model_breakdown(results)
        if breakdown:
            log.info("Models used: %s", ", ".join(breakdown))
        return task_result

    async def ask_director(self, question: str, context: str | None = None) -> AgentResponse:
        full_context = context or "None"
        if self.project_context:
            full_context = f"{self.project_context}\n\nAdditional Context: {context or 'None'}"
        step = OrchestrationStep(
            step_id="direct-question",
            role="director",
            action="Answer user question",
            input=DIRECTOR_PROMPT.format(context=full_context, question=question),
            expected_output="A direct answer to the user's question.",
        )
        task = Task(id="direct-ask", type=TaskType.DIRECT_QUESTION, description=question)
        return await self.executor.execute_step(step, task)

    async def execute_with_role(self, message: str, context: str | None, role: str) -> AgentResponse:
        """Run ``message`` as a single step on ``role``; fall back to the director."""
        if self.config.has_role(role):
            step = OrchestrationStep(
                step_id=f"role-{role}",
                role=role,
                action=f"Handle request as {role}",
                input=f"{message}\n\nContext:\n{context}" if context else message,
            )
            task = Task(id=f"role-{role}", type=TaskType.DIRECT_QUESTION, description=message, context=context)
            try:
                return await self.executor.execute_step(step, task)
            except StepExecutionError as e:
                log.warning("Role %s failed, asking director instead: %s", role, e)
        return await self.ask_director(message, context)

    def get_available_agents(self) -> list[str]:
        return self.registry.names()

    def get_role_capabilities(self, role: str) -> str:
        return describe_role(role, self.config)

    def get_task_history(self) -> list[TaskHistoryEntry]:
        return list(self._history)

    def get_task_progress(self, task_id: str) -> TaskProgress | None:
        return self._progress.get(task_id)

    def get_current_task_progress(self) -> TaskProgress | None:
        """Progress of the most recently started task still in flight."""
        if not self._progress:
            return None
        return next(reversed(self._progress.values()))
