"""Synthesize the task summary from step results through the summarizer role."""
from __future__ import annotations

from collections import Counter

from langchain_core.prompts import PromptTemplate

from src.core.config.models import ModelPriorityConfig
from src.core.contracts.agent import AgentResponse
from src.core.contracts.orchestrator import OrchestrationStep, Task

RESULT_PREVIEW_CHARS = 200

PROMPT = """Summarize the results of this task.

Task: {description}

Results:
{step_results}

Provide a concise summary of what was accomplished. Do not invent information; use only the results above."""


def summary_role(config: ModelPriorityConfig) -> str:
    return "summarizer" if config.has_role("summarizer") else "director"


def build_summary_prompt(task: Task, results: list[AgentResponse]) -> str:
    parts = []
    for i, r in enumerate(results, 1):
        text = r.result
        if len(text) > RESULT_PREVIEW_CHARS:
            text = text[:RESULT_PREVIEW_CHARS] + "..."
        parts.append(f"Step {i} ({r.metadata.model}): {text}")
    return PromptTemplate.from_template(PROMPT).format(
        description=task.description,
        step_results="\n".join(parts) or "(no steps executed)",
    )


def build_summary_step(task: Task, results: list[AgentResponse], config: ModelPriorityConfig) -> OrchestrationStep:
    return OrchestrationStep(
        step_id="final-summary",
        role=summary_role(config),
        action="Generate task summary",
        input=build_summary_prompt(task, results),
        expected_output="A concise summary of the task results.",
    )


def model_breakdown(results: list[AgentResponse]) -> list[str]:
    """e.g. ["gpt-4o-mini(2)", "llama-3.1-8b"]"""
    counts = Counter(r.metadata.model or "unknown" for r in results)
    return [f"{model}({n})" if n > 1 else model for model, n in counts.items()]
