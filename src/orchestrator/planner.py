"""Build the planning prompt for the director and parse its answer into a Plan."""
from __future__ import annotations

import json
import logging
import re

from langchain_core.prompts import PromptTemplate

from src.core.config.models import ModelPriorityConfig
from src.core.contracts.orchestrator import OrchestrationPlan, OrchestrationStep, PlanParseResult, Task

log = logging.getLogger("planner")

FALLBACK_ROLE = "coder"
ESTIMATED_COST = 0.01
ESTIMATED_TIME = "30s"

ROLE_CAPABILITIES = {
    "director": "Project planning, task coordination, and high-level decision making. Excellent at breaking down complex tasks.",
    "coder": "Writing, implementing, and generating code in various languages. Fast execution and practical solutions.",
    "researcher": "Real-time internet search, finding current information, analyzing trends, and gathering up-to-date data using online sources.",
    "optimizer": "Performance analysis, code optimization, debugging, and improving efficiency of existing solutions.",
    "documenter": "Writing clear documentation, explanations, tutorials, and user-friendly content.",
    "summarizer": "Condensing information, creating summaries, and extracting key insights from complex data.",
    "reviewer": "Code review, quality assurance, identifying issues, and providing constructive feedback.",
    "security-auditor": "Security vulnerability assessment, penetration testing analysis, secure coding practices, and threat modeling.",
    "database-architect": "Database design, schema optimization, query performance tuning, and data modeling.",
    "ui-designer": "User interface design, UX patterns, component architecture, and visual design.",
    "devops-engineer": "Infrastructure automation, CI/CD pipelines, containerization, cloud deployment, and system reliability.",
    "api-architect": "RESTful API design, GraphQL schemas, API versioning, authentication patterns, and integration strategies.",
    "test-engineer": "Test automation, unit testing, integration testing, end-to-end testing, and test strategy development.",
    "data-analyst": "Data analysis, metrics interpretation, user behavior analysis, and business intelligence insights.",
    "mobile-developer": "Mobile app development, responsive design, and cross-platform solutions.",
    "content-strategist": "Content planning, copywriting, SEO optimization, and user engagement.",
    "accessibility-expert": "WCAG compliance, screen reader testing, accessible design patterns, and inclusive user experience design.",
}

# Only the {task_*} and {roles} names are variables; the JSON example uses {{ }} for literal braces.
PLAN_PROMPT = """CRITICAL: You MUST respond with ONLY valid JSON. No explanations, no markdown, no additional text.

You are an AI code orchestrator. Create an execution plan for the following task.

Task:
- Type: {task_type}
- Description: {task_description}
- Context: {task_context}
- Priority: {task_priority}
- Files: {task_files}
- Requirements: {task_requirements}

Available roles:
{roles}

Role assignment guidelines:
- Use "researcher" for tasks requiring current information, web search, or real-time data
- Use "coder" for writing, implementing, or creating code
- Use "optimizer" for performance analysis, debugging, or improving existing code
- Use "documenter" for writing documentation, explanations, or tutorials
- Use "reviewer" for code review, quality assurance, or feedback
- Use "summarizer" for condensing information or extracting key insights

Instructions:
1. Break the task into logical steps, in the order they must run.
2. Assign the most appropriate available role to each step.
3. For research tasks, always use the "researcher" role.
4. Define the input for each step clearly and completely; steps do not see each other's output.

RESPONSE FORMAT (JSON ONLY):
{{"steps": [{{"stepId": "1", "agent": "role-name", "action": "description", "input": "specific input", "expectedOutput": "expected result"}}], "reasoning": "why this decomposition"}}
"""

_FENCED = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
_BRACED = re.compile(r"\{[\s\S]*\}")


def describe_role(role: str, config: ModelPriorityConfig) -> str:
    capability = ROLE_CAPABILITIES.get(role, f"Handles {role} tasks")
    role_config = config.get_role(role)
    models = ", ".join(m for _, m in role_config.candidates()) if role_config else ""
    return f"{capability} Models: {models or 'No models configured'}"


def build_planning_prompt(task: Task, config: ModelPriorityConfig) -> str:
    roles = "\n".join(f"- {role}: {describe_role(role, config)}" for role in config.roles)
    return PromptTemplate.from_template(PLAN_PROMPT).format(
        task_type=task.type,
        task_description=task.description,
        task_context=task.context or "None",
        task_priority=task.priority,
        task_files=", ".join(task.files) if task.files else "None",
        task_requirements="; ".join(task.requirements) if task.requirements else "None",
        roles=roles or "- (no roles configured)",
    )


def fallback_plan(task: Task, reason: str) -> OrchestrationPlan:
    step = OrchestrationStep(
        step_id="1",
        role=FALLBACK_ROLE,
        action="Complete task",
        input=f"Task: {task.description}",
        expected_output="Task completion",
    )
    return OrchestrationPlan(
        task_id=task.id,
        steps=[step],
        estimated_cost=ESTIMATED_COST,
        estimated_time=ESTIMATED_TIME,
        reasoning=f"Fallback single-step plan ({reason})",
    )


def _extract_json(text: str) -> str | None:
    m = _FENCED.search(text)
    if m:
        return m.group(1)
    m = _BRACED.search(text)
    return m.group(0) if m else None


def parse_plan(raw_text: str, task: Task) -> PlanParseResult:
    """Turn the director's answer into a plan. Never raises: bad output yields the fallback plan."""
    raw_text = raw_text or ""
    log.debug("Raw plan response: %s", raw_text)
    try:
        candidate = _extract_json(raw_text)
        if candidate is None:
            raise ValueError("No JSON found in plan response")
        data = json.loads(candidate)
        if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
            raise ValueError("Invalid plan structure: missing or invalid steps array")
        if not data["steps"]:
            raise ValueError("Plan has no steps")
        steps = [OrchestrationStep.model_validate(s) for s in data["steps"]]
    except (ValueError, RecursionError) as e:
        # json.JSONDecodeError and pydantic.ValidationError are ValueErrors; deep nesting hits RecursionError
        reason = f"JSON parsing failed: {e}"
        log.warning("Error parsing plan for task %s, falling back to simple plan: %s", task.id, e)
        return PlanParseResult(status="fallback", plan=fallback_plan(task, reason), reason=reason)

    reasoning = data.get("reasoning")
    plan = OrchestrationPlan(
        task_id=task.id,
        steps=steps,
        estimated_cost=ESTIMATED_COST,
        estimated_time=ESTIMATED_TIME,
        reasoning=reasoning if isinstance(reasoning, str) and reasoning else "Auto-generated plan",
    )
    return PlanParseResult(status="valid", plan=plan)
