"""Tests for plan parsing, the fallback plan, and the planning prompt."""
import json

import pytest

from helpers import make_config, plan_json
from src.core.contracts.orchestrator import Task
from src.orchestrator.planner import FALLBACK_ROLE, build_planning_prompt, parse_plan


@pytest.fixture
def task() -> Task:
    return Task(id="t-1", type="code", description="Create hello world {in Python}")


class TestParsePlan:
    def test_fenced_json_plan(self, task):
        raw = plan_json(("1", "researcher", "look up"), ("2", "coder", "write it"))
        parsed = parse_plan(raw, task)
        assert parsed.status == "valid"
        assert not parsed.is_fallback
        plan = parsed.plan
        assert plan.task_id == "t-1"
        assert [s.step_id for s in plan.steps] == ["1", "2"]
        assert [s.role for s in plan.steps] == ["researcher", "coder"]
        assert plan.steps[1].input == "write it"
        assert plan.steps[1].expected_output == "ok"

    def test_bare_json_inside_prose(self, task):
        raw = "Sure! " + plan_json(("a", "coder", "x"), fenced=False) + " Let me know."
        parsed = parse_plan(raw, task)
        assert parsed.status == "valid"
        assert parsed.plan.steps[0].step_id == "a"

    def test_numeric_step_ids_and_dependencies(self, task):
        raw = json.dumps({"steps": [
            {"stepId": 1, "agent": "coder", "action": "a", "input": "i"},
            {"stepId": 2, "agent": "reviewer", "action": "b", "input": "j", "dependencies": ["1"]},
        ]})
        plan = parse_plan(raw, task).plan
        assert plan.steps[0].step_id == "1"
        assert plan.steps[1].dependencies == ["1"]

    def test_reasoning_is_kept(self, task):
        raw = json.dumps({"steps": [{"stepId": "1", "agent": "coder", "action": "a", "input": "i"}], "reasoning": "one step is enough"})
        assert parse_plan(raw, task).plan.reasoning == "one step is enough"

    @pytest.mark.parametrize("raw", [
        "I think you should just write the code yourself.",
        "",
        "```json\n{\"steps\": [oops]}\n```",
        '{"plan": []}',
        '{"steps": "do everything"}',
        '{"steps": []}',
        '{"steps": [{"stepId": "1", "action": "no role", "input": "x"}]}',
        '{"steps": ["just a string"]}',
        '{"steps": ' + "[" * 100000 + "]" * 100000 + "}",
    ])
    def test_falls_back_to_single_coder_step(self, task, raw):
        parsed = parse_plan(raw, task)
        assert parsed.status == "fallback"
        assert parsed.reason
        plan = parsed.plan
        assert plan.task_id == "t-1"
        assert len(plan.steps) == 1
        step = plan.steps[0]
        assert step.role == FALLBACK_ROLE == "coder"
        assert step.action == "Complete task"
        assert task.description in step.input
        assert "Fallback" in plan.reasoning

    def test_none_input_does_not_raise(self, task):
        assert parse_plan(None, task).is_fallback


class TestPlanningPrompt:
    def test_embeds_task_and_roles(self):
        task = Task(
            id="t-2",
            type="research",
            description="Compare web frameworks",
            context="internal tool",
            priority="high",
            requirements=["cite sources"],
        )
        config = make_config({
            "director": [("openai", ["gpt-4o"], 1)],
            "researcher": [("perplexity", ["sonar"], 1)],
            "translator": [("groq", ["llama"], 1)],
        })
        prompt = build_planning_prompt(task, config)
        assert "Type: research" in prompt
        assert "Description: Compare web frameworks" in prompt
        assert "Context: internal tool" in prompt
        assert "Priority: high" in prompt
        assert "cite sources" in prompt
        assert "- researcher: Real-time internet search" in prompt
        assert "Models: sonar" in prompt
        assert "Handles translator tasks" in prompt
        assert '{"steps": [{"stepId": "1"' in prompt

    def test_defaults_for_missing_fields(self):
        task = Task(id="t-3", type="code", description="x")
        prompt = build_planning_prompt(task, make_config({}))
        assert "Context: None" in prompt
        assert "Priority: medium" in prompt
        assert "(no roles configured)" in prompt
