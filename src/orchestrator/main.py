"""Orchestrator FastAPI app: POST /tasks -> plan, execute, summarize."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from src.agent.deps import build_registry
from src.core.config.env import get_env_vars, get_float
from src.core.config.loader import DEFAULT_PRIORITIES_PATH, load_model_priorities
from src.core.config.models import ModelPriorityConfig
from src.core.contracts.agent import AgentResponse
from src.core.contracts.api import AskRequest, PlanRequest, RoleCatalog, TaskRequest
from src.core.contracts.orchestrator import TaskHistoryEntry, TaskProgress, TaskResult
from src.core.exceptions import ConfigError, StepExecutionError
from src.orchestrator.executor import DEFAULT_TIMEOUT_S
from src.orchestrator.orchestrator import Orchestrator

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s", datefmt="%H:%M:%S")
log = logging.getLogger("orchestrator")

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
ORCHESTRATOR: Orchestrator | None = None


def build_orchestrator(project_root: Path = PROJECT_ROOT) -> Orchestrator:
    env = get_env_vars(project_root=project_root)
    config_path = env.get("MODEL_PRIORITIES_PATH", DEFAULT_PRIORITIES_PATH)
    try:
        config = load_model_priorities(config_path, project_root=project_root)
        log.info("Loaded model priorities and rate limits from %s", config_path)
    except ConfigError as e:
        log.critical("Could not load model priorities (%s). Using empty configuration.", e)
        config = ModelPriorityConfig()
    timeout_s = get_float(env, "STEP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_S)
    registry = build_registry(config, env, timeout_s=timeout_s)
    return Orchestrator(config, registry, timeout_s=timeout_s, project_context=env.get("PROJECT_CONTEXT"))


def get_orchestrator() -> Orchestrator:
    global ORCHESTRATOR
    if ORCHESTRATOR is None:
        ORCHESTRATOR = build_orchestrator()
    return ORCHESTRATOR


app = FastAPI(title="Multi-Provider Orchestrator")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


def _raise_http(e: Exception) -> None:
    if isinstance(e, StepExecutionError):
        raise HTTPException(status_code=502, detail=str(e)) from e
    if isinstance(e, ConfigError):
        raise HTTPException(status_code=500, detail=str(e)) from e
    raise e


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/agents", response_model=list[str])
def agents(orch: Orchestrator = Depends(get_orchestrator)):
    return orch.get_available_agents()


@app.get("/roles", response_model=RoleCatalog)
def roles(orch: Orchestrator = Depends(get_orchestrator)):
    return RoleCatalog(roles={role: orch.get_role_capabilities(role) for role in orch.config.roles})


@app.get("/history", response_model=list[TaskHistoryEntry])
def history(orch: Orchestrator = Depends(get_orchestrator)):
    return orch.get_task_history()


@app.get("/progress", response_model=TaskProgress | None)
def current_progress(orch: Orchestrator = Depends(get_orchestrator)):
    return orch.get_current_task_progress()


@app.get("/progress/{task_id}", response_model=TaskProgress)
def task_progress(task_id: str, orch: Orchestrator = Depends(get_orchestrator)):
    progress = orch.get_task_progress(task_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="Task not in progress")
    return progress


@app.post("/tasks", response_model=TaskResult)
async def execute_task(req: TaskRequest, orch: Orchestrator = Depends(get_orchestrator)):
    task = req.to_task()
    log.info("TASK %s: %s", task.id, (task.description[:200] + "…") if len(task.description) > 200 else task.description)
    try:
        return await orch.execute_task(task)
    except (StepExecutionError, ConfigError) as e:
        _raise_http(e)


@app.post("/plans", response_model=TaskResult)
async def execute_plan(req: PlanRequest, orch: Orchestrator = Depends(get_orchestrator)):
    task = req.task.to_task()
    plan = req.plan.model_copy(update={"task_id": task.id})
    try:
        return await orch.execute_plan(plan, task)
    except (StepExecutionError, ConfigError) as e:
        _raise_http(e)


@app.post("/ask", response_model=AgentResponse)
async def ask(req: AskRequest, orch: Orchestrator = Depends(get_orchestrator)):
    try:
        return await orch.ask_director(req.question, req.context)
    except (StepExecutionError, ConfigError) as e:
        _raise_http(e)


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
