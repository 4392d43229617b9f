import uuid

from pydantic import BaseModel, Field

from src.core.contracts.orchestrator import OrchestrationPlan, Task, TaskPriority, TaskType


class TaskRequest(BaseModel):
    id: str | None = None
    type: TaskType = TaskType.CODE
    description: str
    context: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    files: list[str] | None = None
    requirements: list[str] | None = None

    def to_task(self) -> Task:
        data = self.model_dump()
        data["id"] = self.id or str(uuid.uuid4())
        return Task.model_validate(data)


class PlanRequest(BaseModel):
    task: TaskRequest
    plan: OrchestrationPlan


class AskRequest(BaseModel):
    question: str
    context: str | None = None


class RoleCatalog(BaseModel):
    roles: dict[str, str] = Field(default_factory=dict)
