from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.core.contracts.agent import AgentResponse


class TaskType(str, Enum):
    CODE = "code"
    DEBUG = "debug"
    DOCUMENT = "document"
    RESEARCH = "research"
    OPTIMIZE = "optimize"
    TEST = "test"
    ARCHITECTURE = "architecture"
    DIRECT_QUESTION = "direct-question"
    SECURITY = "security"
    DATABASE = "database"
    UI_DESIGN = "ui-design"
    DEVOPS = "devops"
    API_DESIGN = "api-design"
    MOBILE = "mobile"
    DATA_ANALYSIS = "data-analysis"
    CONTENT = "content"
    ACCESSIBILITY = "accessibility"
    PERFORMANCE = "performance"
    INTEGRATION = "integration"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    PLANNING = "planning"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


class Task(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True, validate_default=True)

    id: str
    type: TaskType
    description: str
    context: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    files: list[str] | None = None
    requirements: list[str] | None = None


class OrchestrationStep(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    step_id: str = Field(validation_alias=AliasChoices("stepId", "step_id", "id"), serialization_alias="stepId")
    role: str = Field(validation_alias=AliasChoices("agent", "role"), serialization_alias="agent")
    action: str
    input: str
    expected_output: str = Field(
        default="",
        validation_alias=AliasChoices("expectedOutput", "expected_output"),
        serialization_alias="expectedOutput",
    )
    # Declared by the planner, not used for scheduling: steps run in array order.
    dependencies: list[str] | None = None


class OrchestrationPlan(BaseModel):
    task_id: str = ""
    steps: list[OrchestrationStep] = Field(default_factory=list)
    estimated_cost: float = 0.0
    estimated_time: str = ""
    reasoning: str = ""


class PlanParseResult(BaseModel):
    status: Literal["valid", "fallback"]
    plan: OrchestrationPlan
    reason: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.status == "fallback"


class TaskResult(BaseModel):
    results: list[AgentResponse] = Field(default_factory=list)
    total_cost: float = 0.0
    total_time_ms: int = 0
    summary: str = ""


class TaskHistoryEntry(BaseModel):
    task: Task
    result: TaskResult
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TaskProgress(BaseModel):
    task_id: str
    total_steps: int = 0
    completed_steps: int = 0
    status: TaskStatus = TaskStatus.PLANNING
