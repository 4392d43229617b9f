from src.core.contracts.api import AskRequest, PlanRequest, RoleCatalog, TaskRequest
from src.core.contracts.orchestrator import (
    OrchestrationPlan,
    OrchestrationStep,
    PlanParseResult,
    Task,
    TaskHistoryEntry,
    TaskPriority,
    TaskProgress,
    TaskResult,
    TaskStatus,
    TaskType,
)
from src.core.contracts.agent import Agent, AgentResponse, ResponseMetadata

__all__ = [
    "AskRequest",
    "PlanRequest",
    "RoleCatalog",
    "TaskRequest",
    "OrchestrationPlan",
    "OrchestrationStep",
    "PlanParseResult",
    "Task",
    "TaskHistoryEntry",
    "TaskPriority",
    "TaskProgress",
    "TaskResult",
    "TaskStatus",
    "TaskType",
    "Agent",
    "AgentResponse",
    "ResponseMetadata",
]
