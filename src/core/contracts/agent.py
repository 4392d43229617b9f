from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tokens_used: int = Field(default=0, alias="tokensUsed")
    cost: float = 0.0  # tokens_used * provider per-token rate
    duration_ms: int = Field(default=0, alias="duration")
    model: str = "unknown"
    estimated: bool = False  # tokens_used derived from character count


class AgentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    success: bool
    result: str = ""
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    error: str | None = None


@runtime_checkable
class Agent(Protocol):
    """Uniform provider capability consumed by the step executor.

    Ordinary model failures come back as ``success=False``; only transport
    problems (timeout, connection, HTTP 429) are raised.
    """

    async def execute(self, prompt: str, role_hint: str) -> AgentResponse: ...
