from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProviderEntry(BaseModel):
    name: str
    models: list[str] = Field(default_factory=list)
    priority: int = 100  # lower is tried first


class RoleConfig(BaseModel):
    providers: list[ProviderEntry] = Field(default_factory=list)

    def candidates(self) -> list[tuple[str, str]]:
        """(provider, model) pairs in fallback order: priority ascending, then declaration order."""
        ordered = sorted(self.providers, key=lambda p: p.priority)
        return [(p.name, model) for p in ordered for model in p.models]


class RateLimitConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    requests_per_minute: int = Field(alias="requestsPerMinute", ge=0)
    cooldown_seconds: float = Field(alias="cooldownSeconds", ge=0)


class ModelPriorityConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    roles: dict[str, RoleConfig] = Field(default_factory=dict)
    rate_limits: dict[str, RateLimitConfig] = Field(default_factory=dict, alias="rateLimits")

    def get_role(self, name: str) -> RoleConfig | None:
        return self.roles.get(name)

    def has_role(self, name: str) -> bool:
        role = self.roles.get(name)
        return bool(role and role.candidates())

    def provider_names(self) -> set[str]:
        """Every provider referenced by at least one role."""
        return {p.name for role in self.roles.values() for p in role.providers}
