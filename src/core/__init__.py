from src.core.config.loader import load_model_priorities
from src.core.config.models import ModelPriorityConfig, RateLimitConfig, RoleConfig
from src.core.exceptions import (
    AgentUnavailable,
    ConfigError,
    NoModelsConfigured,
    ProviderRateLimited,
    StepExecutionError,
)

__all__ = [
    "load_model_priorities",
    "ModelPriorityConfig",
    "RateLimitConfig",
    "RoleConfig",
    "AgentUnavailable",
    "ConfigError",
    "NoModelsConfigured",
    "ProviderRateLimited",
    "StepExecutionError",
]
