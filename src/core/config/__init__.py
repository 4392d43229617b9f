from src.core.config.loader import load_model_priorities
from src.core.config.models import ModelPriorityConfig, ProviderEntry, RateLimitConfig, RoleConfig
from src.core.config.env import get_env_vars

__all__ = [
    "load_model_priorities",
    "ModelPriorityConfig",
    "ProviderEntry",
    "RateLimitConfig",
    "RoleConfig",
    "get_env_vars",
]
