class ConfigError(Exception):
    """Raised when config loading or validation fails."""


class NoModelsConfigured(ConfigError):
    """Raised when a step's role has no provider/model candidates."""

    def __init__(self, role: str):
        super().__init__(f"No models configured for role: {role}")
        self.role = role


class AgentUnavailable(Exception):
    """Raised when an agent cannot be reached (timeout, connection failure)."""


class ProviderRateLimited(AgentUnavailable):
    """Raised when the upstream provider answers with a rate-limit signal (HTTP 429)."""


class StepExecutionError(Exception):
    """Raised when every candidate for a step failed."""

    def __init__(self, step_id: str, role: str, attempts: list[str] | None = None):
        self.step_id = step_id
        self.role = role
        self.attempts = attempts or []
        msg = f"All models for role {role} failed to execute step {step_id}"
        if self.attempts:
            msg += " (" + "; ".join(self.attempts) + ")"
        super().__init__(msg)
