import json
from pathlib import Path

from pydantic import ValidationError

from src.core.config.models import ModelPriorityConfig
from src.core.exceptions import ConfigError

DEFAULT_PRIORITIES_PATH = "config/model-priorities.json"


def load_model_priorities(config_path: str | Path, project_root: Path | None = None) -> ModelPriorityConfig:
    root = project_root or Path.cwd()
    path = Path(config_path) if not isinstance(config_path, Path) else config_path
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    try:
        return ModelPriorityConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config schema in {path}: {e}") from e
