import os
from pathlib import Path

from dotenv import load_dotenv

ENV_FILE_CANDIDATES = ("config/env/.env", ".env")


def load_env_from_path(env_file_path: str | None, project_root: Path | None = None) -> bool:
    if not env_file_path:
        return False
    root = project_root or Path.cwd()
    path = root / env_file_path
    if path.exists():
        load_dotenv(path, override=False)
        return True
    return False


def get_env_vars(env_file_path: str | None = None, project_root: Path | None = None) -> dict[str, str]:
    """Merged environment; the first existing .env candidate fills in unset variables."""
    candidates = (env_file_path,) if env_file_path else ENV_FILE_CANDIDATES
    for candidate in candidates:
        if load_env_from_path(candidate, project_root):
            break
    return dict(os.environ)


def get_float(env: dict[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default
