import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_local_env(dotenv_path: Optional[Path] = None) -> bool:
    """Load a .env file from the repository root if one exists.

    Values already present in the environment win over the file. Returns
    whether a file was loaded.
    """
    if os.getenv("TASK_TRACKER_SKIP_DOTENV"):
        return False

    dotenv_path = dotenv_path or Path(__file__).resolve().parents[3] / ".env"
    if dotenv_path.exists():
        return load_dotenv(dotenv_path, override=False)

    return False


def env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to a default when
    unset. Malformed values raise instead of being silently ignored."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer.") from exc


def env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number.") from exc
