"""
Export utilities for the punch clock application.
Handles export directory selection and writing export artifacts.
"""
import os
from typing import Optional

from .errors import ExportError

EXPORT_PATH_ENV = 'PUNCHCLOCK_EXPORT_PATH'


def get_export_directory(base_dir: Optional[str] = None) -> str:
    """
    Determine where exports should be written.

    Priority:
    1. Explicit `base_dir` argument
    2. `PUNCHCLOCK_EXPORT_PATH` environment variable (expanded)
    3. Local `exports/` directory inside the working directory
    """
    if base_dir:
        target = os.path.expanduser(base_dir)
    else:
        env_path = os.getenv(EXPORT_PATH_ENV)
        if env_path:
            target = os.path.expanduser(env_path)
        else:
            target = os.path.join(os.getcwd(), 'exports')

    try:
        os.makedirs(target, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Cannot create export directory {target}: {e}") from e
    return target


def write_file(data: bytes, target_path: str) -> str:
    """
    Write data to target_path.

    Args:
        data: Raw bytes to write.
        target_path: Destination path (parent directories are created).

    Returns:
        The path written to.
    """
    try:
        os.makedirs(os.path.dirname(target_path) or ".", exist_ok=True)
        with open(target_path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ExportError(f"Failed to write {target_path}: {e}") from e
    return target_path
