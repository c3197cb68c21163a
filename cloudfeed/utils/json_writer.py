"""
Writes feed documents to disk.
"""
import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


def write_json(path: Union[str, Path], payload: Any) -> Path:
    """
    Write ``payload`` as UTF-8 JSON with two-space indentation, replacing any existing file.

    Missing parent directories are created.

    Returns:
        Path: The file that was written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.debug(f"Wrote {path}")
    return path
