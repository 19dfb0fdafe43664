"""Mini README: JSON record helpers used by the store and the history manager.

This module keeps file handling in one place. Reads surface malformed content
as ``ValueError`` so callers decide whether corruption is recoverable. Writes
always go through a temporary file in the same directory followed by
``os.replace`` so a failed write never leaves a half-written record behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def read_json(path: Path) -> Any:
    """Load a JSON record, raising ``ValueError`` when it cannot be parsed."""

    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise ValueError(f"{path.name} is not valid UTF-8") from error
    if not raw.strip():
        raise ValueError(f"{path.name} is empty")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as error:
        raise ValueError(f"{path.name} is invalid JSON") from error


def write_json_atomic(path: Path, payload: Any) -> None:
    """Replace ``path`` with ``payload`` using write-to-temp-then-rename."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}_", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
    LOGGER.debug("Wrote %s", path)
