# src/task_tracker/storage/json_file.py

"""
Whole-file JSON persistence shared by the task and user stores.

Reads are strict: a missing file is "no records yet", but a file that exists
and cannot be read or parsed raises StorageError. Treating it as empty would
make the next save overwrite real data.

Writes go to a sibling temp file which is flushed, fsynced and then moved over
the target with os.replace, so a crash never leaves a truncated file behind.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..errors import StorageError

logger = logging.getLogger(__name__)


def read_json_array(path: Path) -> list[dict[str, Any]] | None:
    """
    Return the records stored at `path`, or None if the file does not exist.

    Raises StorageError when the file is unreadable, is not valid JSON, or is
    not an array of objects.
    """
    try:
        raw = path.read_text("utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        logger.error("Failed to decode %s: %s", path, exc)
        raise StorageError(f"{path} is not valid UTF-8.") from exc
    except OSError as exc:
        logger.error("Failed to read %s: %s", path, exc)
        raise StorageError(f"Could not read {path}: {exc.strerror or exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in %s: %s", path, exc)
        raise StorageError(f"{path} is not valid JSON (line {exc.lineno}).") from exc

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        logger.error("Unexpected JSON layout in %s (expected an array of objects)", path)
        raise StorageError(f"{path} must contain a JSON array of objects.")

    logger.debug("Read %d records from %s", len(data), path)
    return data


def write_json_array(path: Path, records: list[dict[str, Any]]) -> None:
    """Atomically replace `path` with a pretty-printed JSON array."""
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(records, ensure_ascii=False, indent=2) + "\n"
        with open(tmp, "w", encoding="utf-8") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp.unlink()
        logger.error("Failed to write %s: %s", path, exc)
        raise StorageError(f"Could not write {path}: {exc.strerror or exc}") from exc

    logger.info("%s updated (%d records).", path.name, len(records))


def restrict_permissions(path: Path) -> None:
    """Best-effort: keep files holding password hashes private on disk."""
    with contextlib.suppress(OSError):
        os.chmod(path, 0o600)
