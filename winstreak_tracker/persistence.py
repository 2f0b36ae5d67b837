from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .errors import PersistenceWriteFailure

logger = logging.getLogger(__name__)


def atomic_write_json(path, payload: Dict[str, Any]) -> None:
    """Write JSON to a temp file next to ``path``, then replace ``path`` with it.

    Either the old file stays intact or the new one fully replaces it.
    Raises PersistenceWriteFailure on any OS error.
    """
    path = Path(path)
    data = json.dumps(payload, indent=4, ensure_ascii=False)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise PersistenceWriteFailure(f"Could not write {path}: {exc}") from exc
    finally:
        if tmp_name and os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_name, exc_info=True)


class WriteThrough:
    """Saves every submitted snapshot immediately on the calling thread.

    The synchronous saver for tests and scripts; the window uses
    app.SaveWorker instead.
    """

    def __init__(self, path, on_error: Optional[Callable[[PersistenceWriteFailure], None]] = None):
        self.path = Path(path)
        self.on_error = on_error
        self.last_error: Optional[PersistenceWriteFailure] = None

    def submit(self, document: Dict[str, Any]) -> bool:
        try:
            atomic_write_json(self.path, document)
        except PersistenceWriteFailure as exc:
            logger.error("%s", exc)
            self.last_error = exc
            if self.on_error:
                self.on_error(exc)
            return False
        self.last_error = None
        return True
