"""Pending-sale queue persisted as a JSON array in a single file."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from feria.config import get_logger
from feria.core.interfaces.pending_queue import IPendingSaleQueue

logger = get_logger(__name__)


class JsonFilePendingQueue(IPendingSaleQueue):
    """
    One JSON file per queue slot.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash mid-write leaves the previous content intact.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[dict[str, Any]]:
        """Read the slot, discarding anything that is not a JSON array of objects."""
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("pending_queue_unreadable", path=str(self.path), error=str(e))
            self.clear()
            return []

        if not isinstance(data, list) or not all(isinstance(e, dict) for e in data):
            logger.warning("pending_queue_malformed", path=str(self.path))
            self.clear()
            return []

        return data

    def save(self, entries: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
