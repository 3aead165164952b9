"""JSON file persistence for the active baseline snapshot."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from kubevigil.controllers.workloads.snapshot.baseline_manager import SnapshotError
from kubevigil.models.snapshot.snapshot_info import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Saves, loads and deletes one snapshot file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot atomically (temp file then rename)."""
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise SnapshotError(f"Cannot write snapshot to {self._path}: {exc}") from exc
        logger.debug("Snapshot %r saved to %s", snapshot.name, self._path)

    def load(self) -> Snapshot | None:
        """Read the persisted snapshot, or None if there is none."""
        if not self._path.exists():
            return None
        try:
            return Snapshot.model_validate_json(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SnapshotError(f"Cannot read snapshot {self._path}: {exc}") from exc
        except ValidationError as exc:
            raise SnapshotError(f"Invalid snapshot file {self._path}: {exc}") from exc

    def delete(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise SnapshotError(f"Cannot delete snapshot {self._path}: {exc}") from exc
