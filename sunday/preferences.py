"""Local preference store for the desktop client."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Set

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"
DEFAULT_COLUMN_WIDTH = 150.0


class PreferenceStore:
    """Persists theme mode and per-board view preferences as JSON."""

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.values: Dict[str, object] = {}
        self.collapsed_groups: Dict[str, List[int]] = {}
        self.column_widths: Dict[str, Dict[str, float]] = {}
        self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> None:
        if not self.path.exists():
            self._save()
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable preferences file %s", self.path)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed preferences file %s", self.path)
            return
        try:
            values = dict(data.get("values", {}))
            collapsed_groups = {
                key: [int(v) for v in ids]
                for key, ids in data.get("collapsed_groups", {}).items()
            }
            column_widths = {
                key: {column: float(width) for column, width in widths.items()}
                for key, widths in data.get("column_widths", {}).items()
            }
        except (AttributeError, TypeError, ValueError):
            logger.warning("Ignoring malformed preferences file %s", self.path)
            return
        self.values = values
        self.collapsed_groups = collapsed_groups
        self.column_widths = column_widths

    def _save(self) -> None:
        data = {
            "values": self.values,
            "collapsed_groups": self.collapsed_groups,
            "column_widths": self.column_widths,
            "schema_version": SCHEMA_VERSION,
        }
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    # ------------------------------------------------------------------
    # Plain values
    # ------------------------------------------------------------------
    def get(self, key: str, default=None):
        return self.values.get(key, default)

    def set(self, key: str, value) -> None:
        self.values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self.values.pop(key, None) is not None:
            self._save()

    # ------------------------------------------------------------------
    # Board view preferences
    # ------------------------------------------------------------------
    def collapsed_group_ids(self, board_id: int) -> Set[int]:
        return {gid for gid in self.collapsed_groups.get(str(board_id), []) if gid > 0}

    def set_collapsed_groups(self, board_id: int, group_ids: Set[int]) -> None:
        self.collapsed_groups[str(board_id)] = sorted(group_ids)
        self._save()

    def board_column_widths(self, board_id: int) -> Dict[str, float]:
        return dict(self.column_widths.get(str(board_id), {}))

    def set_column_widths(self, board_id: int, widths: Dict[str, float]) -> None:
        self.column_widths[str(board_id)] = {k: float(v) for k, v in widths.items()}
        self._save()
