from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional

from tankan.core.stats import TypingStats

logger = logging.getLogger(__name__)


@dataclass
class LayoutRecord:
    sessions: int = 0
    best_wpm: float = 0.0
    best_accuracy: float = 0.0


class PreferenceStore:
    """Remembers the chosen keyboard layout and per-layout best results.

    File: ~/.tankan/preferences.json. A missing or unreadable file means
    defaults; the registry falls back to its default layout when the
    stored id is unknown.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or Path.home() / ".tankan" / "preferences.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._layout_id, self._records = self._load()

    @property
    def layout_id(self) -> Optional[str]:
        """Last selected layout id, or None if never saved."""
        return self._layout_id

    def set_layout_id(self, layout_id: str) -> None:
        self._layout_id = layout_id
        self._save()

    def get_record(self, layout_id: str) -> LayoutRecord:
        return self._records.get(layout_id, LayoutRecord())

    def record_result(self, layout_id: str, stats: TypingStats) -> None:
        current = self._records.get(layout_id, LayoutRecord())
        current.sessions += 1
        current.best_wpm = max(current.best_wpm, stats.wpm)
        current.best_accuracy = max(current.best_accuracy, stats.accuracy)
        self._records[layout_id] = current
        self._save()

    def reset(self) -> None:
        """Forget all results. The layout choice is kept."""
        self._records = {}
        self._save()

    def _load(self) -> tuple[Optional[str], Dict[str, LayoutRecord]]:
        records: Dict[str, LayoutRecord] = {}
        if not self._file_path.exists():
            return None, records
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load preferences from %s: %s", self._file_path, e)
            return None, records
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed preferences in %s", self._file_path)
            return None, records

        layout_id = payload.get("layout")
        if not isinstance(layout_id, str) or not layout_id:
            layout_id = None
        raw_records = payload.get("records") or {}
        if not isinstance(raw_records, dict):
            logger.warning("Ignoring malformed records in %s", self._file_path)
            return layout_id, records
        for key, value in raw_records.items():
            if not isinstance(value, dict):
                logger.warning("Skipping malformed record for %s in %s", key, self._file_path)
                continue
            try:
                records[key] = LayoutRecord(
                    sessions=int(value.get("sessions", 0)),
                    best_wpm=float(value.get("best_wpm", 0.0)),
                    best_accuracy=float(value.get("best_accuracy", 0.0)),
                )
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed record for %s in %s: %s", key, self._file_path, e)
        return layout_id, records

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "layout": self._layout_id,
            "records": {key: asdict(value) for key, value in self._records.items()},
        }
        try:
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save preferences to %s: %s", self._file_path, e)
