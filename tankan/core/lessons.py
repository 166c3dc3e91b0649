"""Practice texts, grouped into numbered lessons under ``data/lessons``.

A lesson file holds a ``title`` and its ``content``: either a list of
texts or a block with one text per line. Every text becomes the target
of one typing session, so runs of whitespace are collapsed to a single
space; the session would otherwise count each blank as a keystroke.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from tankan.core.normalizer import normalize
from tankan.core.resolver import LayoutIndex, untypeable_characters

logger = logging.getLogger(__name__)

DEFAULT_LESSONS_DIR = Path(__file__).resolve().parent.parent / "data" / "lessons"

_LESSON_FILE = re.compile(r"^lesson(\d+)$")


@dataclass(frozen=True)
class Lesson:
    key: str
    title: str
    texts: Tuple[str, ...]
    number: Optional[int] = None

    def untypeable(self, index: LayoutIndex) -> List[str]:
        """Characters across all texts that the indexed layout cannot produce."""
        missing: List[str] = []
        for text in self.texts:
            for char in untypeable_characters(index, text):
                if char not in missing:
                    missing.append(char)
        return missing


def _collect_texts(content: object) -> Tuple[str, ...]:
    if isinstance(content, list):
        lines = [str(item) for item in content if item is not None]
    else:
        lines = str(content).splitlines()
    texts = (" ".join(line.split()) for line in lines)
    return tuple(text for text in texts if normalize(text))


def parse_lesson(raw: object, key: str, source: str = "<lesson>") -> Lesson:
    """Build a Lesson from decoded YAML."""
    if not isinstance(raw, dict):
        raise ValueError(f"{source}: expected a mapping with 'title' and 'content'")
    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValueError(f"{source}: 'title' must be a non-empty string")
    if raw.get("content") is None:
        raise ValueError(f"{source}: missing 'content'")
    texts = _collect_texts(raw["content"])
    if not texts:
        raise ValueError(f"{source}: 'content' holds no practice text")

    match = _LESSON_FILE.match(key)
    return Lesson(
        key=key,
        title=title.strip(),
        texts=texts,
        number=int(match.group(1)) if match else None,
    )


class LessonRepository:
    """Lessons ordered by number; unnumbered ``lesson*.yaml`` files come last."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else DEFAULT_LESSONS_DIR
        self._lessons = self._load_lessons()

    def all(self) -> List[Lesson]:
        return list(self._lessons.values())

    def get(self, key: str) -> Lesson:
        return self._lessons[key]

    def typeable_on(self, index: LayoutIndex) -> List[Lesson]:
        """Lessons whose every text can be typed on the indexed layout."""
        return [lesson for lesson in self._lessons.values() if not lesson.untypeable(index)]

    def _load_lessons(self) -> Dict[str, Lesson]:
        if not self._base_dir.is_dir():
            raise FileNotFoundError(f"Lessons directory not found: {self._base_dir}")

        lessons = [
            parse_lesson(yaml.safe_load(path.read_text(encoding="utf-8")), path.stem, path.name)
            for path in self._base_dir.glob("lesson*.yaml")
        ]
        if not lessons:
            raise ValueError(f"No lesson files (lesson*.yaml) found in {self._base_dir}")
        lessons.sort(key=lambda lesson: (lesson.number is None, lesson.number or 0, lesson.key))
        logger.debug("Loaded %d lessons from %s", len(lessons), self._base_dir)
        return {lesson.key: lesson for lesson in lessons}
