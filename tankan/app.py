"""Wiring of layouts, lessons, preferences and sessions for a practice host."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from tankan.core.layouts import LayoutRepository
from tankan.core.lessons import LessonRepository
from tankan.core.preferences import PreferenceStore
from tankan.core.registry import DEFAULT_LAYOUT_ID, LayoutRegistry
from tankan.core.resolver import untypeable_characters
from tankan.core.session import PracticeMode, TypingSession
from tankan.core.stats import TypingStats

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


class PracticeApp:
    """Owns the layout registry and starts sessions on behalf of a UI.

    The UI forwards key events to ``session.handle_key_event`` and
    renders the returned results; finished sessions are recorded in the
    preference store against the layout they were typed on.
    """

    def __init__(
        self,
        layouts: Optional[LayoutRepository] = None,
        lessons: Optional[LessonRepository] = None,
        preferences: Optional[PreferenceStore] = None,
        default_layout: str = DEFAULT_LAYOUT_ID,
    ) -> None:
        self.layouts = layouts or LayoutRepository()
        self.lessons = lessons or LessonRepository()
        self.preferences = preferences or PreferenceStore()
        self.registry = LayoutRegistry(
            self.layouts.all(),
            selected=self.preferences.layout_id,
            default=default_layout,
        )
        self.session: Optional[TypingSession] = None

    def select_layout(self, layout_id: str) -> bool:
        if not self.registry.select_layout(layout_id):
            return False
        self.preferences.set_layout_id(layout_id)
        return True

    def start_session(
        self,
        text: str,
        mode: PracticeMode = PracticeMode.LEARN,
        duration: Optional[float] = None,
        on_complete: Optional[Callable[[TypingStats], None]] = None,
    ) -> TypingSession:
        if self.session is not None:
            self.session.reset()
        missing = untypeable_characters(self.registry.current_index(), text)
        if missing:
            logger.warning(
                "Layout %s has no keys for: %s",
                self.registry.current_id,
                " ".join(missing),
            )

        def _finished(stats: TypingStats) -> None:
            layout_id = self.registry.current_id
            self.preferences.record_result(layout_id, stats)
            logger.info("Recorded %.1f wpm at %.1f%% on %s", stats.wpm, stats.accuracy, layout_id)
            if on_complete is not None:
                on_complete(stats)

        self.session = TypingSession(
            text,
            self.registry,
            mode=mode,
            duration=duration,
            on_complete=_finished,
        )
        return self.session

    def start_lesson(self, lesson_key: str, index: int = 0, **kwargs) -> TypingSession:
        lesson = self.lessons.get(lesson_key)
        return self.start_session(lesson.texts[index], **kwargs)
