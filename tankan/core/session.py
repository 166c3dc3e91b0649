from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from tankan.core.layouts import ModifierState
from tankan.core.normalizer import normalize
from tankan.core.registry import LayoutRegistry
from tankan.core.resolver import (
    Candidate,
    character_for,
    guide_for,
    is_typeable,
    modifier_state_for,
)
from tankan.core.stats import TypingStats, calculate_stats
from tankan.core.timer import SessionTimer

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


class PracticeMode(Enum):
    LEARN = "learn"
    PRACTICE = "practice"


@dataclass(frozen=True)
class KeystrokeRecord:
    """One accepted keystroke, as kept in the session history."""

    physical_key: str
    modifier_state: ModifierState
    resolved_character: str
    target_position: int
    was_correct: bool
    timestamp: datetime


@dataclass(frozen=True)
class KeystrokeResult:
    """What the host needs to redraw after a key event."""

    accepted: bool
    position: int
    error_positions: Tuple[int, ...]
    modifier_state: ModifierState
    completed: bool
    stats: TypingStats


class TypingSession:
    """Validates typed characters against a practice text, one key at a time.

    The session stays ``IDLE`` until the first typeable key arrives, so
    the clock does not run while the user is still reading the text.
    Wrong characters are recorded in ``error_positions`` and the cursor
    moves on regardless; it never waits for a correction.

    Positions count code points of the normalized target. A key whose
    output normalizes to several code points (a conjunct such as ``द्य``)
    covers that many positions in one press.
    """

    def __init__(
        self,
        target_text: str,
        registry: LayoutRegistry,
        mode: PracticeMode = PracticeMode.LEARN,
        duration: Optional[float] = None,
        on_complete: Optional[Callable[[TypingStats], None]] = None,
        timer: Optional[SessionTimer] = None,
    ) -> None:
        """Create a session for ``target_text``.

        ``duration`` (seconds) only applies in practice mode and ends the
        session when it runs out. A prepared ``timer`` may be passed in
        instead, e.g. one driven by a fake clock.
        """
        target = normalize(target_text)
        if not target:
            raise ValueError("target_text must not be empty")
        self._raw_target = target_text
        self._target = target
        self._registry = registry
        self._mode = mode
        self._on_complete = on_complete
        if duration is not None and mode is not PracticeMode.PRACTICE:
            logger.debug("Ignoring %ss time budget in %s mode", duration, mode.value)
            duration = None
        if timer is None:
            timer = SessionTimer(duration)
        self._timer = timer
        self._timer.expired.connect(self._on_time_up)
        self._clear()

    def _clear(self) -> None:
        self._state = SessionState.IDLE
        self._position = 0
        self._typed_text = ""
        self._typed_characters: List[str] = []
        self._error_positions: List[int] = []
        self._history: List[KeystrokeRecord] = []
        self._started_at: Optional[datetime] = None
        self._completed_at: Optional[datetime] = None
        self._final_stats: Optional[TypingStats] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def mode(self) -> PracticeMode:
        return self._mode

    @property
    def target_text(self) -> str:
        """Normalized target the input is compared against."""
        return self._target

    @property
    def raw_target(self) -> str:
        return self._raw_target

    @property
    def position(self) -> int:
        return self._position

    @property
    def typed_text(self) -> str:
        """Everything typed so far, as the keys produced it (not normalized)."""
        return self._typed_text

    @property
    def typed_characters(self) -> Tuple[str, ...]:
        return tuple(self._typed_characters)

    @property
    def error_positions(self) -> Tuple[int, ...]:
        return tuple(self._error_positions)

    @property
    def history(self) -> Tuple[KeystrokeRecord, ...]:
        return tuple(self._history)

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def completed_at(self) -> Optional[datetime]:
        return self._completed_at

    @property
    def is_completed(self) -> bool:
        return self._state is SessionState.COMPLETED

    @property
    def timer(self) -> SessionTimer:
        return self._timer

    @property
    def elapsed(self) -> float:
        return self._timer.elapsed

    @property
    def remaining(self) -> Optional[float]:
        return self._timer.remaining

    def stats(self) -> TypingStats:
        """Statistics as of the most recent keystroke."""
        if self._final_stats is not None:
            return self._final_stats
        errors = len(self._error_positions)
        return calculate_stats(
            total_typed=self._position,
            correct=self._position - errors,
            errors=errors,
            elapsed_seconds=self._timer.elapsed,
        )

    def next_character(self) -> Optional[str]:
        if self._position >= len(self._target):
            return None
        return self._target[self._position]

    def next_key_hint(self, modifier_state: Optional[ModifierState] = None) -> Optional[Candidate]:
        """Key to press next, preferring one under the modifier already held."""
        if self._position >= len(self._target):
            return None
        return guide_for(self._registry.current_index(), self._target[self._position:], modifier_state)

    def handle_key_event(self, key: str, pressed_keys: Iterable[str]) -> KeystrokeResult:
        """Process a key press given the snapshot of keys held at that moment."""
        modifier_state = modifier_state_for(self._registry.current_index(), pressed_keys)
        return self.accept_keystroke(key, modifier_state)

    def accept_keystroke(
        self, key: str, modifier_state: ModifierState = ModifierState.NORMAL
    ) -> KeystrokeResult:
        index = self._registry.current_index()
        if self._state is SessionState.COMPLETED or not is_typeable(index, key):
            return self._result(False, modifier_state)

        if self._state is SessionState.IDLE:
            self._state = SessionState.ACTIVE
            self._started_at = datetime.now()
            self._timer.start()

        character = character_for(index, key, modifier_state)
        if not character:
            return self._result(False, modifier_state)

        canonical = normalize(character)
        start = self._position
        remaining = len(self._target) - start
        consumed = canonical[:remaining]
        was_correct = True
        for offset, typed in enumerate(consumed):
            self._typed_characters.append(typed)
            if typed != self._target[start + offset]:
                self._error_positions.append(start + offset)
                was_correct = False
        if len(canonical) > remaining:
            last = len(self._target) - 1
            if not self._error_positions or self._error_positions[-1] != last:
                self._error_positions.append(last)
            was_correct = False

        self._position = start + len(consumed)
        self._typed_text += character
        self._history.append(
            KeystrokeRecord(
                physical_key=key,
                modifier_state=modifier_state,
                resolved_character=character,
                target_position=start,
                was_correct=was_correct,
                timestamp=datetime.now(),
            )
        )

        if self._position >= len(self._target):
            self._complete()
        return self._result(True, modifier_state)

    def reset(self) -> None:
        """Discard all input and return to ``IDLE`` with a stopped clock."""
        self._timer.reset()
        self._clear()

    def _result(self, accepted: bool, modifier_state: ModifierState) -> KeystrokeResult:
        return KeystrokeResult(
            accepted=accepted,
            position=self._position,
            error_positions=tuple(self._error_positions),
            modifier_state=modifier_state,
            completed=self.is_completed,
            stats=self.stats(),
        )

    def _complete(self) -> None:
        if self._state is SessionState.COMPLETED:
            return
        self._timer.pause()
        self._state = SessionState.COMPLETED
        self._completed_at = datetime.now()
        self._final_stats = self.stats()
        logger.debug(
            "Session completed at %d/%d, %.1f wpm, %.1f%% accuracy",
            self._position,
            len(self._target),
            self._final_stats.wpm,
            self._final_stats.accuracy,
        )
        if self._on_complete is not None:
            self._on_complete(self._final_stats)

    def _on_time_up(self) -> None:
        if self._state is SessionState.ACTIVE:
            self._complete()
