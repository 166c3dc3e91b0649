from __future__ import annotations

from dataclasses import dataclass

CHARS_PER_WORD = 5.0
MIN_ELAPSED_SECONDS = 0.1


@dataclass(frozen=True)
class TypingStats:
    """Speed and accuracy snapshot of a typing session.

    * **WPM** – (correct characters / 5) per elapsed minute.
    * **Gross WPM** – (all typed characters / 5) per elapsed minute.
    * **CPM** – correct characters per minute.
    * **Accuracy** – correct / typed as a percentage, 100 before any input.
    """

    wpm: float = 0.0
    accuracy: float = 100.0
    errors: int = 0
    cpm: float = 0.0
    gross_wpm: float = 0.0
    elapsed: float = 0.0


def calculate_stats(
    total_typed: int,
    correct: int,
    errors: int,
    elapsed_seconds: float,
) -> TypingStats:
    """Derive a TypingStats snapshot from running counters in constant time."""
    accuracy = (correct / total_typed) * 100.0 if total_typed else 100.0
    elapsed_minutes = max(elapsed_seconds, MIN_ELAPSED_SECONDS) / 60.0
    return TypingStats(
        wpm=(correct / CHARS_PER_WORD) / elapsed_minutes,
        accuracy=accuracy,
        errors=errors,
        cpm=correct / elapsed_minutes,
        gross_wpm=(total_typed / CHARS_PER_WORD) / elapsed_minutes,
        elapsed=max(elapsed_seconds, 0.0),
    )
