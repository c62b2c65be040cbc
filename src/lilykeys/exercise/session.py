"""Exercise engines that score played MIDI note numbers.

:class:`ExerciseSession` walks both voices of a score in lock-step: at each
position the player must hit the upper note and the lower note (in any
order) before the exercise moves on. :class:`NoteDrill` asks for random
single notes from the drill table.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence

from lilykeys.lib.notes import DrillNote, NOTES, random_note_index
from lilykeys.model.score import ParsedScore, ResolvedNote

logger = logging.getLogger(__name__)


class ExerciseSession:
    """Two-handed exercise over an upper and a lower note sequence."""

    def __init__(
        self,
        upper: Sequence[ResolvedNote] = (),
        lower: Sequence[ResolvedNote] = (),
    ) -> None:
        self.upper: tuple[ResolvedNote, ...] = tuple(upper)
        self.lower: tuple[ResolvedNote, ...] = tuple(lower)
        self.current_index: int = 0
        self.score: int = 0
        self.errors: int = 0
        self.is_complete: bool = False
        self.played_hands: set[str] = set()

    @classmethod
    def from_score(cls, score: ParsedScore) -> ExerciseSession:
        return cls(score.upper, score.lower)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def total_notes(self) -> int:
        return max(len(self.upper), len(self.lower))

    @property
    def current_upper_note(self) -> ResolvedNote | None:
        return _at(self.upper, self.current_index)

    @property
    def current_lower_note(self) -> ResolvedNote | None:
        return _at(self.lower, self.current_index)

    @property
    def progress(self) -> int:
        """Percentage of positions completed, halves rounded up."""
        total = self.total_notes
        if total == 0:
            return 0
        return math.floor(self.current_index * 100 / total + 0.5)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def check_note(self, played_midi_number: int) -> bool:
        """Score one played note. Returns True if it matched an expected note."""
        if self.is_complete:
            return False

        idx = self.current_index
        upper = self.current_upper_note
        lower = self.current_lower_note
        upper_match = upper is not None and played_midi_number == upper.midi_number
        lower_match = lower is not None and played_midi_number == lower.midi_number
        logger.debug(
            "Position %d: upper=%s lower=%s played=%d",
            idx,
            upper.midi_number if upper else None,
            lower.midi_number if lower else None,
            played_midi_number,
        )

        if not (upper_match or lower_match):
            self.errors += 1
            return False

        # Upper first; a unison credits the hand that has not played yet
        if upper_match and "upper" not in self.played_hands:
            hand = "upper"
        elif lower_match and "lower" not in self.played_hands:
            hand = "lower"
        else:
            return True

        self.played_hands.add(hand)
        self.score += 1

        both_played = (
            ("upper" in self.played_hands or upper is None)
            and ("lower" in self.played_hands or lower is None)
        )
        if both_played:
            self.played_hands = set()
            if idx < self.total_notes - 1:
                self.current_index = idx + 1
            else:
                self.is_complete = True
                logger.info(
                    "Exercise complete: score=%d errors=%d", self.score, self.errors
                )
        return True

    def reset(self) -> None:
        self.current_index = 0
        self.score = 0
        self.errors = 0
        self.is_complete = False
        self.played_hands = set()

    def go_to_note(self, index: int) -> bool:
        """Jump to position *index*. Out-of-range indices are ignored."""
        if not 0 <= index < self.total_notes:
            return False
        self.current_index = index
        self.is_complete = False
        self.played_hands = set()
        return True


def _at(notes: tuple[ResolvedNote, ...], index: int) -> ResolvedNote | None:
    return notes[index] if index < len(notes) else None


class NoteDrill:
    """Random single-note drill over the twelve-note table."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.score: int = 0
        self.current_index: int = random_note_index(self._rng)

    @property
    def current_note(self) -> DrillNote:
        return NOTES[self.current_index]

    def check_note(self, played_midi_number: int) -> bool:
        """Score a hit, then draw the next target whatever the outcome."""
        is_correct = played_midi_number == self.current_note.midi_number
        if is_correct:
            self.score += 1
        self.current_index = random_note_index(self._rng)
        return is_correct

    def reset(self) -> None:
        self.score = 0
        self.current_index = random_note_index(self._rng)
