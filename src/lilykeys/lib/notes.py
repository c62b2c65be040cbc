"""Drill note table: the twelve white keys from C4 to G5.

Each entry carries its solfège name and its vertical offset on the treble
staff (rem units, positive is lower).
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class DrillNote:
    id: int  # staff step, 1 = F4 line
    name: str  # solfège
    midi_number: int
    position: float


NOTES: tuple[DrillNote, ...] = (
    DrillNote(-2, "do", 60, 1.2),
    DrillNote(-1, "ré", 62, 0.8),
    DrillNote(0, "mi", 64, 0.4),
    DrillNote(1, "fa", 65, 0.0),
    DrillNote(2, "sol", 67, -0.4),
    DrillNote(3, "la", 69, -0.8),
    DrillNote(4, "si", 71, -1.2),
    DrillNote(5, "do", 72, -1.6),
    DrillNote(6, "ré", 74, -2.0),
    DrillNote(7, "mi", 76, -2.4),
    DrillNote(8, "fa", 77, -2.7),
    DrillNote(9, "sol", 79, -3.0),
)

_BY_MIDI: dict[int, DrillNote] = {n.midi_number: n for n in NOTES}


def random_note_index(rng: random.Random | None = None) -> int:
    return (rng or random).randrange(len(NOTES))


def get_note_by_midi_number(midi_number: int) -> DrillNote | None:
    return _BY_MIDI.get(midi_number)


def get_note_by_index(index: int) -> DrillNote | None:
    if 0 <= index < len(NOTES):
        return NOTES[index]
    return None
