"""Semantic model for parsed scores.

A parse produces fresh, immutable values: one tuple of resolved notes per
voice plus the document metadata. Nothing here is shared between parses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lilykeys.errors import ValidationError

VOICES: tuple[str, ...] = ("upper", "lower")


@dataclass(frozen=True)
class NoteToken:
    """One note as spelled in the source, duration stripped."""

    letter: str  # "a".."g"
    accidental: str = ""  # "", "is", "es", "as"
    octaves: str = ""  # run of "'" and ","
    fingering: str = ""  # "" or "-N"

    @property
    def text(self) -> str:
        return f"{self.letter}{self.accidental}{self.octaves}{self.fingering}"

    @property
    def octave_shift(self) -> int:
        return self.octaves.count("'") - self.octaves.count(",")

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ResolvedNote:
    midi_number: int  # absolute MIDI pitch, not clamped
    note_name: str  # "C", "F#", "Bb", ...
    original_notation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "midiNumber": self.midi_number,
            "noteName": self.note_name,
        }
        if self.original_notation is not None:
            d["originalNotation"] = self.original_notation
        return d


@dataclass(frozen=True)
class ScoreMetadata:
    title: str | None = None
    composer: str | None = None

    def to_dict(self) -> dict[str, str]:
        d: dict[str, str] = {}
        if self.title is not None:
            d["title"] = self.title
        if self.composer is not None:
            d["composer"] = self.composer
        return d


@dataclass(frozen=True)
class ParsedScore:
    upper: tuple[ResolvedNote, ...] = ()
    lower: tuple[ResolvedNote, ...] = ()
    metadata: ScoreMetadata = field(default_factory=ScoreMetadata)

    def voice(self, name: str) -> tuple[ResolvedNote, ...]:
        """Return the notes of voice *name* (``"upper"`` or ``"lower"``)."""
        if name not in VOICES:
            raise ValidationError(
                f"Unknown voice '{name}' (expected one of: {', '.join(VOICES)})"
            )
        return getattr(self, name)

    def to_dict(self) -> dict[str, Any]:
        """Return the plain-data form handed to rendering and exercise layers."""
        return {
            "upper": [n.to_dict() for n in self.upper],
            "lower": [n.to_dict() for n in self.lower],
            "metadata": self.metadata.to_dict(),
        }
