"""Serialize a ParsedScore to PrettyMIDI and write it to a .mid file.

Usage::

    from lilykeys.serialization.serialize import serialize, score_to_pretty_midi

    serialize(score, "/path/to/output.mid")
    pm = score_to_pretty_midi(score, tempo=90.0)

The score has no rhythm, so every note gets the same length and notes follow
each other without gaps. Title and composer travel as text events
(``title:...``, ``composer:...``) at time 0.
"""

from __future__ import annotations

import logging

import pretty_midi
from pretty_midi.containers import Text

from lilykeys.errors import SerializationError, ValidationError
from lilykeys.model.score import VOICES, ParsedScore

logger = logging.getLogger(__name__)

TITLE_PREFIX = "title:"
COMPOSER_PREFIX = "composer:"


def to_midi_text(s: str) -> str:
    """Map *s* to the latin-1 view of its UTF-8 bytes (MIDI text is bytes)."""
    return s.encode("utf-8").decode("latin-1")


def score_to_pretty_midi(
    score: ParsedScore,
    tempo: float = 120.0,
    beats_per_note: float = 1.0,
    velocity: int = 80,
    program: int = 0,
) -> pretty_midi.PrettyMIDI:
    """Convert a :class:`ParsedScore` to a :class:`pretty_midi.PrettyMIDI` object.

    One instrument per non-empty voice, named after the voice.

    Raises
    ------
    ValidationError
        If a note lies outside MIDI range 0-127.
    """
    pm = pretty_midi.PrettyMIDI(initial_tempo=tempo)
    note_seconds = beats_per_note * 60.0 / tempo

    for name in VOICES:
        notes = score.voice(name)
        if not notes:
            continue
        instrument = pretty_midi.Instrument(program=program, name=name)
        for i, note in enumerate(notes):
            if not 0 <= note.midi_number <= 127:
                raise ValidationError(
                    f"{name} note {i + 1} ({note.original_notation or note.note_name}) "
                    f"has MIDI number {note.midi_number}, outside 0-127"
                )
            start = i * note_seconds
            instrument.notes.append(
                pretty_midi.Note(
                    velocity=velocity,
                    pitch=note.midi_number,
                    start=start,
                    end=start + note_seconds,
                )
            )
        pm.instruments.append(instrument)

    meta = score.metadata
    if meta.title is not None:
        pm.text_events.append(Text(to_midi_text(TITLE_PREFIX + meta.title), 0.0))
    if meta.composer is not None:
        pm.text_events.append(
            Text(to_midi_text(COMPOSER_PREFIX + meta.composer), 0.0)
        )

    return pm


def serialize(
    score: ParsedScore,
    path: str,
    tempo: float = 120.0,
    beats_per_note: float = 1.0,
    velocity: int = 80,
    program: int = 0,
) -> None:
    """Serialize a :class:`ParsedScore` to a ``.mid`` file at *path*."""
    pm = score_to_pretty_midi(
        score,
        tempo=tempo,
        beats_per_note=beats_per_note,
        velocity=velocity,
        program=program,
    )
    try:
        pm.write(path)
    except OSError as exc:
        raise SerializationError(f"Cannot write MIDI file '{path}': {exc}") from exc
    logger.info("Wrote %s (%d instruments)", path, len(pm.instruments))
