"""Pitch codec: converts a note spelling to a MIDI number.

Supported spelling
------------------
- Base letter ``a``..``g``
- Accidental suffix: ``is`` (sharp), ``es`` / ``as`` (flat)
- Octave marks: ``'`` (up) and ``,`` (down), any number
- Fingering suffix ``-N`` (ignored for pitch)

Octave 4 holds middle C: ``c`` at octave 4 is MIDI 60.
"""

from __future__ import annotations

import re

from lilykeys.model.score import NoteToken, ResolvedNote

DEFAULT_OCTAVE = 4

# Largest distance (in semitones) allowed from the previous note in
# relative mode before the octave is folded back towards it.
RELATIVE_WINDOW = 6

# Semitone offsets for natural notes (C-based)
_NOTE_OFFSETS: dict[str, int] = {
    "c": 0,
    "d": 2,
    "e": 4,
    "f": 5,
    "g": 7,
    "a": 9,
    "b": 11,
}

_SHARP = "is"
_FLATS = ("es", "as")

_FINGERING_RE = re.compile(r"-\d+")

# Display names indexed by (midi_number % 12); sharps for black keys
_SHARP_NAMES: list[str] = [
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
]


def resolve_pitch(
    token: NoteToken | str,
    base_octave: int = DEFAULT_OCTAVE,
    previous_midi: int | None = None,
) -> ResolvedNote | None:
    """Resolve a note spelling to a :class:`ResolvedNote`.

    Parameters
    ----------
    token : NoteToken or str
        A scanned token or its source spelling, e.g. ``"fis'"``, ``"bes,-2"``.
    base_octave : int
        Octave the unmarked letter sits in (default 4, middle C octave).
    previous_midi : int or None
        MIDI number of the previous note in relative mode. When given, the
        result is moved by whole octaves until it lies within
        ``RELATIVE_WINDOW`` semitones of it.

    Returns
    -------
    ResolvedNote or None
        ``None`` when the spelling does not start with ``a``..``g``.
    """
    clean = _FINGERING_RE.sub("", str(token)).strip()
    if not clean or clean[0] not in _NOTE_OFFSETS:
        return None

    letter = clean[0]
    midi_number = _NOTE_OFFSETS[letter]
    display_name = letter.upper()

    # Substring checks over the whole spelling, so "es" and "as" read as
    # E-flat and A-flat. Sharp and flat checks are independent: a spelling
    # containing both applies both adjustments.
    if _SHARP in clean:
        midi_number += 1
        display_name += "#"
    if any(flat in clean for flat in _FLATS):
        midi_number -= 1
        display_name += "b"

    midi_number += (base_octave + 1) * 12
    if isinstance(token, NoteToken):
        octave_shift = token.octave_shift
    else:
        octave_shift = clean.count("'") - clean.count(",")
    midi_number += 12 * octave_shift

    if previous_midi is not None:
        while midi_number - previous_midi > RELATIVE_WINDOW:
            midi_number -= 12
        while previous_midi - midi_number > RELATIVE_WINDOW:
            midi_number += 12

    return ResolvedNote(midi_number=midi_number, note_name=display_name)


def pitch_value(spelling: str) -> int:
    """Return the semitone value of *spelling* relative to unmarked ``c``.

    ``"d"`` -> 2, ``"bes,"`` -> -2, ``"c''"`` -> 24. Unknown letters count
    as ``c``.
    """
    clean = _FINGERING_RE.sub("", spelling).strip()
    value = _NOTE_OFFSETS.get(clean[:1], 0)
    suffix = clean[1:]
    if suffix.startswith(_SHARP):
        value += 1
    elif suffix.startswith(_FLATS):
        value -= 1
    return value + 12 * (clean.count("'") - clean.count(","))


def octave_for_midi(midi_number: int) -> int:
    """Return the octave holding *midi_number* (60 -> 4)."""
    return midi_number // 12 - 1


def note_name_for_midi(midi_number: int) -> str:
    """Return the display name for *midi_number*, using sharps for black keys."""
    return _SHARP_NAMES[midi_number % 12]
