"""Deserialize a .mid file into a ParsedScore via PrettyMIDI.

Usage::

    from lilykeys.serialization.deserialize import deserialize, pretty_midi_to_score

    score = deserialize("/path/to/file.mid")
    score = pretty_midi_to_score(pm)
"""

from __future__ import annotations

import pretty_midi

from lilykeys.errors import SerializationError
from lilykeys.model.score import VOICES, ParsedScore, ResolvedNote, ScoreMetadata
from lilykeys.parser.pitch import note_name_for_midi
from lilykeys.serialization.serialize import COMPOSER_PREFIX, TITLE_PREFIX


def from_midi_text(s: str) -> str:
    """Undo :func:`~lilykeys.serialization.serialize.to_midi_text`.

    Text that is not valid UTF-8 is returned as read.
    """
    try:
        return s.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return s


def _voice_notes(instrument: pretty_midi.Instrument) -> tuple[ResolvedNote, ...]:
    ordered = sorted(instrument.notes, key=lambda n: (n.start, n.pitch))
    return tuple(
        ResolvedNote(midi_number=n.pitch, note_name=note_name_for_midi(n.pitch))
        for n in ordered
    )


def pretty_midi_to_score(pm: pretty_midi.PrettyMIDI) -> ParsedScore:
    """Convert a :class:`pretty_midi.PrettyMIDI` object to a :class:`ParsedScore`.

    Instruments named ``upper``/``lower`` fill those voices. Otherwise the
    first two non-drum instruments are used, in file order.
    """
    melodic = [inst for inst in pm.instruments if not inst.is_drum]
    by_name = {inst.name.strip().lower(): inst for inst in melodic}

    voices: dict[str, tuple[ResolvedNote, ...]] = {}
    if any(name in by_name for name in VOICES):
        for name in VOICES:
            inst = by_name.get(name)
            voices[name] = _voice_notes(inst) if inst is not None else ()
    else:
        for name, inst in zip(VOICES, melodic):
            voices[name] = _voice_notes(inst)

    title: str | None = None
    composer: str | None = None
    for event in pm.text_events:
        text = from_midi_text(event.text)
        if text.startswith(TITLE_PREFIX) and title is None:
            title = text[len(TITLE_PREFIX):]
        elif text.startswith(COMPOSER_PREFIX) and composer is None:
            composer = text[len(COMPOSER_PREFIX):]

    return ParsedScore(
        upper=voices.get("upper", ()),
        lower=voices.get("lower", ()),
        metadata=ScoreMetadata(title=title, composer=composer),
    )


def deserialize(path: str) -> ParsedScore:
    """Deserialize a ``.mid`` file at *path* into a :class:`ParsedScore`."""
    try:
        pm = pretty_midi.PrettyMIDI(path)
    except (OSError, EOFError, ValueError, KeyError, IndexError) as exc:
        raise SerializationError(f"Cannot read MIDI file '{path}': {exc}") from exc
    return pretty_midi_to_score(pm)
