"""Feed MIDI input into an exercise.

Works on any iterable of :class:`mido.Message`: an open input port, a list
built in tests, or the messages of a recorded ``.mid`` performance.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

import mido

from lilykeys.errors import SerializationError
from lilykeys.exercise.session import ExerciseSession


def played_notes(messages: Iterable[mido.Message]) -> Iterator[int]:
    """Yield the note number of every key press in *messages*.

    A ``note_on`` with velocity 0 is a release and is skipped, as are all
    other message types.
    """
    for msg in messages:
        if msg.type == "note_on" and msg.velocity > 0:
            yield msg.note


def play_messages(
    session: ExerciseSession, messages: Iterable[mido.Message]
) -> list[bool]:
    """Check every key press of *messages* against *session*, in order."""
    return [session.check_note(note) for note in played_notes(messages)]


def recorded_notes(path: str | Path) -> list[int]:
    """Return the key presses of a recorded performance, in time order."""
    try:
        mid = mido.MidiFile(str(path))
    except (OSError, EOFError, ValueError) as exc:
        raise SerializationError(f"Cannot read MIDI file '{path}': {exc}") from exc
    # Merged playback order across all tracks
    return list(played_notes(mido.merge_tracks(mid.tracks)))
