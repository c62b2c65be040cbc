"""Tests for the exercise engines, the drill note table and MIDI input."""

from __future__ import annotations

import os
import random
import tempfile

import mido
import pytest

from lilykeys.errors import SerializationError
from lilykeys.exercise.midi_input import play_messages, played_notes, recorded_notes
from lilykeys.exercise.session import ExerciseSession, NoteDrill
from lilykeys.lib.notes import (
    NOTES,
    get_note_by_index,
    get_note_by_midi_number,
    random_note_index,
)
from lilykeys.model.score import ParsedScore, ResolvedNote
from lilykeys.parser.document import parse_document


def _notes(*midi_numbers: int) -> tuple[ResolvedNote, ...]:
    return tuple(ResolvedNote(m, "X") for m in midi_numbers)


@pytest.fixture
def session() -> ExerciseSession:
    """Upper C5 D5 over a single lower C4."""
    return ExerciseSession(upper=_notes(72, 74), lower=_notes(60))


# ---------------------------------------------------------------------------
# ExerciseSession
# ---------------------------------------------------------------------------

class TestExerciseSession:
    def test_initial_state(self, session):
        assert session.current_index == 0
        assert session.total_notes == 2
        assert session.current_upper_note.midi_number == 72
        assert session.current_lower_note.midi_number == 60
        assert session.progress == 0
        assert not session.is_complete

    def test_both_hands_needed_to_advance(self, session):
        assert session.check_note(72) is True
        assert session.current_index == 0
        assert session.played_hands == {"upper"}
        assert session.check_note(60) is True
        assert session.current_index == 1
        assert session.played_hands == set()
        assert session.score == 2
        assert session.progress == 50

    def test_missing_hand_not_required(self, session):
        session.check_note(60)
        session.check_note(72)
        assert session.current_lower_note is None
        assert session.check_note(74) is True
        assert session.is_complete
        assert session.score == 3

    def test_repeated_hand_not_scored(self, session):
        session.check_note(72)
        assert session.check_note(72) is True
        assert session.score == 1
        assert session.current_index == 0

    def test_wrong_note(self, session):
        assert session.check_note(61) is False
        assert session.errors == 1
        assert session.score == 0

    def test_complete_ignores_input(self, session):
        for midi in (72, 60, 74):
            session.check_note(midi)
        assert session.check_note(74) is False
        assert session.errors == 0
        assert session.score == 3

    def test_unison_credits_both_hands(self):
        s = ExerciseSession(upper=_notes(60, 62), lower=_notes(60, 50))
        assert s.check_note(60) is True
        assert s.check_note(60) is True
        assert s.current_index == 1
        assert s.score == 2

    def test_progress_rounds_half_up(self):
        s = ExerciseSession(upper=_notes(60, 62, 64, 65, 67, 69, 71, 72))
        s.check_note(60)
        assert s.progress == 13
        s.check_note(62)
        s.check_note(64)
        assert s.progress == 38

    def test_empty_session(self):
        s = ExerciseSession()
        assert s.total_notes == 0
        assert s.progress == 0
        assert s.check_note(60) is False
        assert s.errors == 1

    def test_reset(self, session):
        session.check_note(72)
        session.check_note(61)
        session.reset()
        assert (session.current_index, session.score, session.errors) == (0, 0, 0)
        assert session.played_hands == set()

    def test_go_to_note(self, session):
        assert session.go_to_note(1) is True
        assert session.current_upper_note.midi_number == 74

    def test_go_to_note_out_of_range(self, session):
        assert session.go_to_note(2) is False
        assert session.go_to_note(-1) is False
        assert session.current_index == 0

    def test_go_to_note_reopens_completed(self, session):
        for midi in (72, 60, 74):
            session.check_note(midi)
        assert session.go_to_note(0)
        assert not session.is_complete

    def test_from_score(self):
        score = parse_document(r"upper = \relative c' { c d } lower = \relative c { c }")
        s = ExerciseSession.from_score(score)
        assert [n.midi_number for n in s.upper] == [72, 74]
        assert [n.midi_number for n in s.lower] == [60]

    def test_from_empty_score(self):
        assert ExerciseSession.from_score(ParsedScore()).total_notes == 0


# ---------------------------------------------------------------------------
# NoteDrill and note table
# ---------------------------------------------------------------------------

class TestNoteDrill:
    def test_hit(self):
        drill = NoteDrill(random.Random(7))
        assert drill.check_note(drill.current_note.midi_number) is True
        assert drill.score == 1

    def test_miss(self):
        drill = NoteDrill(random.Random(7))
        assert drill.check_note(0) is False
        assert drill.score == 0
        assert drill.current_note in NOTES

    def test_reset(self):
        drill = NoteDrill(random.Random(7))
        drill.check_note(drill.current_note.midi_number)
        drill.reset()
        assert drill.score == 0


class TestNoteTable:
    def test_twelve_white_keys(self):
        assert len(NOTES) == 12
        assert NOTES[0].midi_number == 60
        assert NOTES[-1].midi_number == 79

    def test_lookup_by_midi_number(self):
        assert get_note_by_midi_number(60).name == "do"
        assert get_note_by_midi_number(67).name == "sol"
        assert get_note_by_midi_number(61) is None

    def test_lookup_by_index(self):
        assert get_note_by_index(1).name == "ré"
        assert get_note_by_index(12) is None
        assert get_note_by_index(-1) is None

    def test_random_index_in_range(self):
        rng = random.Random(3)
        assert all(0 <= random_note_index(rng) < 12 for _ in range(50))


# ---------------------------------------------------------------------------
# MIDI input
# ---------------------------------------------------------------------------

class TestMidiInput:
    def test_played_notes_filters_presses(self):
        messages = [
            mido.Message("note_on", note=60, velocity=64),
            mido.Message("note_off", note=60),
            mido.Message("note_on", note=48, velocity=0),
            mido.Message("control_change", control=64, value=127),
            mido.Message("note_on", note=48, velocity=70),
        ]
        assert list(played_notes(messages)) == [60, 48]

    def test_play_messages(self, session):
        messages = [
            mido.Message("note_on", note=72, velocity=80),
            mido.Message("note_on", note=61, velocity=80),
            mido.Message("note_on", note=60, velocity=80),
        ]
        assert play_messages(session, messages) == [True, False, True]
        assert session.current_index == 1

    def test_recorded_notes(self):
        mid = mido.MidiFile(type=0)
        track = mido.MidiTrack()
        track.append(mido.Message("note_on", note=60, velocity=90, time=0))
        track.append(mido.Message("note_off", note=60, velocity=0, time=480))
        track.append(mido.Message("note_on", note=62, velocity=90, time=0))
        track.append(mido.Message("note_on", note=62, velocity=0, time=480))
        mid.tracks.append(track)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "take.mid")
            mid.save(path)
            assert recorded_notes(path) == [60, 62]

    def test_recorded_notes_missing_file(self):
        with pytest.raises(SerializationError):
            recorded_notes("/nonexistent/take.mid")
