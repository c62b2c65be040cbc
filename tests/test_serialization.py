"""Tests for ParsedScore <-> PrettyMIDI <-> .mid serialization."""

from __future__ import annotations

import os
import tempfile

import pretty_midi
import pytest

from lilykeys.errors import SerializationError, ValidationError
from lilykeys.model.score import ParsedScore, ResolvedNote, ScoreMetadata
from lilykeys.serialization.deserialize import (
    deserialize,
    from_midi_text,
    pretty_midi_to_score,
)
from lilykeys.serialization.serialize import score_to_pretty_midi, serialize, to_midi_text


# ---------------------------------------------------------------------------
# score_to_pretty_midi
# ---------------------------------------------------------------------------

class TestScoreToPrettyMidi:
    def test_one_instrument_per_voice(self, sample_score):
        pm = score_to_pretty_midi(sample_score)
        assert [inst.name for inst in pm.instruments] == ["upper", "lower"]
        assert [n.pitch for n in pm.instruments[1].notes] == [60, 55, 60]

    def test_even_spacing(self, sample_score):
        pm = score_to_pretty_midi(sample_score, tempo=120.0, beats_per_note=1.0)
        notes = pm.instruments[0].notes
        assert notes[0].start == pytest.approx(0.0)
        assert notes[1].start == pytest.approx(0.5)
        assert notes[1].end == pytest.approx(1.0)

    def test_velocity_and_program(self, sample_score):
        pm = score_to_pretty_midi(sample_score, velocity=100, program=4)
        assert pm.instruments[0].program == 4
        assert all(n.velocity == 100 for n in pm.instruments[0].notes)

    def test_empty_voice_skipped(self):
        score = ParsedScore(upper=(ResolvedNote(72, "C"),))
        pm = score_to_pretty_midi(score)
        assert [inst.name for inst in pm.instruments] == ["upper"]

    def test_out_of_range(self):
        score = ParsedScore(upper=(ResolvedNote(130, "A#", "ais''''"),))
        with pytest.raises(ValidationError, match="ais''''"):
            score_to_pretty_midi(score)

    def test_metadata_text_events(self, sample_score):
        pm = score_to_pretty_midi(sample_score)
        texts = [e.text for e in pm.text_events]
        assert to_midi_text("title:Étude") in texts
        assert to_midi_text("composer:Czerny") in texts


class TestMidiText:
    def test_ascii_unchanged(self):
        assert to_midi_text("Minuet") == "Minuet"

    def test_utf8_bytes_restored(self):
        assert from_midi_text(to_midi_text("Étude 练习")) == "Étude 练习"

    def test_plain_latin1_kept(self):
        # Not valid UTF-8 once encoded, so returned as read
        assert from_midi_text("\xe9") == "\xe9"


# ---------------------------------------------------------------------------
# pretty_midi_to_score
# ---------------------------------------------------------------------------

class TestPrettyMidiToScore:
    def test_unnamed_instruments_in_order(self):
        pm = pretty_midi.PrettyMIDI()
        for pitch in (72, 48):
            inst = pretty_midi.Instrument(program=0, name="Piano")
            inst.notes.append(pretty_midi.Note(velocity=80, pitch=pitch, start=0.0, end=0.5))
            pm.instruments.append(inst)
        score = pretty_midi_to_score(pm)
        assert score.upper == (ResolvedNote(72, "C"),)
        assert score.lower == (ResolvedNote(48, "C"),)

    def test_notes_sorted_by_start(self):
        pm = pretty_midi.PrettyMIDI()
        inst = pretty_midi.Instrument(program=0, name="upper")
        inst.notes.append(pretty_midi.Note(velocity=80, pitch=64, start=1.0, end=1.5))
        inst.notes.append(pretty_midi.Note(velocity=80, pitch=61, start=0.0, end=0.5))
        pm.instruments.append(inst)
        score = pretty_midi_to_score(pm)
        assert [n.midi_number for n in score.upper] == [61, 64]
        assert score.upper[0].note_name == "C#"
        assert score.lower == ()

    def test_drums_ignored(self):
        pm = pretty_midi.PrettyMIDI()
        drums = pretty_midi.Instrument(program=0, is_drum=True, name="Drums")
        drums.notes.append(pretty_midi.Note(velocity=80, pitch=36, start=0.0, end=0.1))
        pm.instruments.append(drums)
        assert pretty_midi_to_score(pm) == ParsedScore()


# ---------------------------------------------------------------------------
# File round trip
# ---------------------------------------------------------------------------

class TestFileRoundTrip:
    def test_serialize_then_deserialize(self, sample_score):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "etude.mid")
            serialize(sample_score, path)
            assert os.path.exists(path)
            loaded = deserialize(path)

        assert [n.midi_number for n in loaded.upper] == [
            n.midi_number for n in sample_score.upper
        ]
        assert [n.midi_number for n in loaded.lower] == [60, 55, 60]
        assert [n.note_name for n in loaded.upper] == [
            n.note_name for n in sample_score.upper
        ]
        assert loaded.metadata == ScoreMetadata(title="Étude", composer="Czerny")

    def test_write_to_missing_directory(self, sample_score):
        with pytest.raises(SerializationError):
            serialize(sample_score, "/nonexistent/dir/out.mid")

    def test_deserialize_garbage(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "bad.mid")
            with open(path, "wb") as f:
                f.write(b"not a midi file at all")
            with pytest.raises(SerializationError):
                deserialize(path)
