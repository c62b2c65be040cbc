"""lilykeys: piano practice from simplified LilyPond scores.

Parses a two-voice notation document into MIDI-numbered note sequences and
scores played notes against them.
"""

from lilykeys.model.score import NoteToken, ParsedScore, ResolvedNote, ScoreMetadata
from lilykeys.parser import load_document, parse_document

__all__ = [
    "NoteToken",
    "ParsedScore",
    "ResolvedNote",
    "ScoreMetadata",
    "load_document",
    "parse_document",
]
