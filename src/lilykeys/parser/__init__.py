"""Parser package: turn notation text into MIDI-numbered note sequences."""

from lilykeys.parser.document import (
    extract_metadata,
    load_document,
    parse_document,
    parse_voice,
)
from lilykeys.parser.expander import expand, transpose_interval, transpose_note
from lilykeys.parser.pitch import note_name_for_midi, resolve_pitch
from lilykeys.parser.scanner import clean_voice, iter_tokens, scan_voice
from lilykeys.parser.variables import extract_variables

__all__ = [
    "clean_voice",
    "expand",
    "extract_metadata",
    "extract_variables",
    "iter_tokens",
    "load_document",
    "note_name_for_midi",
    "parse_document",
    "parse_voice",
    "resolve_pitch",
    "scan_voice",
    "transpose_interval",
    "transpose_note",
]
