"""Custom exception hierarchy for lilykeys."""

from __future__ import annotations


class LilyKeysError(Exception):
    """Base exception for all lilykeys errors."""


class ValidationError(LilyKeysError, ValueError):
    """Rejected input: an unknown voice, a note outside 0..127, a bad goto index.

    The practice layer reports it as a ``!`` line. It is also a ValueError.
    """


class StateError(LilyKeysError):
    """Invalid operation given the current practice state."""


class SerializationError(LilyKeysError):
    """Error while reading a source document or reading/writing a MIDI file."""
