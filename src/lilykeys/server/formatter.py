"""Compact response formatting for practice tool outputs."""

from __future__ import annotations

from collections.abc import Sequence

from lilykeys.exercise.session import ExerciseSession
from lilykeys.model.score import ResolvedNote, ScoreMetadata


def format_result(
    success: bool,
    message: str,
    suggestion: str | None = None,
) -> str:
    """Format an action result line.

    Success: ``+ message``
    Error:   ``! message`` with optional ``  try: suggestion``
    """
    if success:
        return f"+ {message}"
    line = f"! {message}"
    if suggestion:
        line += f"\n  try: {suggestion}"
    return line


def format_note(note: ResolvedNote | None) -> str:
    if note is None:
        return "-"
    return f"{note.note_name}({note.midi_number})"


def format_notes(name: str, notes: Sequence[ResolvedNote]) -> str:
    """Format a voice as numbered lines: ``  3. E(76) e``."""
    if not notes:
        return f"{name}: no notes."
    lines = [f"{name} ({len(notes)} notes):"]
    for idx, note in enumerate(notes, 1):
        source = f" {note.original_notation}" if note.original_notation else ""
        lines.append(f"  {idx}. {format_note(note)}{source}")
    return "\n".join(lines)


def format_metadata(metadata: ScoreMetadata) -> str:
    title = metadata.title or "(untitled)"
    if metadata.composer:
        return f"{title} by {metadata.composer}"
    return title


def format_status(session: ExerciseSession) -> str:
    """One-line digest of an exercise session."""
    if session.is_complete:
        where = "complete"
    else:
        where = (
            f"note {session.current_index + 1}/{session.total_notes} "
            f"upper:{format_note(session.current_upper_note)} "
            f"lower:{format_note(session.current_lower_note)}"
        )
    return (
        f"[{where} | score:{session.score} errors:{session.errors} "
        f"progress:{session.progress}%]"
    )
