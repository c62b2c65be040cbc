"""Score assembler: turns a whole source document into a :class:`ParsedScore`.

Usage::

    from lilykeys.parser.document import parse_document, load_document

    score = parse_document(text)
    score = load_document("/path/to/exercise.ly")
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from lilykeys.errors import SerializationError
from lilykeys.model.score import VOICES, ParsedScore, ResolvedNote, ScoreMetadata
from lilykeys.parser.expander import DEFAULT_MAX_DEPTH, expand
from lilykeys.parser.pitch import DEFAULT_OCTAVE, octave_for_midi, resolve_pitch
from lilykeys.parser.scanner import iter_tokens
from lilykeys.parser.variables import extract_variables, find_closing_brace

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r'title\s*=\s*"([^"]+)"')
_COMPOSER_RE = re.compile(r'composer\s*=\s*"([^"]+)"')
_RELATIVE_RE = re.compile(r"\\relative\s+([a-g](?:is|es|as)?[',]*)\s*\{")


def _voice_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"\b{re.escape(name)}\s*=\s*\\relative\s+([a-g](?:is|es|as)?[',]*)\s*\{{"
    )


_VOICE_RES: dict[str, re.Pattern[str]] = {name: _voice_re(name) for name in VOICES}


def parse_document(source: str) -> ParsedScore:
    """Parse a complete document into upper/lower note sequences and metadata.

    A missing voice yields an empty sequence. The two voices never share
    relative-pitch context.
    """
    variables = extract_variables(source)
    voices: dict[str, tuple[ResolvedNote, ...]] = {}
    for name in VOICES:
        voices[name] = _parse_declared_voice(source, name, variables)
    return ParsedScore(
        upper=voices["upper"],
        lower=voices["lower"],
        metadata=extract_metadata(source),
    )


def extract_metadata(source: str) -> ScoreMetadata:
    title = _TITLE_RE.search(source)
    composer = _COMPOSER_RE.search(source)
    return ScoreMetadata(
        title=title.group(1) if title else None,
        composer=composer.group(1) if composer else None,
    )


def _parse_declared_voice(
    source: str, name: str, variables: Mapping[str, str]
) -> tuple[ResolvedNote, ...]:
    m = _VOICE_RES[name].search(source)
    if m is None:
        logger.debug("No '%s' voice declared", name)
        return ()
    end = find_closing_brace(source, m.end())
    if end is None:
        logger.debug("Unbalanced braces in '%s' voice, skipping it", name)
        return ()
    body = source[m.end():end]
    notes = resolve_voice(m.group(1), body, variables)
    logger.debug("Voice '%s': %d notes", name, len(notes))
    return notes


def resolve_voice(
    anchor: str | None,
    body: str,
    variables: Mapping[str, str],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[ResolvedNote, ...]:
    """Expand, scan and resolve one voice body.

    *anchor* is the ``\\relative`` note. It is resolved in octave 4 without
    context, and the voice starts from it. Without an anchor the voice starts
    in octave 4 with no previous note.
    """
    base_octave = DEFAULT_OCTAVE
    previous: int | None = None
    if anchor is not None:
        start = resolve_pitch(anchor, DEFAULT_OCTAVE, None)
        if start is not None:
            previous = start.midi_number
            base_octave = octave_for_midi(start.midi_number)

    expanded = expand(body, variables, 0, max_depth)

    notes: list[ResolvedNote] = []
    for token in iter_tokens(expanded):
        resolved = resolve_pitch(token, base_octave, previous)
        if resolved is None:
            continue
        notes.append(
            ResolvedNote(
                midi_number=resolved.midi_number,
                note_name=resolved.note_name,
                original_notation=token.text,
            )
        )
        previous = resolved.midi_number
    return tuple(notes)


def parse_voice(
    text: str, variables: Mapping[str, str] | None = None
) -> tuple[ResolvedNote, ...]:
    """Parse a standalone voice snippet such as ``\\relative c' { c d e }``.

    Text without a ``\\relative`` header is read as a plain note list.
    """
    m = _RELATIVE_RE.search(text)
    if m is None:
        return resolve_voice(None, text, variables or {})
    end = find_closing_brace(text, m.end())
    body = text[m.end():end] if end is not None else text[m.end():]
    return resolve_voice(m.group(1), body, variables or {})


def load_document(path: str | Path) -> ParsedScore:
    """Read a UTF-8 document from *path* and parse it.

    Raises
    ------
    SerializationError
        If the file cannot be read or decoded.
    """
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SerializationError(f"Cannot read document '{path}': {exc}") from exc
    score = parse_document(source)
    logger.info(
        "Loaded %s: %d upper, %d lower notes",
        path, len(score.upper), len(score.lower),
    )
    return score
