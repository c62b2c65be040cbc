"""Macro expander: variable substitution and ``\\transpose`` blocks.

Expansion runs to a fixed point bounded by a depth budget. Every nested
expansion (a variable body or a transpose body) gets the budget minus one and
its own composed semitone offset, so self-referencing variables stop once
the budget runs out instead of recursing forever.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from lilykeys.parser.pitch import pitch_value
from lilykeys.parser.scanner import NOTE_RE
from lilykeys.parser.variables import find_closing_brace

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 50

_TRANSPOSE_RE = re.compile(
    r"\\transpose\s+([a-g](?:is|es|as)?[',]*)\s+([a-g](?:is|es|as)?[',]*)\s*\{"
)
_REFERENCE_RE = re.compile(r"\\(\w+)\b")
_SPELLING_RE = re.compile(r"([a-g])(is|es|as)?([',]*)(-\d+)?")

# Transposed notes are always spelled with sharps
_SHARP_SPELLINGS: tuple[str, ...] = (
    "c", "cis", "d", "dis", "e", "f", "fis", "g", "gis", "a", "ais", "b",
)

# Finished nested expansions are parked in slots until this call's own text
# has been re-spelled, so an outer offset never shifts them a second time.
_SLOT = "\x00{}\x00"
_SLOT_RE = re.compile(r"\x00(\d+)\x00")


def expand(
    body: str,
    variables: Mapping[str, str],
    transpose_offset: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Expand variable references and transpose blocks in *body*.

    Parameters
    ----------
    body : str
        Raw notation text.
    variables : Mapping[str, str]
        Variable table from :func:`~lilykeys.parser.variables.extract_variables`.
    transpose_offset : int
        Semitones to shift every note of the result by.
    max_depth : int
        Expansion budget. At 0 the body is returned untouched.

    Returns
    -------
    str
        Expanded text. Unknown ``\\name`` references are kept verbatim.
    """
    if max_depth <= 0:
        if _REFERENCE_RE.search(body):
            logger.debug("Expansion budget exhausted, leaving %.40r as is", body)
        return body

    slots: list[str] = []
    expanded = body
    changed = True
    while changed and max_depth > 0:
        before = expanded
        expanded = _expand_transpositions(
            expanded, variables, transpose_offset, max_depth, slots
        )
        expanded = _expand_references(
            expanded, variables, transpose_offset, max_depth, slots
        )
        changed = expanded != before
        max_depth -= 1

    if transpose_offset:
        expanded = NOTE_RE.sub(
            lambda m: transpose_note(m.group("note"), transpose_offset)
            + m.group("duration"),
            expanded,
        )

    return _SLOT_RE.sub(lambda m: slots[int(m.group(1))], expanded)


def _park(slots: list[str], text: str) -> str:
    slots.append(text)
    return _SLOT.format(len(slots) - 1)


def _expand_transpositions(
    text: str,
    variables: Mapping[str, str],
    transpose_offset: int,
    max_depth: int,
    slots: list[str],
) -> str:
    pieces: list[str] = []
    last = 0
    for m in _TRANSPOSE_RE.finditer(text):
        if m.start() < last:
            # Nested in a block already expanded
            continue
        end = find_closing_brace(text, m.end())
        if end is None:
            continue
        offset = transpose_offset + transpose_interval(m.group(1), m.group(2))
        inner = expand(text[m.end():end], variables, offset, max_depth - 1)
        pieces.append(text[last:m.start()])
        pieces.append(_park(slots, inner))
        last = end + 1
    pieces.append(text[last:])
    return "".join(pieces)


def _expand_references(
    text: str,
    variables: Mapping[str, str],
    transpose_offset: int,
    max_depth: int,
    slots: list[str],
) -> str:
    def replace(m: re.Match[str]) -> str:
        name = m.group(1)
        if name not in variables:
            return m.group(0)
        inner = expand(variables[name], variables, transpose_offset, max_depth - 1)
        return _park(slots, inner)

    return _REFERENCE_RE.sub(replace, text)


def transpose_interval(from_note: str, to_note: str) -> int:
    """Return the semitone shift of ``\\transpose from_note to_note``.

    >>> transpose_interval("c", "d")
    2
    >>> transpose_interval("c'", "a")
    -3
    """
    return pitch_value(to_note) - pitch_value(from_note)


def transpose_note(note: str, semitones: int) -> str:
    """Shift a single note spelling by *semitones*, keeping its fingering.

    The result always uses sharp spellings and carries absolute octave marks
    counted from unmarked ``c``. Spellings that are not a single note are
    returned unchanged.

    >>> transpose_note("c", 2)
    'd'
    >>> transpose_note("bes-2", 3)
    "cis'-2"
    """
    if not semitones:
        return note
    m = _SPELLING_RE.fullmatch(note)
    if m is None:
        return note
    letter, accidental, octaves, fingering = m.groups()
    value = pitch_value(letter + (accidental or "") + octaves) + semitones
    octave, pitch_class = divmod(value, 12)
    spelled = _SHARP_SPELLINGS[pitch_class]
    if octave > 0:
        spelled += "'" * octave
    elif octave < 0:
        spelled += "," * -octave
    return spelled + (fingering or "")
