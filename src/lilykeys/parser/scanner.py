"""Token scanner for voice bodies.

Strips comments, layout commands and articulation markers, then yields the
note tokens left to right. Durations are matched and discarded; there is no
rhythm model.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from lilykeys.model.score import NoteToken

# Stripping passes, applied in order
_COMMENT_RE = re.compile(r"%.*$", re.MULTILINE)
_CLEF_RE = re.compile(r"\\clef\s+\w+")
_COMMAND_WITH_ARG_RE = re.compile(r"\\[a-z]+\s+[\d/]+")  # \time 3/4, \tempo 4
_COMMAND_RE = re.compile(r"\\[a-z]+")
_MARKER_RE = re.compile(r"[<>!]")

# A note token, not embedded in a larger word. Group "note" is the spelling
# without duration.
NOTE_RE = re.compile(
    r"(?<![\w])"
    r"(?P<note>"
    r"(?P<letter>[a-g])"
    r"(?P<accidental>is|es|as)?"
    r"(?P<octaves>[',]*)"
    r"(?P<fingering>-\d+)?"
    r")"
    r"(?P<duration>\d*)"
    r"(?![\w])"
)


def clean_voice(body: str) -> str:
    """Remove everything from *body* that is not a note candidate."""
    text = _COMMENT_RE.sub("", body)
    text = _CLEF_RE.sub("", text)
    text = _COMMAND_WITH_ARG_RE.sub("", text)
    text = _COMMAND_RE.sub("", text)
    return _MARKER_RE.sub("", text)


def token_from_match(m: re.Match[str]) -> NoteToken:
    return NoteToken(
        letter=m.group("letter"),
        accidental=m.group("accidental") or "",
        octaves=m.group("octaves"),
        fingering=m.group("fingering") or "",
    )


def iter_tokens(body: str) -> Iterator[NoteToken]:
    """Yield note tokens of *body* in source order."""
    for m in NOTE_RE.finditer(clean_voice(body)):
        yield token_from_match(m)


def scan_voice(body: str) -> list[NoteToken]:
    """Return the ordered note tokens of a voice body.

    Examples
    --------
    >>> [t.text for t in scan_voice("\\\\clef treble c4 dis'8 e,-3 % trill")]
    ['c', "dis'", 'e,-3']
    """
    return list(iter_tokens(body))
