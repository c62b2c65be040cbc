"""Shared fixtures for lilykeys tests."""

from __future__ import annotations

import pytest

from lilykeys.model.score import ParsedScore
from lilykeys.parser.document import parse_document
from lilykeys.server.practice import PracticeLayer

SAMPLE_SOURCE = r"""
\version "2.24.0"
\header {
  title = "Étude"
  composer = "Czerny"
}

motif = { c d e f }

upper = \relative c' {
  \clef treble \time 4/4
  \motif g4 g % repeat
  \transpose c d { \motif }
}

lower = \relative c {
  \clef bass
  c-1 g'-5 c,
}
"""

TWO_VOICE_SOURCE = r"upper = \relative c' { c d } lower = \relative c { c }"


@pytest.fixture
def sample_source() -> str:
    return SAMPLE_SOURCE


@pytest.fixture
def sample_score() -> ParsedScore:
    """The parsed form of SAMPLE_SOURCE."""
    return parse_document(SAMPLE_SOURCE)


@pytest.fixture
def practice() -> PracticeLayer:
    """Provide a fresh PracticeLayer instance."""
    return PracticeLayer()


@pytest.fixture
def practice_loaded(practice: PracticeLayer) -> PracticeLayer:
    """Provide a PracticeLayer with a two-voice score loaded."""
    result = practice.execute_session("source " + TWO_VOICE_SOURCE)
    assert result.startswith("+")
    return practice
