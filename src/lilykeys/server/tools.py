"""FastMCP tool registrations for practice sessions."""

from __future__ import annotations

from fastmcp import FastMCP

from lilykeys.server.practice import PracticeLayer


def register_tools(mcp: FastMCP, practice: PracticeLayer) -> None:
    """Register the 3 practice tools on the given MCP server."""

    @mcp.tool
    def piano_session(action: str) -> str:
        """Session: 'load ./exercise.ly', 'source <notation text>',
        'reset', 'goto 5', 'export ./exercise.mid'"""
        return practice.execute_session(action)

    @mcp.tool
    def piano_play(notes: list[int]) -> str:
        """Play MIDI note numbers in order against the current exercise,
        e.g. [60, 48, 62]. Each hand must play its note before moving on."""
        return "\n".join(practice.execute_play(notes))

    @mcp.tool
    def piano_query(q: str) -> str:
        """Query: 'status', 'notes upper', 'notes lower', 'metadata', 'score'"""
        return practice.execute_query(q)
