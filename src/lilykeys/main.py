"""lilykeys MCP server: load a notation document and practise it note by note."""

from __future__ import annotations

import logging
import os

from fastmcp import FastMCP

from lilykeys.server.practice import PracticeLayer
from lilykeys.server.tools import register_tools

mcp = FastMCP(
    "lilykeys",
    instructions=(
        "Piano practice over simplified LilyPond scores. Load a document with "
        "piano_session, then send played MIDI numbers with piano_play."
    ),
)
practice = PracticeLayer()
register_tools(mcp, practice)


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LILYKEYS_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    main()
