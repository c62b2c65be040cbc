"""MCP tool server for practice sessions."""
