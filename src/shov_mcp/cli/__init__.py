"""Command-line entry points for shov-mcp."""
