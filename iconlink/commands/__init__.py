"""CLI command groups for iconlink."""
