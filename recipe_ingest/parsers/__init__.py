"""Recipe parsers."""
