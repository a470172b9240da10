"""Input and output formats."""
