"""Core data model, errors and helpers shared by the parsers."""
