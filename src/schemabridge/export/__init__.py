"""Exporters that serialize converted mapping metadata."""
