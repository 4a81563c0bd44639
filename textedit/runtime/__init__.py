"""Text-edit runtime configuration, logging and codec helpers."""
