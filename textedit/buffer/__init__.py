"""Editable text storage."""

from textedit.buffer.dynamic_buffer import DynamicTextBuffer

__all__ = ["DynamicTextBuffer"]
