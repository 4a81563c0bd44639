"""Editing-facing text control."""

from textedit.editing.text_control import TextControl, create_text_control

__all__ = ["TextControl", "create_text_control"]
