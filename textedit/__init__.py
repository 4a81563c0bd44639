"""Text box core: editable byte buffer, pixel measurement and glyph quad layout."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textedit.editing.text_control import TextControl
    from textedit.runtime.config import TextEditConfig


def create_text_control(*, config: "TextEditConfig | None" = None) -> "TextControl":
    """Create a text control with a font session loaded from configuration."""
    from textedit.editing.text_control import create_text_control as editing_create

    return editing_create(config=config)


__all__ = ["create_text_control"]
