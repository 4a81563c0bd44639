"""Public text-edit exception taxonomy."""

from __future__ import annotations


class TextEditError(Exception):
    """Base class for text-edit core failures."""


class OutOfRangeError(TextEditError, IndexError):
    """Position, count or span outside the current buffer bounds."""

    def __init__(self, message: str, *, position: int, count: int, length: int) -> None:
        super().__init__(f"{message}: position={position} count={count} length={length}")
        self.position = position
        self.count = count
        self.length = length


class AllocationFailure(TextEditError, MemoryError):
    """Buffer growth could not obtain more storage."""

    def __init__(self, message: str, *, requested: int, capacity: int) -> None:
        super().__init__(f"{message}: requested={requested} capacity={capacity}")
        self.requested = requested
        self.capacity = capacity


class FontNotLoadedError(TextEditError, RuntimeError):
    """Measurement or layout requested without a loaded font."""


class FontLoadError(TextEditError, RuntimeError):
    """Font file or atlas layout could not be read."""

    def __init__(self, message: str, *, details: dict[str, object]) -> None:
        super().__init__(message)
        self.details = details
