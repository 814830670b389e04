"""Errors raised while turning a schematic into a netlist.

Every error carries an optional ``context`` dict (lib_id, reference,
point, ...) that is appended to the message so a failing conversion
points at the element that broke it.
"""

from __future__ import annotations

from typing import Any


class NetlistError(Exception):
    """Base class for all kicad-spice errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.context:
            parts.append(" (")
            parts.append(", ".join(f"{k}={v!r}" for k, v in self.context.items()))
            parts.append(")")
        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class GeometryError(NetlistError):
    """Placement data that cannot be turned into a transform."""


class FieldError(NetlistError):
    """A required field is missing or has the wrong shape."""


class MissingLibraryError(NetlistError):
    """A symbol instance refers to a lib_id with no definition."""


class MissingPinError(NetlistError):
    """A pin implied by the pin count or node sequence is not in the library."""


class UnknownPointError(NetlistError):
    """A point was expected to be registered in the connectivity graph."""


class PinSequenceError(NetlistError):
    """A Spice_Node_Sequence property could not be parsed."""


class TraversalError(NetlistError):
    """Elements arrived in a section where they are not allowed."""
