from __future__ import annotations

import logging

from kicad_spice.exceptions import FieldError, MissingLibraryError
from kicad_spice.models import Definition, Pin, Unit

logger = logging.getLogger(__name__)

_BOUNDING_KINDS = ("polyline", "rectangle")


class LibraryIndex:
    """Symbol definitions from the lib_symbols section, keyed by lib_id."""

    def __init__(self):
        self._definitions: dict[str, Definition] = {}

    def __contains__(self, lib_id: str) -> bool:
        return lib_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def register(self, definition: Definition):
        if definition.name in self._definitions:
            logger.debug("library symbol %s registered twice, keeping the last one", definition.name)
        self._definitions[definition.name] = definition

    def get(self, lib_id: str) -> Definition:
        try:
            return self._definitions[lib_id]
        except KeyError:
            raise MissingLibraryError("symbol not found in library", context={"lib_id": lib_id}) from None

    def units(self, lib_id: str, unit: int) -> list[Unit]:
        """Units of ``lib_id`` that apply to placement unit ``unit``."""
        return [u for u in self.get(lib_id).units if u.number == 0 or u.number == unit]

    def pins(self, lib_id: str) -> dict[int, tuple[Pin, int]]:
        """Map pin number to ``(pin, owning unit number)`` across all units."""
        result: dict[int, tuple[Pin, int]] = {}
        for unit in self.get(lib_id).units:
            for pin in unit.pins:
                try:
                    number = int(pin.number)
                except ValueError:
                    raise FieldError(
                        "pin number is not an integer",
                        context={"lib_id": lib_id, "pin": pin.number},
                    ) from None
                result[number] = (pin, unit.number)
        return result

    def bounds(
        self, lib_id: str, unit: int
    ) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """Axis-aligned ``(min, max)`` corners of the unit's drawing.

        Only polylines and rectangles count; pins are left out. Returns
        None when the applicable units draw nothing.
        """
        xs: list[float] = []
        ys: list[float] = []
        for u in self.units(lib_id, unit):
            for graphic in u.graphics:
                if graphic.kind not in _BOUNDING_KINDS:
                    logger.debug("ignoring %s in bounds of %s", graphic.kind, lib_id)
                    continue
                for x, y in graphic.points:
                    xs.append(x)
                    ys.append(y)
        if not xs:
            return None
        return (min(xs), min(ys)), (max(xs), max(ys))
