from __future__ import annotations

import logging
import re
from pathlib import Path

from skip import Schematic as SkipSchematic

from kicad_spice.exceptions import FieldError
from kicad_spice.geometry import Placement
from kicad_spice.models import (
    Definition,
    Element,
    GlobalLabel,
    Graphic,
    Instance,
    Label,
    LibraryEnd,
    LibraryStart,
    NoConnect,
    Pin,
    Schematic,
    Unit,
    Wire,
)

logger = logging.getLogger(__name__)

_GRAPHIC_KINDS = {"polyline", "rectangle", "circle", "arc", "bezier", "text"}


def parse_schematic(path: str | Path) -> Schematic:
    """Read a .kicad_sch into the element sequence the ingestion expects.

    Library definitions come first, wrapped in LibraryStart/LibraryEnd,
    followed by the design elements in the order KiCad writes them.
    """
    skip_sch = SkipSchematic(str(path))
    elements: list[Element] = [LibraryStart()]
    elements.extend(_extract_definitions(skip_sch))
    elements.append(LibraryEnd())
    elements.extend(
        NoConnect(at=_xy(nc.at.value)) for nc in _collection(skip_sch, "no_connect", node_field="at")
    )
    elements.extend(
        Wire(start=_xy(w.start.value), end=_xy(w.end.value)) for w in _collection(skip_sch, "wire")
    )
    elements.extend(
        Label(text=str(lbl.value), at=_xy(lbl.at.value)) for lbl in _collection(skip_sch, "label")
    )
    elements.extend(
        GlobalLabel(text=str(lbl.value), at=_xy(lbl.at.value))
        for lbl in _collection(skip_sch, "global_label")
    )
    elements.extend(_extract_instance(sym) for sym in _collection(skip_sch, "symbol"))
    return Schematic(elements=elements, path=str(path))


def _collection(sch: SkipSchematic, name: str, node_field: str | None = None) -> list:
    """Elements of one kind as a list.

    kicad-skip has no collection type for some kinds (no_connect): a sheet
    with a single such element hands back the element itself. Passing
    ``node_field`` recognises that case by a field every element carries.
    """
    if not hasattr(sch, name) or getattr(sch, name) is None:
        return []
    value = getattr(sch, name)
    if node_field is not None and hasattr(value, node_field):
        return [value]
    return list(value)


def _xy(value) -> tuple[float, float]:
    try:
        return float(value[0]), float(value[1])
    except (IndexError, TypeError, ValueError):
        raise FieldError("expected an x/y coordinate", context={"value": value}) from None


def _lib_symbol(sch: SkipSchematic, lib_id: str):
    """The lib_symbols entry for ``lib_id``, or None.

    kicad-skip exposes entries as attributes: ``Device:R`` becomes
    ``Device_R``, and names starting with a digit gain an ``n`` prefix.
    """
    mangled = re.sub(r"[^a-zA-Z0-9_]", "_", lib_id)
    for candidate in (mangled, "n" + mangled):
        entry = getattr(sch.lib_symbols, candidate, None)
        if entry is not None:
            return entry
    return None


def _parse_lib_sub_unit(sub) -> int:
    raw_name = str(sub.raw[1])
    parts = raw_name.rsplit("_", 2)
    try:
        return int(parts[-2])
    except (IndexError, ValueError):
        raise FieldError("library unit name has no unit number", context={"name": raw_name}) from None


def _head(item) -> str | None:
    if isinstance(item, list) and item:
        return str(item[0])
    return None


def _child(raw: list, name: str) -> list | None:
    for item in raw:
        if _head(item) == name:
            return item
    return None


def _graphic(raw: list) -> Graphic:
    kind = _head(raw)
    points: list[tuple[float, float]] = []
    if kind == "polyline":
        pts = _child(raw, "pts") or []
        points = [_xy(xy[1:]) for xy in pts[1:] if _head(xy) == "xy"]
    elif kind == "rectangle":
        for corner in ("start", "end"):
            node = _child(raw, corner)
            if node is None:
                raise FieldError(f"rectangle without {corner}")
            points.append(_xy(node[1:]))
    return Graphic(kind=kind, points=points)


def _extract_unit(sub) -> Unit:
    unit = Unit(number=_parse_lib_sub_unit(sub))
    if hasattr(sub, "pin") and sub.pin is not None:
        for pin in sub.pin:
            unit.pins.append(Pin(
                number=str(pin.number.value),
                position=_xy(pin.at.value),
                electrical_type=str(pin.raw[1]),
            ))
    for item in sub.raw:
        if _head(item) in _GRAPHIC_KINDS:
            unit.graphics.append(_graphic(item))
    return unit


def _extract_definitions(sch: SkipSchematic) -> list[Definition]:
    definitions = []
    seen_libs: set[str] = set()
    for sym in _collection(sch, "symbol"):
        lib_id = sym.lib_id.value
        if lib_id in seen_libs:
            continue
        seen_libs.add(lib_id)
        lib_sym = _lib_symbol(sch, lib_id)
        if lib_sym is None:
            logger.warning("no lib_symbols entry for %s", lib_id)
            continue
        definition = Definition(
            name=lib_id,
            power=_child(lib_sym.raw, "power") is not None,
        )
        for sub in lib_sym.symbol:
            definition.units.append(_extract_unit(sub))
        definitions.append(definition)
    return definitions


def _mirror(sym) -> str:
    if not hasattr(sym, "mirror") or sym.mirror is None:
        return ""
    mval = sym.mirror.value
    if hasattr(mval, "value"):
        mval = mval.value()
    return str(mval)


def _extract_instance(sym) -> Instance:
    at = sym.at.value
    angle = float(at[2]) if len(at) > 2 else 0.0
    props = {prop.name: str(prop.value) for prop in sym.property}
    return Instance(
        lib_id=sym.lib_id.value,
        unit=int(sym.unit.value),
        placement=Placement(position=_xy(at), angle=angle, mirror=_mirror(sym)),
        properties=props,
    )
