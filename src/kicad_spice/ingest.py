from __future__ import annotations

import enum
import logging
from collections.abc import Iterable

from kicad_spice.exceptions import TraversalError
from kicad_spice.geometry import Point, transform_point
from kicad_spice.graph import ConnectivityGraph
from kicad_spice.library import LibraryIndex
from kicad_spice.models import (
    Definition,
    Element,
    GlobalLabel,
    Instance,
    Label,
    LibraryEnd,
    LibraryStart,
    NoConnect,
    Wire,
)

logger = logging.getLogger(__name__)

NC_IDENTIFIER = "NC"
NC_KIND = "no_connect"


class Section(enum.Enum):
    DESIGN = "design"
    LIBRARY = "library"


class Ingestion:
    """Builds the connectivity graph and reference groups from a sheet.

    Elements must arrive in document order: labels, power symbols and
    no-connect markers overwrite whatever identifier a net carried
    before, so the last write to a net wins.
    """

    def __init__(self):
        self.graph = ConnectivityGraph()
        self.library = LibraryIndex()
        self.groups: dict[str, list[Instance]] = {}
        self.section = Section.DESIGN

    def enter_library(self):
        if self.section is not Section.DESIGN:
            raise TraversalError("lib_symbols section opened twice")
        self.section = Section.LIBRARY

    def leave_library(self):
        if self.section is not Section.LIBRARY:
            raise TraversalError("lib_symbols section closed without being opened")
        self.section = Section.DESIGN

    def feed(self, elements: Iterable[Element]) -> Ingestion:
        for element in elements:
            self.visit(element)
        return self

    def visit(self, element: Element):
        if isinstance(element, LibraryStart):
            self.enter_library()
        elif isinstance(element, LibraryEnd):
            self.leave_library()
        elif isinstance(element, Definition):
            self._require(Section.LIBRARY, element)
            self.library.register(element)
        else:
            self._require(Section.DESIGN, element)
            handler = self._handlers.get(type(element))
            if handler is None:
                raise TraversalError("unsupported element", context={"element": type(element).__name__})
            handler(self, element)

    def _require(self, section: Section, element: Element):
        if self.section is not section:
            raise TraversalError(
                f"{type(element).__name__} outside the {section.value} section",
                context={"section": self.section.value},
            )

    def _instance(self, inst: Instance):
        definition = self.library.get(inst.lib_id)
        identifier = inst.value if definition.power else None

        for unit in self.library.units(inst.lib_id, inst.unit):
            for pin in unit.pins:
                point = transform_point(inst.placement, pin.position)
                index = self.graph.lookup(point)
                if index is None:
                    self.graph.touch(point, identifier=identifier, kind=pin.electrical_type)
                    continue
                self.graph.set_kind(index, pin.electrical_type)
                if identifier is not None:
                    self.graph.set_identifier(index, identifier)

        reference = inst.reference
        if reference is None:
            logger.warning("symbol %s at %s has no Reference, skipped", inst.lib_id, inst.placement.position)
            return
        self.groups.setdefault(reference, []).append(inst)

    def _wire(self, wire: Wire):
        self.graph.connect(Point.from_float(*wire.start), Point.from_float(*wire.end))

    def _label(self, label: Label | GlobalLabel):
        self._name(Point.from_float(*label.at), label.text)

    def _name(self, point: Point, text: str):
        index = self.graph.lookup(point)
        if index is None:
            self.graph.touch(point, identifier=text)
        else:
            self.graph.set_identifier(index, text)

    def _no_connect(self, marker: NoConnect):
        point = Point.from_float(*marker.at)
        index = self.graph.lookup(point)
        if index is None:
            self.graph.touch(point, identifier=NC_IDENTIFIER, kind=NC_KIND)
            return
        self.graph.set_identifier(index, NC_IDENTIFIER)
        self.graph.set_kind(index, NC_KIND)

    _handlers = {
        Instance: _instance,
        Wire: _wire,
        Label: _label,
        GlobalLabel: _label,
        NoConnect: _no_connect,
    }
