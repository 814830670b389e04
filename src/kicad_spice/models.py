from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from kicad_spice.geometry import Placement, Point


@dataclass
class Pin:
    number: str
    position: tuple[float, float]
    electrical_type: str = ""


@dataclass
class Graphic:
    """A drawing primitive of a library unit, in local coordinates."""

    kind: str
    points: list[tuple[float, float]] = field(default_factory=list)


@dataclass
class Unit:
    """One ``Name_U_S`` sub-symbol. Unit 0 is shared by every unit."""

    number: int
    pins: list[Pin] = field(default_factory=list)
    graphics: list[Graphic] = field(default_factory=list)


@dataclass
class Definition:
    name: str
    units: list[Unit] = field(default_factory=list)
    power: bool = False


@dataclass
class Instance:
    lib_id: str
    unit: int
    placement: Placement
    properties: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.properties.get(key)

    @property
    def reference(self) -> str | None:
        return self.properties.get("Reference")

    @property
    def value(self) -> str | None:
        return self.properties.get("Value")


@dataclass
class Wire:
    start: tuple[float, float]
    end: tuple[float, float]


@dataclass
class Label:
    text: str
    at: tuple[float, float]


@dataclass
class GlobalLabel:
    text: str
    at: tuple[float, float]


@dataclass
class NoConnect:
    at: tuple[float, float]


@dataclass
class LibraryStart:
    pass


@dataclass
class LibraryEnd:
    pass


Element = Union[Definition, Instance, Wire, Label, GlobalLabel, NoConnect, LibraryStart, LibraryEnd]


@dataclass
class Net:
    identifier: str | None
    kind: str
    point: Point


@dataclass
class Schematic:
    elements: list[Element]
    path: str | None = None


@dataclass
class Netlist:
    lines: list[str]
    nets: list[Net] = field(default_factory=list)
    point_counts: list[int] = field(default_factory=list)
