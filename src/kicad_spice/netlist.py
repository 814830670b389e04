from __future__ import annotations

from pathlib import Path

from kicad_spice.emitter import emit
from kicad_spice.ingest import Ingestion
from kicad_spice.models import Netlist, Schematic
from kicad_spice.parser import parse_schematic


def build_netlist(schematic: Schematic) -> Netlist:
    ingestion = Ingestion().feed(schematic.elements)
    lines = emit(ingestion.graph, ingestion.library, ingestion.groups)
    return Netlist(
        lines=lines,
        nets=list(ingestion.graph.nets),
        point_counts=ingestion.graph.point_counts(),
    )


def netlist_from_file(path: str | Path) -> Netlist:
    return build_netlist(parse_schematic(path))
