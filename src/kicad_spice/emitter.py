"""Netlist emission.

Unnamed nets get sequential numeric names, then every component
reference is written as one device line. Three line shapes exist,
selected by the ``Spice_Primitive`` property::

    R1 1 2 10k                 no primitive: reference, nets, value
    XU1 - 1 2 3 - opamp        subcircuit: nets between dashes, then model
    VV1 - - dc 5               any other primitive: value only
"""

from __future__ import annotations

import logging

from kicad_spice.exceptions import FieldError, MissingPinError, PinSequenceError
from kicad_spice.geometry import transform_point
from kicad_spice.graph import ConnectivityGraph
from kicad_spice.library import LibraryIndex
from kicad_spice.models import Instance, Pin

logger = logging.getLogger(__name__)

POWER_PREFIX = "#"
SUBCIRCUIT_PRIMITIVE = "X"
UNCONNECTED = "NaN"


def finalize(graph: ConnectivityGraph) -> int:
    """Name every unnamed net "1", "2", ... in creation order.

    Returns the number of nets named. Running it again names nothing.
    """
    counter = 0
    for index, net in enumerate(graph.nets):
        if net.identifier is None:
            counter += 1
            graph.set_identifier(index, str(counter))
    return counter


def pin_sequence(instance: Instance, pin_count: int) -> list[int]:
    """Zero-based pin order, either natural or from Spice_Node_Sequence."""
    override = instance.get("Spice_Node_Sequence")
    if override is None:
        return list(range(pin_count))
    context = {"reference": instance.reference, "sequence": override}
    try:
        sequence = [int(token) for token in override.split()]
    except ValueError:
        raise PinSequenceError("Spice_Node_Sequence is not a list of integers", context=context) from None
    if not sequence:
        raise PinSequenceError("Spice_Node_Sequence is empty", context=context)
    return sequence


def is_active(reference: str, instance: Instance) -> bool:
    if reference.startswith(POWER_PREFIX):
        return False
    return instance.get("Spice_Netlist_Enabled") != "N"


def _placement_for(instances: list[Instance], unit: int) -> Instance | None:
    """The placement a pin of library unit ``unit`` is drawn by.

    Shared pins (unit 0) belong to every placement and are taken from the
    first one. When several placements carry the same unit only the first
    counts, so each pin yields exactly one node. None means the unit was
    never placed; the caller writes the NaN sentinel for it.
    """
    if unit == 0:
        return instances[0]
    for inst in instances:
        if inst.unit == unit:
            return inst
    return None


def _resolve(
    graph: ConnectivityGraph,
    reference: str,
    instances: list[Instance],
    pin: Pin,
    unit: int,
) -> str:
    inst = _placement_for(instances, unit)
    if inst is None:
        logger.warning("%s: no placement of unit %d for pin %s", reference, unit, pin.number)
        return UNCONNECTED
    point = transform_point(inst.placement, pin.position)
    net = graph.net_at(point)
    if net is None:
        logger.warning("%s: pin %s at %r is not on any net", reference, pin.number, point)
        return UNCONNECTED
    return net.identifier


def node_names(
    graph: ConnectivityGraph,
    library: LibraryIndex,
    reference: str,
    instances: list[Instance],
) -> list[str]:
    first = instances[0]
    pins = library.pins(first.lib_id)
    names = []
    for seq in pin_sequence(first, len(pins)):
        number = seq + 1
        if number not in pins:
            raise MissingPinError(
                "pin not found in library symbol",
                context={"reference": reference, "lib_id": first.lib_id, "pin": number},
            )
        pin, unit = pins[number]
        names.append(_resolve(graph, reference, instances, pin, unit))
    return names


def _required(instance: Instance, reference: str, key: str) -> str:
    value = instance.get(key)
    if value is None:
        raise FieldError(f"{key} property missing", context={"reference": reference})
    return value


def device_line(
    graph: ConnectivityGraph,
    library: LibraryIndex,
    reference: str,
    instances: list[Instance],
) -> str:
    first = instances[0]
    nodes = node_names(graph, library, reference, instances)
    primitive = first.get("Spice_Primitive")
    if primitive is None:
        return " ".join([reference, *nodes, _required(first, reference, "Value")])
    if primitive == SUBCIRCUIT_PRIMITIVE:
        model = _required(first, reference, "Spice_Model")
        return " ".join([f"{primitive}{reference}", "-", *nodes, "-", model])
    # TODO: other primitives resolve their nodes but never write them; needs a
    # decision on the V/I source line shape before changing the output.
    return f"{primitive}{reference} - - {_required(first, reference, 'Value')}"


def emit(
    graph: ConnectivityGraph,
    library: LibraryIndex,
    groups: dict[str, list[Instance]],
) -> list[str]:
    finalize(graph)
    lines = []
    for reference, instances in groups.items():
        if not is_active(reference, instances[0]):
            logger.debug("skipping %s", reference)
            continue
        lines.append(device_line(graph, library, reference, instances))
    return lines
