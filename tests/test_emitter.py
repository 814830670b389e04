import logging

import pytest

from kicad_spice.emitter import device_line, emit, finalize, is_active, pin_sequence
from kicad_spice.exceptions import FieldError, MissingPinError, PinSequenceError
from kicad_spice.geometry import Point
from kicad_spice.graph import ConnectivityGraph
from kicad_spice.ingest import Ingestion
from kicad_spice.models import Definition, Label, LibraryEnd, LibraryStart, Pin, Unit, Wire

from helpers import ground, place, resistor


def _run(*elements, library=(resistor(), ground())):
    ingestion = Ingestion().feed([LibraryStart(), *library, LibraryEnd(), *elements])
    return emit(ingestion.graph, ingestion.library, ingestion.groups)


def _divider_wires():
    return [Wire((100, 46.19), (100, 40)), Wire((100, 53.81), (100, 60))]


def test_finalize_numbers_in_creation_order():
    graph = ConnectivityGraph()
    graph.touch(Point.from_float(0, 0))
    graph.touch(Point.from_float(1, 0), identifier="VCC")
    graph.touch(Point.from_float(2, 0))
    assert finalize(graph) == 2
    assert [n.identifier for n in graph.nets] == ["1", "VCC", "2"]
    assert finalize(graph) == 0


def test_two_disjoint_wires():
    ingestion = Ingestion().feed([Wire((0, 0), (10, 0)), Wire((0, 20), (10, 20))])
    finalize(ingestion.graph)
    assert [n.identifier for n in ingestion.graph.nets] == ["1", "2"]


def test_resistor_line():
    lines = _run(*_divider_wires(), place("Device:R", (100, 50), Reference="R1", Value="10k"))
    assert lines == ["R1 1 2 10k"]


def test_node_sequence_override():
    lines = _run(
        *_divider_wires(),
        place("Device:R", (100, 50), Reference="R1", Value="10k", Spice_Node_Sequence="1 0"),
    )
    assert lines == ["R1 2 1 10k"]


def test_labels_and_power_in_line():
    lines = _run(
        *_divider_wires(),
        Label("VIN", (100, 40)),
        place("Device:R", (100, 50), Reference="R1", Value="10k"),
        place("power:GND", (100, 60), Reference="#PWR01", Value="GND"),
    )
    assert lines == ["R1 VIN GND 10k"]


def test_subcircuit_line():
    lines = _run(
        *_divider_wires(),
        place("Device:R", (100, 50), Reference="U1", Value="opamp", Spice_Primitive="X", Spice_Model="tl072"),
    )
    assert lines == ["XU1 - 1 2 - tl072"]


def test_other_primitive_line():
    lines = _run(
        *_divider_wires(),
        place("Device:R", (100, 50), Reference="1", Value="dc 5", Spice_Primitive="V"),
    )
    assert lines == ["V1 - - dc 5"]


def test_disabled_and_power_references_skipped():
    lines = _run(
        place("Device:R", (0, 0), Reference="R1", Value="1k", Spice_Netlist_Enabled="N"),
        place("Device:R", (20, 0), Reference="R2", Value="2k", Spice_Netlist_Enabled="Y"),
        place("power:GND", (40, 0), Reference="#PWR01", Value="GND"),
    )
    assert lines == ["R2 3 4 2k"]


def test_is_active():
    assert is_active("R1", place("Device:R", (0, 0)))
    assert not is_active("#FLG01", place("Device:R", (0, 0)))
    assert not is_active("R1", place("Device:R", (0, 0), Spice_Netlist_Enabled="N"))


def test_pin_sequence_default():
    assert pin_sequence(place("Device:R", (0, 0)), 3) == [0, 1, 2]


def test_pin_sequence_whitespace():
    inst = place("Device:R", (0, 0), Spice_Node_Sequence=" 2  0\t1 ")
    assert pin_sequence(inst, 3) == [2, 0, 1]


def test_pin_sequence_garbage():
    inst = place("Device:R", (0, 0), Reference="Q1", Spice_Node_Sequence="1 b 0")
    with pytest.raises(PinSequenceError):
        pin_sequence(inst, 3)


def test_sequence_beyond_library_pins():
    with pytest.raises(MissingPinError):
        _run(place("Device:R", (0, 0), Reference="R1", Value="1k", Spice_Node_Sequence="0 5"))


def test_subcircuit_without_model():
    with pytest.raises(FieldError):
        _run(place("Device:R", (0, 0), Reference="U1", Value="x", Spice_Primitive="X"))


def test_unconnected_pin_is_nan(caplog):
    ingestion = Ingestion().feed([LibraryStart(), resistor(), LibraryEnd()])
    inst = place("Device:R", (0, 0), Reference="R1", Value="1k")
    with caplog.at_level(logging.WARNING, logger="kicad_spice.emitter"):
        line = device_line(ingestion.graph, ingestion.library, "R1", [inst])
    assert line == "R1 NaN NaN 1k"
    assert "not on any net" in caplog.text


def test_multi_unit_pins_use_matching_placement():
    dual = Definition(
        name="Amplifier_Operational:LM358",
        units=[
            Unit(1, pins=[Pin("1", (-2.54, 0), "output")]),
            Unit(2, pins=[Pin("2", (-2.54, 0), "output")]),
        ],
    )
    lines = _run(
        Label("A", (7.46, 10)),
        Label("B", (27.46, 10)),
        place("Amplifier_Operational:LM358", (30, 10), unit=2, Reference="U1", Value="LM358"),
        place("Amplifier_Operational:LM358", (10, 10), unit=1, Reference="U1", Value="LM358"),
        library=(dual,),
    )
    assert lines == ["U1 A B LM358"]


def test_shared_unit_pin_uses_first_placement():
    part = Definition(
        name="Custom:Part",
        units=[Unit(0, pins=[Pin("1", (0, 0), "power_in")]), Unit(1, pins=[Pin("2", (1, 0), "input")])],
    )
    lines = _run(
        Label("VDD", (5, 5)),
        place("Custom:Part", (5, 5), Reference="U7", Value="part"),
        library=(part,),
    )
    assert lines == ["U7 VDD 1 part"]


def test_pin_sequence_blank():
    inst = place("Device:R", (0, 0), Reference="R1", Spice_Node_Sequence="  ")
    with pytest.raises(PinSequenceError):
        pin_sequence(inst, 2)


def test_blank_sequence_fails_emission():
    with pytest.raises(PinSequenceError):
        _run(place("Device:R", (0, 0), Reference="R1", Value="1k", Spice_Node_Sequence=""))
