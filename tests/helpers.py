from kicad_spice.geometry import Placement
from kicad_spice.models import Definition, Graphic, Instance, Pin, Unit


def resistor(name="Device:R"):
    return Definition(
        name=name,
        units=[
            Unit(0, graphics=[Graphic("rectangle", [(-1.016, -2.54), (1.016, 2.54)])]),
            Unit(1, pins=[
                Pin("1", (0, 3.81), "passive"),
                Pin("2", (0, -3.81), "passive"),
            ]),
        ],
    )


def ground():
    return Definition(
        name="power:GND",
        units=[Unit(1, pins=[Pin("1", (0, 0), "power_in")])],
        power=True,
    )


def place(lib_id, at, unit=1, angle=0.0, mirror="", **props):
    return Instance(
        lib_id=lib_id,
        unit=unit,
        placement=Placement(position=at, angle=angle, mirror=mirror),
        properties=props,
    )
