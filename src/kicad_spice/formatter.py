from kicad_spice.models import Netlist

DEFAULT_TITLE = "KiCad schematic"


def format_deck(lines: list[str], title: str = DEFAULT_TITLE) -> str:
    deck = [f".title {title}", *lines, ".end"]
    return "\n".join(deck) + "\n"


def format_nets(netlist: Netlist) -> str:
    counts = netlist.point_counts or [0] * len(netlist.nets)
    rows = [(net.identifier or "", net.kind or "-", count) for net, count in zip(netlist.nets, counts)]
    id_width = max(len("Net"), max((len(r[0]) for r in rows), default=0))
    kind_width = max(len("Kind"), max((len(r[1]) for r in rows), default=0))
    lines = [f"{'Net':<{id_width}}  {'Kind':<{kind_width}}  Points"]
    for identifier, kind, count in rows:
        lines.append(f"{identifier:<{id_width}}  {kind:<{kind_width}}  {count}")
    return "\n".join(lines) + "\n"


def format_summary(netlist: Netlist) -> str:
    named = sorted({n.identifier for n in netlist.nets if n.identifier and not n.identifier.isdigit()})
    lines = [
        f"Components: {len(netlist.lines)}",
        f"Nets: {len(netlist.nets)}",
        "",
        "Named nets: " + ", ".join(named) if named else "Named nets: (none)",
    ]
    return "\n".join(lines) + "\n"
