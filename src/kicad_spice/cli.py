import argparse
import logging
import sys

from kicad_spice.exceptions import NetlistError
from kicad_spice.formatter import DEFAULT_TITLE, format_deck, format_nets, format_summary
from kicad_spice.netlist import netlist_from_file


EXAMPLES = """\
Examples:
  kicad-spice netlist amp.kicad_sch                 SPICE deck on stdout
  kicad-spice netlist amp.kicad_sch -o amp.cir      write the deck to a file
  kicad-spice nets amp.kicad_sch                    every net with its kind
  kicad-spice summary amp.kicad_sch                 component and net counts
"""


def _configure_logging(verbose: bool, quiet: bool):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="kicad-spice",
        description="Convert a KiCad schematic into a SPICE netlist.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug diagnostics")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    subparsers = parser.add_subparsers(dest="command")

    netlist_parser = subparsers.add_parser(
        "netlist",
        help="Write the SPICE deck",
        description="Write one device line per component reference, wrapped in .title/.end.",
    )
    netlist_parser.add_argument("schematic", help="Path to .kicad_sch file")
    netlist_parser.add_argument("--title", default=DEFAULT_TITLE, help="Deck title line")
    netlist_parser.add_argument("-o", "--output", metavar="FILE", help="Write to FILE instead of stdout")

    nets_parser = subparsers.add_parser("nets", help="List nets with their identifiers and kinds")
    nets_parser.add_argument("schematic", help="Path to .kicad_sch file")

    summary_parser = subparsers.add_parser("summary", help="Component and net counts")
    summary_parser.add_argument("schematic", help="Path to .kicad_sch file")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose, args.quiet)

    try:
        netlist = netlist_from_file(args.schematic)
    except NetlistError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "nets":
        print(format_nets(netlist), end="")
        return

    if args.command == "summary":
        print(format_summary(netlist), end="")
        return

    deck = format_deck(netlist.lines, title=args.title)
    if args.output:
        with open(args.output, "w") as f:
            f.write(deck)
        return
    print(deck, end="")


if __name__ == "__main__":
    main()
