"""Command that turns a JSON template file into a pcap capture."""

from __future__ import annotations

import sys

from netwagon.packet import PacketList
from netwagon.pcap_writer import DEFAULT_SNAPLEN, DLT_EN10MB, PcapWriter
from netwagon.reader import TemplateError, load_templates_from_json

_PROG = "generator"


def _print_usage() -> None:
    print(f"Usage: {_PROG} <templates.json> [output.pcap]")
    print("  <templates.json>   JSON template file")
    print("  [output.pcap]      Optional output pcap filename (default: output.pcap)")
    print("Options:")
    print("  -h, --help         Display this help and exit")


def main(argv: list[str] | None = None) -> int:
    """Build packets from templates and write them to a pcap file."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        _print_usage()
        return 1
    if args[0] in ("-h", "--help"):
        _print_usage()
        return 0

    json_file = args[0]
    output_file = args[1] if len(args) >= 2 else "output.pcap"

    try:
        packets = load_templates_from_json(json_file)
    except TemplateError as exc:
        print(exc, file=sys.stderr)
        packets = PacketList()

    try:
        with PcapWriter(output_file, DEFAULT_SNAPLEN, DLT_EN10MB) as writer:
            written = writer.write_packets(packets)
    except OSError:
        print(f"Error creating pcap '{output_file}'", file=sys.stderr)
        return 1

    print(f"Wrote {written} packets to '{output_file}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())