"""Command that builds packets from templates and runs a TX/RX test."""

from __future__ import annotations

import getopt
import re
import sys

from netwagon.pcap_writer import DEFAULT_SNAPLEN, DLT_EN10MB, PcapWriter
from netwagon.reader import TemplateError, load_templates_from_json
from netwagon.txrx import DEFAULT_TIMEOUT_MS, TxRxError, txrx_run

_PROG = "netwagon"
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


def _print_usage() -> None:
    print(
        f"Usage: {_PROG} -f <templates.json> -r <iface_in> -s <iface_out> "
        "[-o <output.pcap>] [-t <timeout_ms>]"
    )
    print("  -f <file>   JSON template file (obrigatório)")
    print("  -r <iface>  Interface de captura (RX) (obrigatório)")
    print("  -s <iface>  Interface de envio (TX) (obrigatório)")
    print("  -o <file>   Opcional: filename para gravar pcap")
    print("  -t <ms>     Opcional: timeout RX em milissegundos (default=5000)")
    print("  -h          Exibe esta ajuda e sai")


def _parse_timeout(text: str) -> int:
    match = _LEADING_INT.match(text)
    value = int(match.group(1)) & 0xFFFFFFFF if match else 0
    return value or DEFAULT_TIMEOUT_MS


def main(argv: list[str] | None = None) -> int:
    """Load templates, optionally dump them to pcap, then run TX/RX."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options, _ = getopt.getopt(args, "f:r:s:o:t:h")
    except getopt.GetoptError as exc:
        print(exc, file=sys.stderr)
        _print_usage()
        return 1

    json_file = iface_in = iface_out = output_pcap = None
    timeout_ms = DEFAULT_TIMEOUT_MS
    for flag, value in options:
        if flag == "-h":
            _print_usage()
            return 0
        if flag == "-f":
            json_file = value
        elif flag == "-r":
            iface_in = value
        elif flag == "-s":
            iface_out = value
        elif flag == "-o":
            output_pcap = value
        elif flag == "-t":
            timeout_ms = _parse_timeout(value)

    if not json_file or not iface_in or not iface_out:
        print("Erro: parâmetros obrigatórios faltando.", file=sys.stderr)
        _print_usage()
        return 1

    try:
        packets = load_templates_from_json(json_file)
    except TemplateError as exc:
        print(exc, file=sys.stderr)
        print(f"Erro ao carregar JSON '{json_file}'", file=sys.stderr)
        return 1

    if output_pcap:
        try:
            with PcapWriter(output_pcap, DEFAULT_SNAPLEN, DLT_EN10MB) as writer:
                written = writer.write_packets(packets)
        except OSError:
            print(f"Erro criando pcap '{output_pcap}'", file=sys.stderr)
            return 1
        print(f"Gravou {written} pacotes em '{output_pcap}'")

    print(
        f"Iniciando TX/RX: TX iface='{iface_out}', RX iface='{iface_in}', "
        f"timeout={timeout_ms}ms"
    )
    try:
        txrx_run(packets, iface_out, iface_in, timeout_ms)
    except TxRxError as exc:
        print(exc, file=sys.stderr)
        print(f"Erro durante TX/RX ({exc})", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())