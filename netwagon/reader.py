"""Building packet lists from JSON packet templates."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from netwagon.ip import IpVersion
from netwagon.packet import Packet, PacketList
from netwagon.proto_icmp import create_icmp_packet
from netwagon.proto_tcp import create_tcp_packet
from netwagon.proto_udp import create_udp_packet


class TemplateError(Exception):
    """Raised when a template file or template cannot be used."""


def _string(template: Any, key: str) -> str | None:
    if not isinstance(template, dict):
        return None
    value = template.get(key)
    return value if isinstance(value, str) else None


def _integer(template: Any, key: str) -> int:
    if not isinstance(template, dict):
        return 0
    value = template.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def _build(template: Any, payload: bytes) -> Packet:
    version = IpVersion.V6 if _string(template, "protocol_family") == "ipv6" else IpVersion.V4
    transport = _string(template, "transport_protocol")
    src_ip = _string(template, "src_ip")
    dst_ip = _string(template, "dst_ip")
    if src_ip is None or dst_ip is None:
        raise TemplateError("template needs string 'src_ip' and 'dst_ip'")
    src_port = _integer(template, "src_port")
    dst_port = _integer(template, "dst_port")

    try:
        if transport == "tcp":
            return create_tcp_packet(
                version,
                src_ip,
                dst_ip,
                src_port,
                dst_port,
                _integer(template, "tcp_seq") & 0xFFFFFFFF,
                _integer(template, "tcp_ack_seq") & 0xFFFFFFFF,
                _integer(template, "tcp_flags") & 0xFF,
                payload,
            )
        if transport == "icmp":
            return create_icmp_packet(
                version,
                src_ip,
                dst_ip,
                _integer(template, "icmp_type") & 0xFF,
                _integer(template, "icmp_code") & 0xFF,
                0,
                0,
                payload,
            )
        return create_udp_packet(version, src_ip, dst_ip, src_port, dst_port, payload)
    except ValueError as exc:
        raise TemplateError(str(exc)) from exc


def packets_from_templates(templates: Iterable[Any]) -> PacketList:
    """Expand templates into framed packets whose payloads start with ``<id>|``.

    IDs count up from 1 across all templates. Each template yields
    ``packet_count`` packets; the transport defaults to UDP and the family
    to IPv4.
    """
    if not isinstance(templates, list):
        raise TemplateError("template root must be a JSON array")

    packets = PacketList()
    next_id = 1
    for template in templates:
        count = _integer(template, "packet_count") & 0xFFFFFFFF
        text = (_string(template, "payload") or "").encode("utf-8")
        for _ in range(count):
            payload = f"{next_id}|".encode("ascii") + text
            next_id += 1
            packets.add(_build(template, payload))
    return packets


def load_templates_from_json(filename: str) -> PacketList:
    """Read a JSON array of templates from ``filename`` and build its packets."""
    try:
        with open(filename, encoding="utf-8") as handle:
            root = json.load(handle)
    except (OSError, ValueError) as exc:
        raise TemplateError(f"cannot open JSON '{filename}': {exc}") from exc
    return packets_from_templates(root)