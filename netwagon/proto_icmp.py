"""Construction of ICMP and ICMPv6 messages over IPv4 or IPv6."""

from __future__ import annotations

import random
import struct

from netwagon.ip import (
    IP_PROTO_ICMP,
    IP_PROTO_ICMPV6,
    IPV4_CHECKSUM_OFFSET,
    IPV4_HEADER_SIZE,
    IpVersion,
    ProtocolType,
    ipv4_header,
    ipv6_header,
    pseudo_header_v6,
)
from netwagon.packet import Packet, calculate_checksum

ICMP_HEADER_SIZE = 8
_ICMP_CHECKSUM_OFFSET = 2
_ICMP = struct.Struct("!BBHHH")


def _with_checksum(buffer: bytes, offset: int, checksum: int) -> bytes:
    return buffer[:offset] + struct.pack("!H", checksum) + buffer[offset + 2 :]


def create_icmp_packet(
    ip_version: IpVersion,
    src_ip: str,
    dst_ip: str,
    icmp_type: int,
    code: int = 0,
    identifier: int = 0,
    sequence: int = 0,
    payload: bytes = b"",
) -> Packet:
    """Build an IP packet carrying an ICMP (IPv4) or ICMPv6 (IPv6) message.

    The ICMP checksum covers the message alone over IPv4 and includes the
    IPv6 pseudo-header over IPv6. The IPv4 header checksum is filled in.
    """
    ip_version = IpVersion(ip_version)
    payload = bytes(payload)
    message_length = ICMP_HEADER_SIZE + len(payload)

    header = _ICMP.pack(
        icmp_type & 0xFF,
        code & 0xFF,
        0,
        identifier & 0xFFFF,
        sequence & 0xFFFF,
    )

    if ip_version is IpVersion.V4:
        ip_header = ipv4_header(
            IPV4_HEADER_SIZE + message_length,
            random.getrandbits(16),
            IP_PROTO_ICMP,
            src_ip,
            dst_ip,
        )
        header = _with_checksum(
            header, _ICMP_CHECKSUM_OFFSET, calculate_checksum(header + payload)
        )
        ip_header = _with_checksum(
            ip_header, IPV4_CHECKSUM_OFFSET, calculate_checksum(ip_header)
        )
        protocol = ProtocolType.ICMP
    else:
        ip_header = ipv6_header(message_length, IP_PROTO_ICMPV6, src_ip, dst_ip)
        pseudo = pseudo_header_v6(src_ip, dst_ip, IP_PROTO_ICMPV6, message_length)
        header = _with_checksum(
            header, _ICMP_CHECKSUM_OFFSET, calculate_checksum(pseudo + header + payload)
        )
        protocol = ProtocolType.ICMPV6

    return Packet(ip_header + header + payload, ip_version, protocol)