"""Construction of UDP datagrams over IPv4 or IPv6."""

from __future__ import annotations

import random
import struct

from netwagon.ip import (
    IP_PROTO_UDP,
    IPV4_CHECKSUM_OFFSET,
    IPV4_HEADER_SIZE,
    IpVersion,
    ProtocolType,
    ipv4_header,
    ipv6_header,
    pseudo_header_v4,
    pseudo_header_v6,
)
from netwagon.packet import Packet, calculate_checksum

UDP_HEADER_SIZE = 8
_UDP_CHECKSUM_OFFSET = 6
_UDP = struct.Struct("!HHHH")


def _with_checksum(buffer: bytes, offset: int, checksum: int) -> bytes:
    return buffer[:offset] + struct.pack("!H", checksum) + buffer[offset + 2 :]


def create_udp_packet(
    ip_version: IpVersion,
    src_ip: str,
    dst_ip: str,
    src_port: int,
    dst_port: int,
    payload: bytes = b"",
) -> Packet:
    """Build an IP packet carrying a UDP datagram with valid checksums."""
    ip_version = IpVersion(ip_version)
    payload = bytes(payload)
    datagram_length = UDP_HEADER_SIZE + len(payload)

    header = _UDP.pack(src_port & 0xFFFF, dst_port & 0xFFFF, datagram_length & 0xFFFF, 0)

    if ip_version is IpVersion.V4:
        ip_header = ipv4_header(
            IPV4_HEADER_SIZE + datagram_length,
            random.getrandbits(16),
            IP_PROTO_UDP,
            src_ip,
            dst_ip,
        )
        ip_header = _with_checksum(
            ip_header, IPV4_CHECKSUM_OFFSET, calculate_checksum(ip_header)
        )
        pseudo = pseudo_header_v4(src_ip, dst_ip, IP_PROTO_UDP, datagram_length)
    else:
        ip_header = ipv6_header(datagram_length, IP_PROTO_UDP, src_ip, dst_ip)
        pseudo = pseudo_header_v6(src_ip, dst_ip, IP_PROTO_UDP, datagram_length)

    header = _with_checksum(
        header, _UDP_CHECKSUM_OFFSET, calculate_checksum(pseudo + header + payload)
    )
    return Packet(ip_header + header + payload, ip_version, ProtocolType.UDP)