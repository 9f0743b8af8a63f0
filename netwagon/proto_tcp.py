"""Construction of TCP segments over IPv4 or IPv6."""

from __future__ import annotations

import enum
import random
import struct

from netwagon.ip import (
    IP_PROTO_TCP,
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

TCP_HEADER_SIZE = 20
TCP_WINDOW_SIZE = 5840
_TCP_CHECKSUM_OFFSET = 16
_TCP = struct.Struct("!HHIIHHHH")


class TcpFlags(enum.IntFlag):
    """TCP control bits."""

    FIN = 0x01
    SYN = 0x02
    RST = 0x04
    PSH = 0x08
    ACK = 0x10
    URG = 0x20


def _with_checksum(buffer: bytes, offset: int, checksum: int) -> bytes:
    return buffer[:offset] + struct.pack("!H", checksum) + buffer[offset + 2 :]


def create_tcp_packet(
    ip_version: IpVersion,
    src_ip: str,
    dst_ip: str,
    src_port: int,
    dst_port: int,
    seq_num: int = 0,
    ack_num: int = 0,
    flags: int = 0,
    payload: bytes = b"",
) -> Packet:
    """Build an IP packet carrying a TCP segment with valid checksums."""
    ip_version = IpVersion(ip_version)
    payload = bytes(payload)
    segment_length = TCP_HEADER_SIZE + len(payload)

    header = _TCP.pack(
        src_port & 0xFFFF,
        dst_port & 0xFFFF,
        seq_num & 0xFFFFFFFF,
        ack_num & 0xFFFFFFFF,
        (5 << 12) | (int(flags) & 0xFF),
        TCP_WINDOW_SIZE,
        0,
        0,
    )

    if ip_version is IpVersion.V4:
        ip_header = ipv4_header(
            IPV4_HEADER_SIZE + segment_length,
            random.getrandbits(16),
            IP_PROTO_TCP,
            src_ip,
            dst_ip,
        )
        ip_header = _with_checksum(
            ip_header, IPV4_CHECKSUM_OFFSET, calculate_checksum(ip_header)
        )
        pseudo = pseudo_header_v4(src_ip, dst_ip, IP_PROTO_TCP, segment_length)
    else:
        ip_header = ipv6_header(segment_length, IP_PROTO_TCP, src_ip, dst_ip)
        pseudo = pseudo_header_v6(src_ip, dst_ip, IP_PROTO_TCP, segment_length)

    header = _with_checksum(
        header, _TCP_CHECKSUM_OFFSET, calculate_checksum(pseudo + header + payload)
    )
    return Packet(ip_header + header + payload, ip_version, ProtocolType.TCP)