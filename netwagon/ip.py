"""IP header layouts, pseudo-headers and protocol identifiers."""

from __future__ import annotations

import enum
import ipaddress
import struct

IP_PROTO_ICMP = 1
IP_PROTO_TCP = 6
IP_PROTO_UDP = 17
IP_PROTO_ICMPV6 = 58

IPV4_HEADER_SIZE = 20
IPV6_HEADER_SIZE = 40
PSEUDO_HEADER_V4_SIZE = 12
PSEUDO_HEADER_V6_SIZE = 40

DEFAULT_TTL = 64
IPV4_DONT_FRAGMENT = 0x4000
IPV4_CHECKSUM_OFFSET = 10

_IPV4 = struct.Struct("!BBHHHBBH4s4s")
_IPV6 = struct.Struct("!IHBB16s16s")
_PSEUDO_V4 = struct.Struct("!4s4sBBH")
_PSEUDO_V6 = struct.Struct("!16s16sI3xB")


class ProtocolType(enum.Enum):
    """Transport protocol carried by a packet."""

    TCP = "tcp"
    UDP = "udp"
    ICMP = "icmp"
    ICMPV6 = "icmpv6"


class IpVersion(enum.Enum):
    """IP version of a packet."""

    V4 = 4
    V6 = 6


def _ipv4_bytes(address: str) -> bytes:
    try:
        return ipaddress.IPv4Address(address).packed
    except ValueError as exc:
        raise ValueError(f"invalid IPv4 address: {address!r}") from exc


def _ipv6_bytes(address: str) -> bytes:
    try:
        return ipaddress.IPv6Address(address).packed
    except ValueError as exc:
        raise ValueError(f"invalid IPv6 address: {address!r}") from exc


def ipv4_header(
    total_length: int, identification: int, protocol: int, src_ip: str, dst_ip: str
) -> bytes:
    """Build a 20-byte IPv4 header with the don't-fragment bit set.

    The header checksum field is left as zero.
    """
    return _IPV4.pack(
        (4 << 4) | 5,
        0,
        total_length & 0xFFFF,
        identification & 0xFFFF,
        IPV4_DONT_FRAGMENT,
        DEFAULT_TTL,
        protocol & 0xFF,
        0,
        _ipv4_bytes(src_ip),
        _ipv4_bytes(dst_ip),
    )


def ipv6_header(payload_length: int, next_header: int, src_ip: str, dst_ip: str) -> bytes:
    """Build a 40-byte IPv6 header with zero traffic class and flow label."""
    return _IPV6.pack(
        6 << 28,
        payload_length & 0xFFFF,
        next_header & 0xFF,
        DEFAULT_TTL,
        _ipv6_bytes(src_ip),
        _ipv6_bytes(dst_ip),
    )


def pseudo_header_v4(src_ip: str, dst_ip: str, protocol: int, length: int) -> bytes:
    """Build the IPv4 pseudo-header used in transport checksums."""
    return _PSEUDO_V4.pack(
        _ipv4_bytes(src_ip), _ipv4_bytes(dst_ip), 0, protocol & 0xFF, length & 0xFFFF
    )


def pseudo_header_v6(src_ip: str, dst_ip: str, next_header: int, length: int) -> bytes:
    """Build the IPv6 pseudo-header used in transport checksums."""
    return _PSEUDO_V6.pack(
        _ipv6_bytes(src_ip), _ipv6_bytes(dst_ip), length & 0xFFFFFFFF, next_header & 0xFF
    )