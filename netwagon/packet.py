"""Packets, packet lists, the Internet checksum and Ethernet framing."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass

from netwagon.ip import IpVersion, ProtocolType

ETHERNET_HEADER_SIZE = 14
DEFAULT_DST_MAC = bytes([0xAA, 0xBB, 0xCC, 0xDD, 0xEE, 0xFF])
DEFAULT_SRC_MAC = bytes([0x11, 0x22, 0x33, 0x44, 0x55, 0x66])
ETHERTYPE_IPV4 = 0x0800
ETHERTYPE_IPV6 = 0x86DD


@dataclass
class Packet:
    """A generated frame together with its IP version and protocol."""

    data: bytes
    ip_version: IpVersion
    protocol: ProtocolType

    @property
    def length(self) -> int:
        return len(self.data)


def calculate_checksum(data: bytes) -> int:
    """Return the 16-bit ones' complement Internet checksum of ``data``.

    An odd trailing byte is treated as if padded with a zero byte. The
    result is meant to be stored in network byte order.
    """
    if len(data) % 2:
        data = bytes(data) + b"\x00"
    total = sum(word for (word,) in struct.iter_unpack("!H", data))
    while total >> 16:
        total = (total >> 16) + (total & 0xFFFF)
    return ~total & 0xFFFF


def add_ethernet_header(packet: Packet) -> None:
    """Prefix the packet's data with an Ethernet II header, in place."""
    ethertype = ETHERTYPE_IPV4 if packet.ip_version is IpVersion.V4 else ETHERTYPE_IPV6
    packet.data = (
        DEFAULT_DST_MAC + DEFAULT_SRC_MAC + struct.pack("!H", ethertype) + bytes(packet.data)
    )


class PacketList:
    """Ordered collection of Ethernet-framed packets."""

    def __init__(self) -> None:
        self._packets: list[Packet] = []

    def add(self, packet: Packet) -> None:
        """Frame the packet with an Ethernet header and append it."""
        add_ethernet_header(packet)
        self._packets.append(packet)

    def __iter__(self) -> Iterator[Packet]:
        return iter(self._packets)

    def __len__(self) -> int:
        return len(self._packets)