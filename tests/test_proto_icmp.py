import struct

import pytest

from netwagon.ip import IpVersion, ProtocolType, pseudo_header_v6
from netwagon.packet import calculate_checksum
from netwagon.proto_icmp import ICMP_HEADER_SIZE, create_icmp_packet


def test_ipv4_length_and_protocol():
    pkt = create_icmp_packet(IpVersion.V4, "10.0.0.1", "10.0.0.2", 8, 0, 1, 2, b"ping")
    assert pkt.length == 20 + ICMP_HEADER_SIZE + 4
    assert pkt.protocol is ProtocolType.ICMP
    assert pkt.ip_version is IpVersion.V4


def test_ipv4_header_fields():
    pkt = create_icmp_packet(IpVersion.V4, "10.0.0.1", "10.0.0.2", 8, 3, 7, 9, b"abc")
    ip = pkt.data[:20]
    assert ip[0] == 0x45
    assert ip[9] == 1
    assert struct.unpack("!H", ip[2:4])[0] == pkt.length
    assert ip[12:16] == bytes([10, 0, 0, 1])
    assert ip[16:20] == bytes([10, 0, 0, 2])
    assert calculate_checksum(ip) == 0


def test_ipv4_icmp_fields_and_checksum():
    payload = b"hello!"
    pkt = create_icmp_packet(IpVersion.V4, "10.0.0.1", "10.0.0.2", 8, 0, 0x1234, 5, payload)
    icmp = pkt.data[20:]
    icmp_type, code, _, ident, seq = struct.unpack("!BBHHH", icmp[:8])
    assert (icmp_type, code, ident, seq) == (8, 0, 0x1234, 5)
    assert icmp[8:] == payload
    assert calculate_checksum(icmp) == 0


def test_ipv4_odd_payload_checksum_valid():
    pkt = create_icmp_packet(IpVersion.V4, "192.168.1.1", "192.168.1.2", 0, 0, 0, 0, b"odd")
    assert calculate_checksum(pkt.data[20:]) == 0


def test_ipv6_packet():
    payload = b"v6 data"
    pkt = create_icmp_packet(IpVersion.V6, "::1", "2001:db8::2", 128, 0, 1, 1, payload)
    assert pkt.protocol is ProtocolType.ICMPV6
    assert pkt.length == 40 + ICMP_HEADER_SIZE + len(payload)
    ip = pkt.data[:40]
    assert ip[0] >> 4 == 6
    assert ip[6] == 58
    assert ip[7] == 64
    assert struct.unpack("!H", ip[4:6])[0] == ICMP_HEADER_SIZE + len(payload)
    icmp = pkt.data[40:]
    assert icmp[0] == 128
    pseudo = pseudo_header_v6("::1", "2001:db8::2", 58, len(icmp))
    assert calculate_checksum(pseudo + icmp) == 0


def test_empty_payload():
    pkt = create_icmp_packet(IpVersion.V4, "1.2.3.4", "5.6.7.8", 8)
    assert pkt.length == 28
    assert calculate_checksum(pkt.data[20:]) == 0


def test_invalid_address_raises():
    with pytest.raises(ValueError):
        create_icmp_packet(IpVersion.V4, "not-an-ip", "10.0.0.2", 8)