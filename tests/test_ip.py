import ipaddress

import pytest

from netwagon.ip import (
    IP_PROTO_ICMP,
    IP_PROTO_ICMPV6,
    IP_PROTO_TCP,
    IP_PROTO_UDP,
    IPV4_HEADER_SIZE,
    IPV6_HEADER_SIZE,
    IpVersion,
    ProtocolType,
    ipv4_header,
    ipv6_header,
    pseudo_header_v4,
    pseudo_header_v6,
)


@pytest.mark.parametrize(
    "protocol, expected",
    [(IP_PROTO_ICMP, 1), (IP_PROTO_TCP, 6), (IP_PROTO_UDP, 17), (IP_PROTO_ICMPV6, 58)],
)
def test_protocol_number_written_into_headers(protocol, expected):
    header = ipv4_header(40, 1, protocol, "10.0.0.1", "10.0.0.2")
    assert header[9] == expected
    v6 = ipv6_header(8, protocol, "::1", "::2")
    assert v6[6] == expected


def test_enums_lookup():
    assert IpVersion(4) is IpVersion.V4
    assert IpVersion(6) is IpVersion.V6
    assert ProtocolType("tcp") is ProtocolType.TCP


def test_ipv4_header_layout():
    header = ipv4_header(60, 0x1234, IP_PROTO_TCP, "10.0.0.1", "192.168.1.2")
    assert len(header) == IPV4_HEADER_SIZE
    assert header[0] == 0x45
    assert header[1] == 0
    assert int.from_bytes(header[2:4], "big") == 60
    assert int.from_bytes(header[4:6], "big") == 0x1234
    assert header[6:8] == b"\x40\x00"
    assert header[8] == 64
    assert header[9] == IP_PROTO_TCP
    assert header[10:12] == b"\x00\x00"
    assert header[12:16] == ipaddress.IPv4Address("10.0.0.1").packed
    assert header[16:20] == ipaddress.IPv4Address("192.168.1.2").packed


def test_ipv4_header_truncates_fields():
    header = ipv4_header(0x10000 + 28, 0x1ABCD, IP_PROTO_UDP, "1.2.3.4", "5.6.7.8")
    assert int.from_bytes(header[2:4], "big") == 28
    assert int.from_bytes(header[4:6], "big") == 0xABCD


def test_ipv6_header_layout():
    header = ipv6_header(28, IP_PROTO_UDP, "2001:db8::1", "2001:db8::2")
    assert len(header) == IPV6_HEADER_SIZE
    assert header[:4] == b"\x60\x00\x00\x00"
    assert int.from_bytes(header[4:6], "big") == 28
    assert header[6] == IP_PROTO_UDP
    assert header[7] == 64
    assert header[8:24] == ipaddress.IPv6Address("2001:db8::1").packed
    assert header[24:40] == ipaddress.IPv6Address("2001:db8::2").packed


def test_pseudo_header_v4_layout():
    pseudo = pseudo_header_v4("10.0.0.1", "10.0.0.2", IP_PROTO_TCP, 25)
    assert len(pseudo) == 12
    assert pseudo[:4] == ipaddress.IPv4Address("10.0.0.1").packed
    assert pseudo[4:8] == ipaddress.IPv4Address("10.0.0.2").packed
    assert pseudo[8] == 0
    assert pseudo[9] == IP_PROTO_TCP
    assert int.from_bytes(pseudo[10:12], "big") == 25


def test_pseudo_header_v6_layout():
    pseudo = pseudo_header_v6("::1", "fe80::1", IP_PROTO_ICMPV6, 13)
    assert len(pseudo) == 40
    assert pseudo[:16] == ipaddress.IPv6Address("::1").packed
    assert pseudo[16:32] == ipaddress.IPv6Address("fe80::1").packed
    assert int.from_bytes(pseudo[32:36], "big") == 13
    assert pseudo[36:39] == b"\x00\x00\x00"
    assert pseudo[39] == IP_PROTO_ICMPV6


@pytest.mark.parametrize("bad", ["300.1.1.1", "not-an-ip", "::1", None])
def test_ipv4_header_rejects_bad_address(bad):
    with pytest.raises(ValueError):
        ipv4_header(40, 1, IP_PROTO_TCP, bad, "10.0.0.1")


@pytest.mark.parametrize("bad", ["10.0.0.1", "gggg::1", None])
def test_ipv6_header_rejects_bad_address(bad):
    with pytest.raises(ValueError):
        ipv6_header(8, IP_PROTO_UDP, "::1", bad)