import struct

import pytest

from netwagon.ip import IpVersion, ProtocolType
from netwagon.packet import Packet
from netwagon.pcap_writer import DLT_EN10MB, PcapWriter


def _read_pcap(path):
    raw = path.read_bytes()
    header = struct.unpack("=IHHiIII", raw[:24])
    records = []
    pos = 24
    while pos < len(raw):
        sec, usec, caplen, length = struct.unpack("=IIII", raw[pos : pos + 16])
        pos += 16
        records.append((sec, usec, caplen, length, raw[pos : pos + caplen]))
        pos += caplen
    return header, records


def _packet(data):
    return Packet(data, IpVersion.V4, ProtocolType.UDP)


def test_global_header(tmp_path):
    path = tmp_path / "out.pcap"
    with PcapWriter(str(path), 65535, DLT_EN10MB):
        pass
    header, records = _read_pcap(path)
    assert header == (0xA1B2C3D4, 2, 4, 0, 0, 65535, 1)
    assert records == []


def test_records_round_trip(tmp_path):
    path = tmp_path / "out.pcap"
    packets = [_packet(b"\x01\x02\x03"), _packet(b"abcdefgh"), _packet(b"z")]
    with PcapWriter(str(path), 65535, DLT_EN10MB) as writer:
        count = writer.write_packets(packets)
    assert count == 3
    _, records = _read_pcap(path)
    assert [r[4] for r in records] == [p.data for p in packets]
    for _, usec, caplen, length, data in records:
        assert caplen == length == len(data)
        assert 0 <= usec < 1_000_000


def test_write_single_packet(tmp_path):
    path = tmp_path / "one.pcap"
    writer = PcapWriter(str(path), 1500, 101)
    writer.write_packet(_packet(b"data"))
    writer.close()
    header, records = _read_pcap(path)
    assert header[5] == 1500
    assert header[6] == 101
    assert len(records) == 1
    assert records[0][4] == b"data"


def test_write_after_close_raises(tmp_path):
    writer = PcapWriter(str(tmp_path / "x.pcap"), 65535, DLT_EN10MB)
    writer.close()
    writer.close()
    assert writer.closed
    with pytest.raises(ValueError):
        writer.write_packet(_packet(b"x"))


def test_open_failure_raises(tmp_path):
    with pytest.raises(OSError):
        PcapWriter(str(tmp_path / "missing" / "x.pcap"), 65535, DLT_EN10MB)