# netwagon

netwagon builds test traffic from a JSON description. Each packet is a
complete Ethernet frame holding an IPv4 or IPv6 header and a TCP, UDP or
ICMP header, with correct checksums. The frames can be written to a pcap
file, or sent from one network interface and captured on another to
measure packet loss and per-packet latency.

It has no runtime dependencies beyond the Python standard library
(Python 3.10 or later).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Templates

A template file is a JSON array. Each element describes a batch of
identical packets:

```json
[
  {
    "protocol_family": "ipv4",
    "transport_protocol": "tcp",
    "src_ip": "192.0.2.10",
    "dst_ip": "192.0.2.20",
    "src_port": 40000,
    "dst_port": 80,
    "tcp_seq": 1000,
    "tcp_ack_seq": 0,
    "tcp_flags": 2,
    "payload": "Hello TCP!",
    "packet_count": 3
  },
  {
    "protocol_family": "ipv6",
    "transport_protocol": "udp",
    "src_ip": "2001:db8::1",
    "dst_ip": "2001:db8::2",
    "src_port": 5000,
    "dst_port": 5001,
    "payload": "Hello UDP!",
    "packet_count": 2
  },
  {
    "protocol_family": "ipv4",
    "transport_protocol": "icmp",
    "src_ip": "192.0.2.10",
    "dst_ip": "192.0.2.20",
    "icmp_type": 8,
    "icmp_code": 0,
    "payload": "ping",
    "packet_count": 1
  }
]
```

Fields:

| Field                | Meaning                                                      |
|----------------------|--------------------------------------------------------------|
| `protocol_family`    | `"ipv6"` for IPv6; anything else, or nothing, means IPv4     |
| `transport_protocol` | `"tcp"` or `"icmp"`; anything else, or nothing, means UDP    |
| `src_ip`, `dst_ip`   | source and destination addresses (required)                  |
| `src_port`, `dst_port` | ports for TCP and UDP                                      |
| `tcp_seq`, `tcp_ack_seq`, `tcp_flags` | TCP sequence, acknowledgement and flag bits |
| `icmp_type`, `icmp_code` | ICMP type and code                                       |
| `payload`            | payload text                                                 |
| `packet_count`       | how many packets to build from this template                 |

Missing or non-integer numeric fields count as 0, so a template without
`packet_count` builds no packets.

Every packet gets a unique number, counting from 1 across the whole file,
and its payload is prefixed with that number and a `|`: the first packet
above carries `1|Hello TCP!`. This is how sent and captured packets are
matched up.

All frames use the Ethernet source address `11:22:33:44:55:66` and
destination address `aa:bb:cc:dd:ee:ff`. IPv4 packets have TTL 64, the
don't-fragment bit and a random identification; IPv6 packets have hop
limit 64. ICMP over IPv6 is sent as ICMPv6.

## Writing a pcap file

```
netwagon-generator templates.json capture.pcap
```

The output file name defaults to `output.pcap`. The file uses the
Ethernet link type and can be opened in any pcap reader. If the template
file cannot be read, the error is printed and an empty capture is still
written.

## Measuring loss and latency

```
netwagon -f templates.json -s eth0 -r eth1 [-o capture.pcap] [-t 5000]
```

| Option | Meaning                                                     |
|--------|-------------------------------------------------------------|
| `-f`   | template file (required)                                    |
| `-s`   | interface the packets are sent from (required)              |
| `-r`   | interface the packets are captured on (required)            |
| `-o`   | also write the built packets to this pcap file              |
| `-t`   | how long to wait for packets, in milliseconds (default 5000; 0 or a non-number also means 5000) |
| `-h`   | show help                                                   |

Capture starts first (in promiscuous mode where possible), then the
packets are sent one by one with a 1 ms pause between them. The run ends
when every packet has been seen on the receiving interface or the
timeout expires. A summary of sent, received and lost packets and the
loss rate is printed, and the timestamps are saved to
`latencies/latency_YYYY-MM-DD_HH-MM-SS.csv` in the current directory,
with the columns `ID,send_timestamp,recv_timestamp` (monotonic
nanoseconds; a receive timestamp of 0 means the packet was lost).

## Limitations

- Sending and capturing use Linux raw packet sockets, so the `netwagon`
  command works on Linux only and usually needs elevated privileges.
- Captured frames are matched only when they carry IPv4; IPv6 packets
  are sent but are always counted as lost.

## Using the library

```python
from netwagon.ip import IpVersion
from netwagon.packet import PacketList
from netwagon.proto_udp import create_udp_packet
from netwagon.pcap_writer import PcapWriter, DLT_EN10MB

packets = PacketList()
packets.add(create_udp_packet(IpVersion.V4, "192.0.2.10", "192.0.2.20", 5000, 5001, b"1|hello"))

with PcapWriter("out.pcap", 65535, DLT_EN10MB) as writer:
    written = writer.write_packets(packets)
```

- `netwagon.proto_tcp.create_tcp_packet`, `netwagon.proto_udp.create_udp_packet`
  and `netwagon.proto_icmp.create_icmp_packet` return a `Packet` holding
  the IP packet; `PacketList.add` prefixes the Ethernet header.
- `netwagon.packet.calculate_checksum` computes the Internet checksum.
- `netwagon.reader.packets_from_templates` turns templates already parsed
  from JSON into a `PacketList`, and `netwagon.reader.load_templates_from_json`
  reads a template file; both raise `netwagon.reader.TemplateError` on
  malformed input or invalid addresses.
- `netwagon.txrx.txrx_run` runs a send/capture test and returns a
  `TxRxResult` with `received()`, `lost()` and `loss_rate()`; it raises
  `TxRxError` for an empty packet list or an unusable capture interface.
- `netwagon.save_metrics.save_metrics_to_csv` writes timestamp pairs to a
  CSV file and returns its path, raising `MetricsError` on failure.