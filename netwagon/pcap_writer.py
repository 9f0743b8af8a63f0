"""Writing packets to classic libpcap capture files."""

from __future__ import annotations

import struct
import time
from collections.abc import Iterable
from types import TracebackType

from netwagon.packet import Packet

PCAP_MAGIC = 0xA1B2C3D4
PCAP_VERSION_MAJOR = 2
PCAP_VERSION_MINOR = 4
DLT_RAW = 101
DLT_EN10MB = 1
DEFAULT_SNAPLEN = 65535

_GLOBAL_HEADER = struct.Struct("=IHHiIII")
_RECORD_HEADER = struct.Struct("=IIII")


class PcapWriter:
    """A capture file open for writing; usable as a context manager."""

    def __init__(
        self, filename: str, snaplen: int = DEFAULT_SNAPLEN, network: int = DLT_EN10MB
    ) -> None:
        self.filename = filename
        self._file = open(filename, "wb")
        try:
            self._file.write(
                _GLOBAL_HEADER.pack(
                    PCAP_MAGIC,
                    PCAP_VERSION_MAJOR,
                    PCAP_VERSION_MINOR,
                    0,
                    0,
                    snaplen,
                    network,
                )
            )
        except BaseException:
            self._file.close()
            raise

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write_packet(self, packet: Packet) -> None:
        """Append one packet, stamped with the current time."""
        if self._file.closed:
            raise ValueError("write to a closed pcap file")
        seconds, micros = divmod(time.time_ns() // 1000, 1_000_000)
        data = bytes(packet.data)
        self._file.write(_RECORD_HEADER.pack(seconds, micros, len(data), len(data)))
        self._file.write(data)

    def write_packets(self, packets: Iterable[Packet]) -> int:
        """Append every packet in order and return how many were written."""
        count = 0
        for packet in packets:
            self.write_packet(packet)
            count += 1
        return count

    def close(self) -> None:
        """Flush and close the file; closing twice is harmless."""
        self._file.close()

    def __enter__(self) -> PcapWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()