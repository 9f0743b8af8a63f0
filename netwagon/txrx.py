"""Sending packets on one interface and timing their arrival on another."""

from __future__ import annotations

import re
import socket
import struct
import sys
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass

from netwagon.ip import IP_PROTO_ICMP, IP_PROTO_TCP, IP_PROTO_UDP
from netwagon.packet import ETHERNET_HEADER_SIZE, Packet
from netwagon.save_metrics import MetricsError, save_metrics_to_csv

DEFAULT_TIMEOUT_MS = 5000
ETH_P_ALL = 0x0003
SOL_PACKET = 263
PACKET_ADD_MEMBERSHIP = 1
PACKET_MR_PROMISC = 1

_SNAPLEN = 8192
_RX_POLL_SECONDS = 0.1
_RX_WARMUP_SECONDS = 0.1
_TX_GAP_SECONDS = 0.001
_MIN_IPV4_HEADER = 20
_LEADING_INT = re.compile(rb"[ \t\n\v\f\r]*([+-]?\d+)")


class TxRxError(Exception):
    """Raised when a TX/RX run cannot be carried out."""


@dataclass
class TxRxResult:
    """Per-packet send and receive timestamps (nanoseconds; 0 = none)."""

    send_timestamps: list[int]
    recv_timestamps: list[int]
    metrics_file: str | None = None

    @property
    def total(self) -> int:
        return len(self.send_timestamps)

    def received(self) -> int:
        """Number of packets seen on the receiving interface."""
        return sum(1 for stamp in self.recv_timestamps if stamp)

    def lost(self) -> int:
        """Number of packets never seen on the receiving interface."""
        return self.total - self.received()

    def loss_rate(self) -> float:
        """Percentage of packets lost."""
        if not self.total:
            return 0.0
        return self.lost() / self.total * 100.0


def _atoi(data: bytes) -> int:
    match = _LEADING_INT.match(data)
    return int(match.group(1)) if match else 0


def extract_packet_id(frame: bytes, total: int) -> int | None:
    """Return the ``<id>|`` payload tag of an Ethernet/IPv4 frame, if valid.

    The ID must lie in ``1..total``; frames that are too short, carry an
    unknown transport or hold no ``|`` separator give ``None``.
    """
    frame = bytes(frame)
    if len(frame) < ETHERNET_HEADER_SIZE + _MIN_IPV4_HEADER:
        return None
    ihl = (frame[ETHERNET_HEADER_SIZE] & 0x0F) * 4
    if len(frame) < ETHERNET_HEADER_SIZE + ihl:
        return None

    protocol = frame[ETHERNET_HEADER_SIZE + 9]
    if protocol == IP_PROTO_TCP:
        offset_pos = ETHERNET_HEADER_SIZE + ihl + 12
        if offset_pos >= len(frame):
            return None
        transport_len = ((frame[offset_pos] >> 4) & 0x0F) * 4
    elif protocol in (IP_PROTO_UDP, IP_PROTO_ICMP):
        transport_len = 8
    else:
        return None

    offset = ETHERNET_HEADER_SIZE + ihl + transport_len
    if len(frame) <= offset:
        return None
    payload = frame[offset:]
    if b"|" not in payload:
        return None
    packet_id = _atoi(payload)
    return packet_id if 1 <= packet_id <= total else None


def _open_raw(iface: str) -> socket.socket:
    family = getattr(socket, "AF_PACKET", 17)
    sock = socket.socket(family, socket.SOCK_RAW, socket.htons(ETH_P_ALL))
    try:
        sock.bind((iface, 0))
    except BaseException:
        sock.close()
        raise
    return sock


def _enable_promiscuous(sock: socket.socket, iface: str) -> None:
    try:
        index = socket.if_nametoindex(iface)
        request = struct.pack("iHH8s", index, PACKET_MR_PROMISC, 0, b"")
        sock.setsockopt(SOL_PACKET, PACKET_ADD_MEMBERSHIP, request)
    except OSError:
        pass


def _transmit(iface: str, frames: list[bytes], send_timestamps: list[int]) -> None:
    try:
        sock = _open_raw(iface)
    except OSError as exc:
        print(f"TX: não abriu '{iface}': {exc}", file=sys.stderr)
        return
    try:
        for index, frame in enumerate(frames):
            started = time.monotonic_ns()
            try:
                sock.send(frame)
            except OSError as exc:
                print(f"TX[{index}]: falha: {exc}", file=sys.stderr)
            send_timestamps[index] = started
            time.sleep(_TX_GAP_SECONDS)
    finally:
        sock.close()


def _receive(sock: socket.socket, recv_timestamps: list[int], timeout_ms: int) -> None:
    total = len(recv_timestamps)
    limit_ns = timeout_ms * 1_000_000
    start_wait: int | None = None
    while True:
        try:
            frame: bytes | None = sock.recv(_SNAPLEN)
        except TimeoutError:
            frame = None
        except OSError as exc:
            print(f"RX: falha: {exc}", file=sys.stderr)
            return

        if frame:
            arrived = time.monotonic_ns()
            packet_id = extract_packet_id(frame, total)
            if packet_id is not None and not recv_timestamps[packet_id - 1]:
                recv_timestamps[packet_id - 1] = arrived
                if all(recv_timestamps):
                    return

        if start_wait is None:
            start_wait = time.monotonic_ns()
        if time.monotonic_ns() - start_wait >= limit_ns:
            return


def txrx_run(
    packets: Iterable[Packet],
    iface_send: str,
    iface_recv: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> TxRxResult:
    """Send every packet on ``iface_send`` and time its capture on ``iface_recv``.

    Capture stops once every packet was seen or ``timeout_ms`` has passed.
    A summary is printed and the timestamps are saved as CSV metrics.
    """
    frames = [bytes(packet.data) for packet in packets]
    if not frames:
        raise TxRxError("txrx_run: lista vazia")

    send_timestamps = [0] * len(frames)
    recv_timestamps = [0] * len(frames)
    timeinfo = time.localtime()

    try:
        rx_sock = _open_raw(iface_recv)
    except OSError as exc:
        raise TxRxError(f"RX: não abriu '{iface_recv}': {exc}") from exc

    try:
        _enable_promiscuous(rx_sock, iface_recv)
        rx_sock.settimeout(_RX_POLL_SECONDS)
        rx_thread = threading.Thread(
            target=_receive, args=(rx_sock, recv_timestamps, timeout_ms), daemon=True
        )
        rx_thread.start()
        time.sleep(_RX_WARMUP_SECONDS)
        tx_thread = threading.Thread(
            target=_transmit, args=(iface_send, frames, send_timestamps), daemon=True
        )
        tx_thread.start()
        tx_thread.join()
        rx_thread.join()
    finally:
        rx_sock.close()

    result = TxRxResult(send_timestamps, recv_timestamps)
    print(
        f"TX/RX concluído: enviados={result.total}, recebidos={result.received()}, "
        f"perdidos={result.lost()}, perda={result.loss_rate():.2f}%"
    )

    try:
        result.metrics_file = save_metrics_to_csv(
            send_timestamps, recv_timestamps, timeinfo
        )
    except MetricsError as exc:
        print(exc, file=sys.stderr)
        print("Falha ao salvar métricas de latência", file=sys.stderr)

    return result