"""Saving per-packet send/receive timestamps as a CSV file."""

from __future__ import annotations

import csv
import os
import time
from collections.abc import Sequence

DEFAULT_DIRECTORY = "latencies"
CSV_HEADER = ("ID", "send_timestamp", "recv_timestamp")


class MetricsError(Exception):
    """Raised when latency metrics cannot be saved."""


def metrics_filename(
    timeinfo: time.struct_time | None = None, directory: str = DEFAULT_DIRECTORY
) -> str:
    """Return ``<directory>/latency_YYYY-MM-DD_HH-MM-SS.csv`` for ``timeinfo``."""
    if timeinfo is None:
        timeinfo = time.localtime()
    stamp = time.strftime("%Y-%m-%d_%H-%M-%S", timeinfo)
    return os.path.join(directory, f"latency_{stamp}.csv")


def _ensure_directory(directory: str) -> None:
    if os.path.exists(directory):
        if not os.path.isdir(directory):
            raise MetricsError(f"Erro: '{directory}' existe mas não é um diretório")
        return
    try:
        os.mkdir(directory, 0o755)
    except OSError as exc:
        raise MetricsError(
            f"Erro ao criar diretório '{directory}': {exc.strerror}"
        ) from exc


def save_metrics_to_csv(
    send_timestamps: Sequence[int],
    recv_timestamps: Sequence[int],
    timeinfo: time.struct_time | None = None,
    directory: str = DEFAULT_DIRECTORY,
) -> str:
    """Write one row per packet (1-based ID) and return the file's path."""
    if (
        not send_timestamps
        or not recv_timestamps
        or len(send_timestamps) != len(recv_timestamps)
    ):
        raise MetricsError("save_metrics_to_csv: argumentos inválidos")

    _ensure_directory(directory)
    filename = metrics_filename(timeinfo, directory)

    try:
        with open(filename, "w", newline="", encoding="ascii") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(CSV_HEADER)
            for packet_id, (sent, received) in enumerate(
                zip(send_timestamps, recv_timestamps), start=1
            ):
                writer.writerow((packet_id, sent, received))
    except OSError as exc:
        raise MetricsError(
            f"save_metrics_to_csv: falha ao abrir arquivo '{filename}'"
        ) from exc

    print(f"Métricas salvas em '{filename}'")
    return filename