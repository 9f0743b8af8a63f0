"""Build test packets from JSON templates, write them to pcap, and measure loss and latency."""

__version__ = "0.1.0"