[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netwagon"
version = "0.1.0"
description = "Build IPv4/IPv6 TCP, UDP and ICMP test packets from JSON templates, write them to pcap, and measure loss and latency between two interfaces"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "network",
    "packet",
    "pcap",
    "traffic generator",
    "latency",
    "packet loss",
    "tcp",
    "udp",
    "icmp",
    "ipv6",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
    "Topic :: Software Development :: Testing :: Traffic Generation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
netwagon = "netwagon.cli:main"
netwagon-generator = "netwagon.generator:main"

[tool.hatch.build.targets.wheel]
packages = ["netwagon"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
