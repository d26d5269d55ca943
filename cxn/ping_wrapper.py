# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.

"""
Python wrapper for the system ping command.

This module sends a single ICMP echo request by running the platform ``ping``
binary (iputils or compatible), which already holds the privileges needed for
raw ICMP sockets. cxn never builds ICMP packets itself.

The wrapper relies on the usual ping CLI contract:
  - Usage: ping [-6] -n -c 1 -W <seconds> <address>
  - Reply (exit 0): a line containing "time=<value> ms"
  - No reply (exit 1): normal timeout behavior, not an error
  - Errors (exit 2 and above): message on stderr
"""

import ipaddress
import math
import re
import shutil
import subprocess
from typing import List, Optional

DEFAULT_PING_COMMAND = "ping"

_RTT_RE = re.compile(r"time[=<]\s*([0-9]+(?:\.[0-9]+)?)\s*ms")

# stderr fragment -> user-facing message
_KNOWN_ERRORS = (
    ("operation not permitted", "permission denied (need cap_net_raw)"),
    ("permission denied", "permission denied (need cap_net_raw)"),
    ("network is unreachable", "network unreachable"),
    ("no route to host", "no route to host"),
)


class PingCommandError(RuntimeError):
    """Raised when the ping command fails for a reason other than a timeout."""

    def __init__(self, message, returncode=None, stderr=None):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def find_ping_command(ping_path: str = DEFAULT_PING_COMMAND) -> Optional[str]:
    """Return the absolute path of the ping binary, or None if it is not installed."""
    return shutil.which(ping_path)


def build_ping_command(address: str, timeout_ms: int, ping_path: str = DEFAULT_PING_COMMAND) -> List[str]:
    """
    Build the argument list for a single echo request.

    ping only accepts whole seconds for its reply deadline on most platforms,
    so the timeout is rounded up to at least one second.
    """
    ip = ipaddress.ip_address(address)
    wait_seconds = max(1, math.ceil(timeout_ms / 1000.0))
    cmd_args = [ping_path]
    if ip.version == 6:
        cmd_args.append("-6")
    cmd_args.extend(["-n", "-c", "1", "-W", str(wait_seconds), str(ip)])
    return cmd_args


def parse_rtt_ms(output: str) -> Optional[float]:
    """Extract the round-trip time in milliseconds from ping output."""
    match = _RTT_RE.search(output)
    if match is None:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def describe_ping_error(stderr: str, returncode: Optional[int] = None) -> str:
    """Turn ping's stderr into a short, user-friendly message."""
    lowered = stderr.lower()
    for fragment, message in _KNOWN_ERRORS:
        if fragment in lowered:
            return message
    if stderr:
        # "ping: connect: Invalid argument" -> "connect: Invalid argument"
        return stderr.splitlines()[-1].split("ping: ", 1)[-1].strip()
    return f"ping failed with return code {returncode}"


def ping_once(address: str, timeout_ms: int = 1000, ping_path: str = DEFAULT_PING_COMMAND) -> Optional[float]:
    """
    Send one ICMP echo request to ``address`` using the system ping command.

    Args:
        address: Literal IPv4 or IPv6 address to ping
        timeout_ms: Timeout in milliseconds (default: 1000)
        ping_path: Name or path of the ping binary

    Returns:
        Round-trip time in milliseconds on success; None when no reply arrived
        before the timeout (normal behavior, not an error)

    Raises:
        PingCommandError: If ping exits with an error code (2 or above), or
            reports a reply without a readable round-trip time
        FileNotFoundError: If the ping binary cannot be executed
        ValueError: If timeout_ms is not positive or address is not a literal IP

    Examples:
        >>> rtt_ms = ping_once("127.0.0.1", 1000)
        >>> assert rtt_ms is None or rtt_ms >= 0
    """
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be a positive integer in milliseconds.")

    cmd_args = build_ping_command(address, timeout_ms, ping_path)

    try:
        result = subprocess.run(
            cmd_args,
            capture_output=True,
            text=True,
            timeout=(timeout_ms / 1000.0) + 1.0,  # Add 1 second buffer
            check=False,  # We handle non-zero exit codes ourselves
        )
    except subprocess.TimeoutExpired:
        return None

    if result.returncode == 0:
        rtt_ms = parse_rtt_ms(result.stdout)
        if rtt_ms is None:
            raise PingCommandError("could not parse ping output", returncode=0, stderr=result.stderr or "")
        return rtt_ms

    # No reply within the deadline
    if result.returncode == 1:
        return None

    stderr = result.stderr.strip() if result.stderr else ""
    raise PingCommandError(describe_ping_error(stderr, result.returncode), returncode=result.returncode, stderr=stderr)
