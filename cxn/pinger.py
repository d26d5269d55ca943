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
# Review for correctness and security.

"""
Ping functionality for cxn.

The Pinger is the capability object the check engine uses to send ICMP echo
requests. One instance is shared by every worker thread; it keeps no per-call
state, so concurrent probes against different addresses need no locking.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from cxn.models import ProbeOutcome
from cxn.ping_wrapper import DEFAULT_PING_COMMAND, PingCommandError, find_ping_command, ping_once

logger = logging.getLogger(__name__)


class PingerUnavailableError(RuntimeError):
    """Raised when no usable ping transport can be set up."""


@dataclass
class DetailedPingResult:
    """Per-sequence transcript for the ``cxn ping`` command."""

    address: str
    results: List[Tuple[int, Optional[float], Optional[str]]] = field(default_factory=list)
    packets_sent: int = 0
    packets_received: int = 0

    def rtts(self) -> List[float]:
        """Round-trip times (seconds) of the answered echoes."""
        return [rtt for _, rtt, _ in self.results if rtt is not None]

    def loss_percent(self) -> float:
        if self.packets_sent <= 0:
            return 0.0
        return (self.packets_sent - self.packets_received) / self.packets_sent * 100.0


class Pinger:
    """Send ICMP echo requests through the system ping command."""

    def __init__(self, ping_path: str = DEFAULT_PING_COMMAND) -> None:
        resolved = find_ping_command(ping_path)
        if resolved is None:
            raise PingerUnavailableError(f"ping command '{ping_path}' not found in PATH")
        self.ping_path = resolved

    def _echo(self, address: str, timeout: float) -> Tuple[Optional[float], Optional[str]]:
        """
        Send a single echo request.

        Returns:
            Tuple of (rtt in seconds, None) on reply or (None, error message)
        """
        timeout_ms = max(1, int(round(timeout * 1000)))
        try:
            rtt_ms = ping_once(address, timeout_ms=timeout_ms, ping_path=self.ping_path)
        except PingCommandError as e:
            logger.debug("ping %s failed: %s", address, e)
            return None, str(e)
        except (OSError, ValueError) as e:
            logger.warning("Error pinging %s: %s", address, e)
            return None, f"io error: {e}"
        if rtt_ms is None:
            return None, f"timeout after {timeout_ms}ms"
        return rtt_ms / 1000.0, None

    def probe(self, address: str, timeout: float, count: int = 1) -> ProbeOutcome:
        """
        Ping ``address`` ``count`` times and summarize the replies.

        Args:
            address: Literal IP address to ping
            timeout: Timeout in seconds for each echo
            count: Number of echo requests

        Returns:
            A successful ProbeOutcome with the mean RTT of the answered echoes,
            or a failed one carrying the last observed error if none answered
        """
        rtts: List[float] = []
        last_error: Optional[str] = None
        for _ in range(count):
            rtt, error = self._echo(address, timeout)
            if rtt is not None:
                rtts.append(rtt)
            else:
                last_error = error

        if not rtts:
            return ProbeOutcome.failure(last_error or "all pings failed")
        return ProbeOutcome.success(sum(rtts) / len(rtts))

    def probe_detailed(self, address: str, timeout: float, count: int) -> DetailedPingResult:
        """Ping ``address`` ``count`` times, keeping every individual reply."""
        detailed = DetailedPingResult(address=address, packets_sent=count)
        for seq in range(count):
            rtt, error = self._echo(address, timeout)
            if rtt is not None:
                detailed.packets_received += 1
            detailed.results.append((seq, rtt, error))
        return detailed
