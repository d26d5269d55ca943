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
Per-host check sequence for cxn.

check_host() runs the DNS-then-ping sequence for a single HostSpec and always
returns a HostResult. Resolver and pinger failures end up in the outcome
objects; nothing is raised for them.
"""

import logging
from typing import Optional, Protocol

from cxn.models import (
    UNRESOLVED_HOSTNAME_ERROR,
    HostResult,
    HostSpec,
    ProbeOutcome,
    ResolutionOutcome,
    parse_ip_address,
)

logger = logging.getLogger(__name__)

# The check engine sends a single echo per host per cycle.
CHECK_PING_COUNT = 1


class ResolverLike(Protocol):
    """Capability for hostname lookups. Must tolerate concurrent calls."""

    def lookup(self, hostname: str, include_ipv6: bool) -> ResolutionOutcome: ...


class PingerLike(Protocol):
    """Capability for ICMP echo probes. Must tolerate concurrent calls."""

    def probe(self, address: str, timeout: float, count: int = 1) -> ProbeOutcome: ...


def check_host(host: HostSpec, resolver: ResolverLike, pinger: PingerLike, timeout: float) -> HostResult:
    """
    Run the requested checks for one host.

    Args:
        host: The host to check
        resolver: Shared resolver handle
        pinger: Shared pinger handle
        timeout: Per-probe timeout in seconds

    Returns:
        HostResult with ``resolution`` set only for a requested DNS check of a
        hostname and ``probe`` set only when ping was requested
    """
    # Address precedence:
    # - A literal IP is used as-is; DNS is redundant for it even if requested.
    # - A requested DNS check resolves both families and is always reported;
    #   its first address becomes the ping target.
    # - Otherwise a ping-only hostname gets a primary-family lookup that is
    #   never reported, it only supplies the ping target.
    # - Ping never runs without a target; a synthesized failure takes its place.
    resolution: Optional[ResolutionOutcome] = None
    probe: Optional[ProbeOutcome] = None
    target = parse_ip_address(host.address)

    if host.should_resolve_dns():
        resolution = resolver.lookup(host.address, True)
        if resolution.succeeded and resolution.addresses:
            target = resolution.addresses[0]
    elif target is None and host.want_ping:
        lookup = resolver.lookup(host.address, False)
        if lookup.succeeded and lookup.addresses:
            target = lookup.addresses[0]
        else:
            logger.debug("Could not resolve %s (%s) for ping: %s", host.name, host.address, lookup.error)

    if host.want_ping:
        if target is not None:
            probe = pinger.probe(target, timeout, CHECK_PING_COUNT)
        else:
            probe = ProbeOutcome.failure(UNRESOLVED_HOSTNAME_ERROR)

    return HostResult(name=host.name, address=host.address, resolution=resolution, probe=probe)
