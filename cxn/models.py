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
Data model for cxn connectivity checks.

HostSpec describes what to check for one configured host. ResolutionOutcome
and ProbeOutcome carry the result of a DNS lookup and an ICMP probe, and
HostResult groups them per host. A sub-result is ``None`` when that check was
never requested, which keeps "not requested" apart from "requested and failed".
"""

import ipaddress
from dataclasses import dataclass
from typing import Optional, Tuple

UNRESOLVED_HOSTNAME_ERROR = "could not resolve hostname"


def parse_ip_address(address: str) -> Optional[str]:
    """Return the normalized IP string if ``address`` is a literal IP, else None."""
    try:
        return str(ipaddress.ip_address(address.strip()))
    except ValueError:
        return None


@dataclass(frozen=True)
class HostSpec:
    """A configured host and the checks requested for it."""

    name: str
    address: str
    want_ping: bool = False
    want_dns: bool = False

    def is_ip_address(self) -> bool:
        """Check if the address is a literal IP rather than a hostname."""
        return parse_ip_address(self.address) is not None

    def has_checks(self) -> bool:
        """Check if at least one check is enabled for this host."""
        return self.want_ping or self.want_dns

    def should_resolve_dns(self) -> bool:
        """DNS checks only apply to hostnames; a literal IP needs no lookup."""
        return self.want_dns and not self.is_ip_address()


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of a hostname lookup."""

    succeeded: bool
    addresses: Tuple[str, ...] = ()
    error: Optional[str] = None

    @classmethod
    def success(cls, addresses) -> "ResolutionOutcome":
        return cls(succeeded=True, addresses=tuple(addresses))

    @classmethod
    def failure(cls, error: str) -> "ResolutionOutcome":
        return cls(succeeded=False, error=error)


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of an ICMP echo probe. ``round_trip_time`` is in seconds."""

    succeeded: bool
    round_trip_time: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, round_trip_time: float) -> "ProbeOutcome":
        return cls(succeeded=True, round_trip_time=round_trip_time)

    @classmethod
    def failure(cls, error: str) -> "ProbeOutcome":
        return cls(succeeded=False, error=error)


@dataclass(frozen=True)
class HostResult:
    """Outcome of all requested checks for one host in one cycle."""

    name: str
    address: str
    resolution: Optional[ResolutionOutcome] = None
    probe: Optional[ProbeOutcome] = None

    def is_success(self) -> bool:
        """
        Check if every performed check succeeded.

        Checks that were not performed are vacuously successful, so a result
        with neither sub-result is a success.
        """
        dns_ok = self.resolution is None or self.resolution.succeeded
        ping_ok = self.probe is None or self.probe.succeeded
        return dns_ok and ping_ok
