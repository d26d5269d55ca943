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
Forward DNS resolution for cxn.

This module wraps a dnspython resolver built from the system resolver
configuration. The Resolver is shared by all worker threads and only issues
independent queries, so it can be called concurrently.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import dns.exception
import dns.resolver

from cxn.models import ResolutionOutcome

logger = logging.getLogger(__name__)

DEFAULT_LIFETIME_SECONDS = 5.0


class ResolverUnavailableError(RuntimeError):
    """Raised when the system resolver configuration cannot be loaded."""


@dataclass
class DetailedDnsResult:
    """Per-family lookup result for the ``cxn dns`` command."""

    hostname: str
    ipv4_addresses: List[str] = field(default_factory=list)
    ipv6_addresses: List[str] = field(default_factory=list)
    error: Optional[str] = None


def format_dns_error(exception: Exception) -> str:
    """Map a dnspython exception to a short, user-friendly message."""
    if isinstance(exception, dns.resolver.NXDOMAIN):
        return "no such host"
    if isinstance(exception, dns.exception.Timeout):
        return "timeout"
    if isinstance(exception, dns.resolver.NoNameservers):
        return "no nameservers available"
    message = str(exception)
    return message or type(exception).__name__


class Resolver:
    """Resolve hostnames to IP addresses using dnspython."""

    def __init__(self, lifetime: float = DEFAULT_LIFETIME_SECONDS) -> None:
        try:
            self._resolver = dns.resolver.Resolver()
        except dns.resolver.NoResolverConfiguration as exc:
            raise ResolverUnavailableError(f"no DNS resolver configuration available: {exc}") from exc
        self._resolver.lifetime = lifetime

    def _query(self, hostname: str, rdtype: str) -> List[str]:
        """Query one record type. A name without records of that type yields []."""
        try:
            answer = self._resolver.resolve(hostname, rdtype, search=True)
        except dns.resolver.NoAnswer:
            return []
        return [rdata.to_text() for rdata in answer]

    def _query_ipv6(self, hostname: str) -> List[str]:
        """Query AAAA records; a failure here never hides the IPv4 answer."""
        try:
            return self._query(hostname, "AAAA")
        except dns.exception.DNSException as e:
            logger.debug("AAAA lookup for %s failed: %s", hostname, format_dns_error(e))
            return []

    def lookup(self, hostname: str, include_ipv6: bool) -> ResolutionOutcome:
        """
        Resolve ``hostname`` to its addresses.

        Args:
            hostname: The name to resolve
            include_ipv6: Also query AAAA records; IPv4 addresses come first

        Returns:
            ResolutionOutcome; lookup errors are reported in it, never raised
        """
        try:
            addresses = self._query(hostname, "A")
        except dns.exception.DNSException as e:
            message = format_dns_error(e)
            logger.debug("DNS lookup for %s failed: %s", hostname, message)
            return ResolutionOutcome.failure(message)
        if include_ipv6:
            addresses.extend(self._query_ipv6(hostname))

        if not addresses:
            return ResolutionOutcome.failure("no addresses found")
        return ResolutionOutcome.success(addresses)

    def lookup_detailed(self, hostname: str, include_ipv6: bool) -> DetailedDnsResult:
        """Resolve ``hostname`` keeping IPv4 and IPv6 answers apart."""
        result = DetailedDnsResult(hostname=hostname)
        try:
            result.ipv4_addresses = self._query(hostname, "A")
        except dns.exception.DNSException as e:
            result.error = format_dns_error(e)
            return result
        if include_ipv6:
            result.ipv6_addresses = self._query_ipv6(hostname)
        return result
