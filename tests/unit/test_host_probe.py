#!/usr/bin/env python3
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
Unit tests for cxn.host_probe.

Covers the address precedence rules: literal IPs skip DNS, a requested DNS
check is reported and feeds the ping target, and a ping-only hostname is
resolved silently.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from cxn.host_probe import check_host  # noqa: E402  # pylint: disable=wrong-import-position
from cxn.models import HostSpec  # noqa: E402  # pylint: disable=wrong-import-position
from fakes import StubPinger, StubResolver  # noqa: E402  # pylint: disable=wrong-import-position


class TestLiteralAddress(unittest.TestCase):
    """Hosts configured with a literal IP"""

    def test_ip_with_dns_never_calls_resolver(self):
        resolver = StubResolver()
        pinger = StubPinger({"8.8.8.8": 0.010})
        result = check_host(HostSpec("Google", "8.8.8.8", want_ping=True, want_dns=True), resolver, pinger, 1.0)

        self.assertEqual(resolver.calls, [])
        self.assertIsNone(result.resolution)
        self.assertTrue(result.probe.succeeded)
        self.assertAlmostEqual(result.probe.round_trip_time, 0.010)

    def test_ip_ping_uses_single_echo_and_timeout(self):
        pinger = StubPinger({"1.1.1.1": 0.005})
        check_host(HostSpec("CF", "1.1.1.1", want_ping=True), StubResolver(), pinger, 2.5)
        self.assertEqual(pinger.calls, [("1.1.1.1", 2.5, 1)])

    def test_ip_ping_failure(self):
        result = check_host(HostSpec("Dead", "192.0.2.1", want_ping=True), StubResolver(), StubPinger(), 1.0)
        self.assertFalse(result.probe.succeeded)
        self.assertEqual(result.probe.error, "timeout after 1000ms")
        self.assertFalse(result.is_success())


class TestDnsCheck(unittest.TestCase):
    """Hostnames with a requested DNS check"""

    def test_dns_result_recorded_and_first_address_pinged(self):
        resolver = StubResolver({"example.com": ["93.184.216.34", "2606:2800:220:1::1"]})
        pinger = StubPinger({"93.184.216.34": 0.02})
        result = check_host(HostSpec("Ex", "example.com", want_ping=True, want_dns=True), resolver, pinger, 1.0)

        self.assertEqual(resolver.calls, [("example.com", True)])
        self.assertTrue(result.resolution.succeeded)
        self.assertEqual(result.resolution.addresses, ("93.184.216.34", "2606:2800:220:1::1"))
        self.assertEqual([call[0] for call in pinger.calls], ["93.184.216.34"])
        self.assertTrue(result.is_success())

    def test_dns_only(self):
        resolver = StubResolver({"example.com": ["93.184.216.34"]})
        pinger = StubPinger()
        result = check_host(HostSpec("Ex", "example.com", want_dns=True), resolver, pinger, 1.0)

        self.assertTrue(result.resolution.succeeded)
        self.assertIsNone(result.probe)
        self.assertEqual(pinger.calls, [])

    def test_dns_failure_with_ping_synthesizes_probe_failure(self):
        pinger = StubPinger()
        result = check_host(HostSpec("Bad", "bad.invalid", want_ping=True, want_dns=True), StubResolver(), pinger, 1.0)

        self.assertFalse(result.resolution.succeeded)
        self.assertEqual(result.resolution.error, "no such host")
        self.assertFalse(result.probe.succeeded)
        self.assertEqual(result.probe.error, "could not resolve hostname")
        self.assertEqual(pinger.calls, [])


class TestPingOnlyHostname(unittest.TestCase):
    """Hostnames with ping but no DNS check"""

    def test_lookup_is_primary_family_and_not_recorded(self):
        resolver = StubResolver({"github.com": ["140.82.112.3"]})
        pinger = StubPinger({"140.82.112.3": 0.03})
        result = check_host(HostSpec("GH", "github.com", want_ping=True), resolver, pinger, 1.0)

        self.assertEqual(resolver.calls, [("github.com", False)])
        self.assertIsNone(result.resolution)
        self.assertTrue(result.probe.succeeded)

    def test_unresolvable_hostname(self):
        pinger = StubPinger()
        result = check_host(HostSpec("Bad", "bad.invalid", want_ping=True), StubResolver(), pinger, 1.0)

        self.assertIsNone(result.resolution)
        self.assertFalse(result.probe.succeeded)
        self.assertEqual(result.probe.error, "could not resolve hostname")
        self.assertEqual(pinger.calls, [])


class TestNoChecks(unittest.TestCase):
    """Hosts with every check disabled"""

    def test_nothing_is_performed(self):
        resolver = StubResolver({"example.com": ["93.184.216.34"]})
        pinger = StubPinger()
        result = check_host(HostSpec("Idle", "example.com"), resolver, pinger, 1.0)

        self.assertEqual(resolver.calls, [])
        self.assertEqual(pinger.calls, [])
        self.assertIsNone(result.resolution)
        self.assertIsNone(result.probe)
        self.assertTrue(result.is_success())
        self.assertEqual((result.name, result.address), ("Idle", "example.com"))


if __name__ == "__main__":
    unittest.main()
