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
Unit tests for cxn.models.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from cxn.models import (  # noqa: E402  # pylint: disable=wrong-import-position
    HostResult,
    HostSpec,
    ProbeOutcome,
    ResolutionOutcome,
    parse_ip_address,
)


class TestParseIpAddress(unittest.TestCase):
    """Tests for parse_ip_address"""

    def test_ipv4(self):
        self.assertEqual(parse_ip_address("8.8.8.8"), "8.8.8.8")

    def test_ipv6_is_normalized(self):
        self.assertEqual(parse_ip_address("2001:4860:4860:0000:0000:0000:0000:8888"), "2001:4860:4860::8888")

    def test_hostname(self):
        self.assertIsNone(parse_ip_address("github.com"))
        self.assertIsNone(parse_ip_address("999.1.1.1"))


class TestHostSpec(unittest.TestCase):
    """Tests for HostSpec helpers"""

    def test_is_ip_address(self):
        self.assertTrue(HostSpec("Test", "8.8.8.8", want_ping=True).is_ip_address())
        self.assertFalse(HostSpec("Test", "google.com", want_ping=True, want_dns=True).is_ip_address())

    def test_should_resolve_dns(self):
        # IP address with dns -> no lookup, it is already an IP
        self.assertFalse(HostSpec("Test", "8.8.8.8", want_ping=True, want_dns=True).should_resolve_dns())
        self.assertTrue(HostSpec("Test", "google.com", want_ping=True, want_dns=True).should_resolve_dns())
        self.assertFalse(HostSpec("Test", "google.com", want_ping=True, want_dns=False).should_resolve_dns())

    def test_has_checks(self):
        self.assertTrue(HostSpec("A", "8.8.8.8", want_ping=True).has_checks())
        self.assertTrue(HostSpec("B", "example.com", want_dns=True).has_checks())
        self.assertFalse(HostSpec("C", "example.com").has_checks())

    def test_immutable(self):
        host = HostSpec("A", "8.8.8.8", want_ping=True)
        with self.assertRaises(AttributeError):
            host.name = "B"  # type: ignore[misc]


class TestHostResultSuccess(unittest.TestCase):
    """Tests for HostResult.is_success"""

    def test_ping_success(self):
        result = HostResult("Test", "8.8.8.8", probe=ProbeOutcome.success(0.010))
        self.assertTrue(result.is_success())

    def test_ping_failure(self):
        result = HostResult("Test", "8.8.8.8", probe=ProbeOutcome.failure("timeout"))
        self.assertFalse(result.is_success())

    def test_dns_failure(self):
        result = HostResult("Test", "bad.invalid", resolution=ResolutionOutcome.failure("no such host"))
        self.assertFalse(result.is_success())

    def test_dns_success_ping_failure(self):
        result = HostResult(
            "Test",
            "example.com",
            resolution=ResolutionOutcome.success(["93.184.216.34"]),
            probe=ProbeOutcome.failure("timeout after 1000ms"),
        )
        self.assertFalse(result.is_success())

    def test_both_success(self):
        result = HostResult(
            "Test",
            "example.com",
            resolution=ResolutionOutcome.success(["93.184.216.34"]),
            probe=ProbeOutcome.success(0.02),
        )
        self.assertTrue(result.is_success())

    def test_no_checks_is_vacuously_successful(self):
        self.assertTrue(HostResult("Test", "8.8.8.8").is_success())


class TestOutcomeConstructors(unittest.TestCase):
    """Tests for the success/failure constructors"""

    def test_resolution_success_keeps_order(self):
        outcome = ResolutionOutcome.success(["1.1.1.1", "1.0.0.1", "2606:4700:4700::1111"])
        self.assertTrue(outcome.succeeded)
        self.assertEqual(outcome.addresses, ("1.1.1.1", "1.0.0.1", "2606:4700:4700::1111"))
        self.assertIsNone(outcome.error)

    def test_resolution_failure(self):
        outcome = ResolutionOutcome.failure("timeout")
        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.addresses, ())
        self.assertEqual(outcome.error, "timeout")

    def test_probe_failure_has_no_rtt(self):
        outcome = ProbeOutcome.failure("no route to host")
        self.assertFalse(outcome.succeeded)
        self.assertIsNone(outcome.round_trip_time)


if __name__ == "__main__":
    unittest.main()
