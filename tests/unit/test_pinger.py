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
Unit tests for cxn.pinger module.

This module tests the Pinger capability with the ping command mocked out.
"""

import os
import sys
import unittest
from types import SimpleNamespace
from unittest.mock import patch

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from cxn.ping_wrapper import PingCommandError  # noqa: E402  # pylint: disable=wrong-import-position
from cxn.pinger import (  # noqa: E402  # pylint: disable=wrong-import-position
    DetailedPingResult,
    Pinger,
    PingerUnavailableError,
)


class TestPingerConstruction(unittest.TestCase):
    """Tests for Pinger setup"""

    @patch("cxn.pinger.find_ping_command", return_value=None)
    def test_missing_ping_command(self, _mock_find):
        with self.assertRaises(PingerUnavailableError):
            Pinger()

    @patch("cxn.pinger.find_ping_command", return_value="/usr/bin/ping")
    def test_resolved_path_is_used(self, _mock_find):
        self.assertEqual(Pinger().ping_path, "/usr/bin/ping")


@patch("cxn.pinger.find_ping_command", return_value="/usr/bin/ping")
class TestPingerProbe(unittest.TestCase):
    """Tests for Pinger.probe"""

    @patch("cxn.pinger.ping_once", return_value=10.0)
    def test_single_success(self, mock_ping, _mock_find):
        outcome = Pinger().probe("8.8.8.8", 1.0, 1)
        self.assertTrue(outcome.succeeded)
        self.assertAlmostEqual(outcome.round_trip_time, 0.010)
        mock_ping.assert_called_once_with("8.8.8.8", timeout_ms=1000, ping_path="/usr/bin/ping")

    @patch("cxn.pinger.ping_once", side_effect=[10.0, None, 20.0])
    def test_partial_success_averages_answered(self, _mock_ping, _mock_find):
        outcome = Pinger().probe("8.8.8.8", 1.0, 3)
        self.assertTrue(outcome.succeeded)
        self.assertAlmostEqual(outcome.round_trip_time, 0.015)

    @patch("cxn.pinger.ping_once", side_effect=[None, PingCommandError("network unreachable", returncode=2)])
    def test_all_failed_reports_last_error(self, _mock_ping, _mock_find):
        outcome = Pinger().probe("10.255.255.1", 1.0, 2)
        self.assertFalse(outcome.succeeded)
        self.assertIsNone(outcome.round_trip_time)
        self.assertEqual(outcome.error, "network unreachable")

    @patch("cxn.pinger.ping_once", return_value=None)
    def test_timeout_message(self, _mock_ping, _mock_find):
        outcome = Pinger().probe("192.0.2.1", 0.5, 1)
        self.assertEqual(outcome.error, "timeout after 500ms")

    @patch("cxn.pinger.ping_once", side_effect=OSError("Exec format error"))
    def test_os_error_is_captured(self, _mock_ping, _mock_find):
        outcome = Pinger().probe("8.8.8.8", 1.0, 1)
        self.assertFalse(outcome.succeeded)
        self.assertIn("Exec format error", outcome.error)

    @patch("cxn.ping_wrapper.subprocess.run")
    def test_unreadable_reply_is_not_a_timeout(self, mock_run, _mock_find):
        mock_run.return_value = SimpleNamespace(returncode=0, stdout="PING 8.8.8.8\n", stderr="")
        outcome = Pinger().probe("8.8.8.8", 1.0, 1)
        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.error, "could not parse ping output")


@patch("cxn.pinger.find_ping_command", return_value="/usr/bin/ping")
class TestPingerDetailed(unittest.TestCase):
    """Tests for Pinger.probe_detailed"""

    @patch("cxn.pinger.ping_once", side_effect=[10.0, 12.0, None, 11.0])
    def test_transcript(self, _mock_ping, _mock_find):
        result = Pinger().probe_detailed("8.8.8.8", 1.0, 4)
        self.assertEqual(result.packets_sent, 4)
        self.assertEqual(result.packets_received, 3)
        self.assertEqual([seq for seq, _, _ in result.results], [0, 1, 2, 3])
        self.assertEqual(result.results[2], (2, None, "timeout after 1000ms"))
        self.assertAlmostEqual(result.loss_percent(), 25.0)


class TestDetailedPingResult(unittest.TestCase):
    """Tests for DetailedPingResult helpers"""

    def test_no_packets(self):
        self.assertEqual(DetailedPingResult(address="8.8.8.8").loss_percent(), 0.0)

    def test_rtts(self):
        result = DetailedPingResult(address="8.8.8.8", results=[(0, 0.01, None), (1, None, "timeout")])
        self.assertEqual(result.rtts(), [0.01])


if __name__ == "__main__":
    unittest.main()
