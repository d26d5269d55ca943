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
cxn UI Rendering Module

This module turns check results into terminal output: ANSI text utilities,
the verbose per-host report, the compact watch-mode table, the summary line,
and the transcripts of the ping and dns commands. Functions return lines or
strings and leave writing to the caller, except for clear_screen().
"""

import os
import re
import sys
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple

from cxn.models import HostResult, ProbeOutcome, ResolutionOutcome
from cxn.pinger import DetailedPingResult
from cxn.resolver import DetailedDnsResult
from cxn.stats import CheckSummary

ANSI_RESET = "\x1b[0m"
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")
COLORS = {
    "ok": "\x1b[32m",  # Green
    "fail": "\x1b[31m",  # Red
    "warn": "\x1b[33m",  # Yellow
    "name": "\x1b[36m",  # Cyan
    "muted": "\x1b[90m",  # Dark gray (bright black)
    "title": "\x1b[1;36m",  # Bold cyan
}
CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"

CHECK_MARK = "✓"
CROSS_MARK = "✗"
EMPTY_CELL = "-"
COLUMN_GAP = "  "


# ============================================================================
# ANSI/Text Utility Functions
# ============================================================================


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_ESCAPE_RE.sub("", text)


def visible_len(text: str) -> int:
    """Get the visible length of text (excluding ANSI codes)."""
    return len(strip_ansi(text))


def pad_visible(text: str, width: int) -> str:
    """Left-justify text to a visible width, preserving ANSI codes."""
    padding = width - visible_len(text)
    if padding <= 0:
        return text
    return f"{text}{' ' * padding}"


def rjust_visible(text: str, width: int) -> str:
    """Right-justify text to a visible width, preserving ANSI codes."""
    padding = width - visible_len(text)
    if padding <= 0:
        return text
    return f"{' ' * padding}{text}"


def colorize(text: str, style: Optional[str], use_color: bool) -> str:
    """Wrap text in the ANSI color registered for ``style``."""
    if not use_color or not style:
        return text
    color = COLORS.get(style)
    if not color:
        return text
    return f"{color}{text}{ANSI_RESET}"


def should_use_color(stream: TextIO = sys.stdout, disabled: bool = False) -> bool:
    """Color only interactive output, and honor NO_COLOR."""
    if disabled or os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def clear_screen(stream: TextIO = sys.stdout) -> None:
    """Clear the terminal and move the cursor to the top-left corner."""
    stream.write(CLEAR_SCREEN)
    stream.flush()


# ============================================================================
# Check Result Formatting
# ============================================================================


def format_rtt(seconds: Optional[float]) -> str:
    """Format a round-trip time as milliseconds with one decimal."""
    if seconds is None:
        return "?"
    return f"{seconds * 1000.0:.1f}ms"


def format_dns_line(outcome: ResolutionOutcome, use_color: bool = False) -> str:
    if outcome.succeeded:
        addresses = ", ".join(outcome.addresses) if outcome.addresses else "(none)"
        return f"  {colorize(CHECK_MARK, 'ok', use_color)} dns:  {addresses}"
    return f"  {colorize(CROSS_MARK, 'fail', use_color)} dns:  {outcome.error or 'unknown error'}"


def format_ping_line(outcome: ProbeOutcome, use_color: bool = False) -> str:
    if outcome.succeeded:
        return f"  {colorize(CHECK_MARK, 'ok', use_color)} ping: {format_rtt(outcome.round_trip_time)}"
    return f"  {colorize(CROSS_MARK, 'fail', use_color)} ping: {outcome.error or 'unknown error'}"


def render_check_report(results: Iterable[HostResult], use_color: bool = False) -> List[str]:
    """
    Build the verbose report: a header line per host followed by one line per
    performed check and a blank separator.
    """
    lines: List[str] = []
    for result in results:
        lines.append(f"{colorize(result.name, 'name', use_color)} ({result.address})")
        if result.resolution is not None:
            lines.append(format_dns_line(result.resolution, use_color))
        if result.probe is not None:
            lines.append(format_ping_line(result.probe, use_color))
        lines.append("")
    return lines


def format_summary(summary: CheckSummary, use_color: bool = False) -> str:
    """Format the aggregate line, e.g. ``Summary: 1/2 hosts OK, 1 failed in 0.3s``."""
    elapsed = f" in {summary.elapsed:.1f}s" if summary.elapsed is not None else ""
    tally = f"{summary.success_count}/{summary.hosts_checked} hosts"
    if summary.all_ok:
        return f"Summary: {tally} {colorize('OK', 'ok', use_color)}{elapsed}"
    return f"Summary: {tally} OK, {summary.failed_count} {colorize('failed', 'fail', use_color)}{elapsed}"


def _ping_cell(outcome: Optional[ProbeOutcome]) -> Tuple[str, str]:
    if outcome is None:
        return EMPTY_CELL, "muted"
    if not outcome.succeeded:
        return "fail", "fail"
    if outcome.round_trip_time is None:
        return "ok", "ok"
    return format_rtt(outcome.round_trip_time), "ok"


def _dns_cell(outcome: Optional[ResolutionOutcome]) -> Tuple[str, str]:
    if outcome is None:
        return EMPTY_CELL, "muted"
    if not outcome.succeeded:
        return "fail", "fail"
    return (outcome.addresses[0] if outcome.addresses else ""), "ok"


def render_compact_table(results: Sequence[HostResult], use_color: bool = False) -> List[str]:
    """
    Build the compact NAME/PING/DNS table used in watch mode.

    The PING column is right-aligned; failing hosts have their name in red.
    """
    rows = []
    for result in results:
        rows.append(
            (
                (result.name, None if result.is_success() else "fail"),
                _ping_cell(result.probe),
                _dns_cell(result.resolution),
            )
        )

    name_width = max([len("NAME")] + [len(name) for (name, _), _, _ in rows])
    ping_width = max([len("PING")] + [len(ping) for _, (ping, _), _ in rows])

    lines = [
        COLUMN_GAP.join(
            [
                pad_visible(colorize("NAME", "muted", use_color), name_width),
                rjust_visible(colorize("PING", "muted", use_color), ping_width),
                colorize("DNS", "muted", use_color),
            ]
        ).rstrip()
    ]
    for (name, name_style), (ping, ping_style), (dns, dns_style) in rows:
        lines.append(
            COLUMN_GAP.join(
                [
                    pad_visible(colorize(name, name_style, use_color), name_width),
                    rjust_visible(colorize(ping, ping_style, use_color), ping_width),
                    colorize(dns, dns_style, use_color),
                ]
            ).rstrip()
        )
    return lines


def format_watch_header(now: datetime, interval: int, use_color: bool = False) -> str:
    """Format the watch-mode header, e.g. ``cxn [14:03:22] (every 5s)``."""
    return f"{colorize('cxn', 'title', use_color)} [{now.strftime('%H:%M:%S')}] (every {interval}s)"


# ============================================================================
# Subcommand Transcripts
# ============================================================================


def format_detailed_ping(result: DetailedPingResult, use_color: bool = False) -> str:
    """Format a ping transcript similar to the traditional ping command."""
    output = [f"PING {result.address}"]
    for seq, rtt, error in result.results:
        if rtt is not None:
            output.append(f"  64 bytes: seq={seq} time={rtt * 1000.0:.1f}ms")
        else:
            output.append(f"  seq={seq}: {colorize(error or 'no reply', 'fail', use_color)}")

    output.append("")
    output.append(f"--- {result.address} ping statistics ---")
    output.append(
        f"{result.packets_sent} packets transmitted, {result.packets_received} received, "
        f"{result.loss_percent():.0f}% packet loss"
    )

    rtts_ms = [rtt * 1000.0 for rtt in result.rtts()]
    if rtts_ms:
        avg = sum(rtts_ms) / len(rtts_ms)
        output.append(f"rtt min/avg/max = {min(rtts_ms):.1f}/{avg:.1f}/{max(rtts_ms):.1f} ms")

    return "\n".join(output)


def _format_record_lines(label: str, addresses: Sequence[str], use_color: bool) -> List[str]:
    prefix = f"  {label}:".ljust(8)
    if not addresses:
        return [f"{prefix}{colorize('(none)', 'muted', use_color)}"]
    return [f"{prefix if index == 0 else ' ' * len(prefix)}{address}" for index, address in enumerate(addresses)]


def format_detailed_dns(result: DetailedDnsResult, include_ipv6: bool = False, use_color: bool = False) -> str:
    """Format the A (and AAAA) records of a dns lookup."""
    output = [result.hostname]
    if result.error is not None:
        output.append(f"  {colorize('Error', 'fail', use_color)}: {result.error}")
        return "\n".join(output)

    output.extend(_format_record_lines("A", result.ipv4_addresses, use_color))
    if include_ipv6:
        output.extend(_format_record_lines("AAAA", result.ipv6_addresses, use_color))
    return "\n".join(output)
