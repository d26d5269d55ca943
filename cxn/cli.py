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
Command-line interface for cxn.

This module contains the main entry point, argument handling, logging setup
and the check/ping/dns commands.
"""

import argparse
import logging
import os
import signal
import sys
import threading
import time
from datetime import datetime
from typing import List, Optional, TextIO, Tuple

from cxn import __version__
from cxn.config import Config, load_config
from cxn.models import parse_ip_address
from cxn.pinger import Pinger, PingerUnavailableError
from cxn.resolver import Resolver, ResolverUnavailableError
from cxn.scheduler import run_checks
from cxn.stats import failed_results, summarize_results
from cxn.ui_render import (
    clear_screen,
    colorize,
    format_detailed_dns,
    format_detailed_ping,
    format_summary,
    format_watch_header,
    render_check_report,
    render_compact_table,
    should_use_color,
)
from cxn.watch import WatchLoop, resolve_watch_interval

logger = logging.getLogger(__name__)

DEFAULT_PING_COUNT = 4
DEFAULT_PING_TIMEOUT_MS = 1000


def default_log_file() -> str:
    """Log file location, honoring XDG_DATA_HOME."""
    data_home = os.environ.get("XDG_DATA_HOME") or os.path.expanduser("~/.local/share")
    return os.path.join(data_home, "cxn", "logs", "cxn.log")


def _configure_logging(log_level: str, log_file: Optional[str], verbose: bool) -> str:
    """
    Configure logging handlers for CLI execution.

    Logs always go to a file; --verbose mirrors them on stderr.

    Returns:
        The path of the log file

    Raises:
        OSError: If the log directory or file cannot be created.
    """
    log_path = os.path.expanduser(log_file) if log_file else default_log_file()
    log_dir = os.path.dirname(log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handlers: List[logging.Handler] = [logging.FileHandler(log_path, encoding="utf-8")]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )
    logger.info("Logging initialized, writing to: %s", log_path)
    return log_path


def _non_negative_int(value: str) -> int:
    parsed = int(value)
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative integer, got {value}")
    return parsed


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the check, ping and dns commands."""
    parser = argparse.ArgumentParser(
        prog="cxn",
        description="A CLI tool for quick ping and DNS connectivity checks",
        epilog=f"Logs are written to: {default_log_file()}",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", type=str, default=None, help="Path to config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output (mirror logs on stderr)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Log file path (default: see below)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    ping_parser = subparsers.add_parser("ping", help="Ping a host to check reachability")
    ping_parser.add_argument("host", help="Host to ping (IP address or hostname)")
    ping_parser.add_argument(
        "-n",
        "--count",
        type=_positive_int,
        default=DEFAULT_PING_COUNT,
        help=f"Number of ping attempts (default: {DEFAULT_PING_COUNT})",
    )
    ping_parser.add_argument(
        "-t",
        "--timeout",
        type=_positive_int,
        default=DEFAULT_PING_TIMEOUT_MS,
        help=f"Timeout in milliseconds (default: {DEFAULT_PING_TIMEOUT_MS})",
    )

    dns_parser = subparsers.add_parser("dns", help="Resolve DNS for a hostname")
    dns_parser.add_argument("hostname", help="Hostname to resolve")
    dns_parser.add_argument("-6", "--ipv6", action="store_true", help="Include IPv6 addresses")

    check_parser = subparsers.add_parser("check", help="Check connectivity for all configured hosts (default)")
    check_parser.add_argument(
        "-s",
        "--sequential",
        action="store_true",
        help="Run checks sequentially instead of in parallel",
    )
    check_parser.add_argument(
        "-w",
        "--watch",
        type=_non_negative_int,
        nargs="?",
        const=0,
        default=None,
        metavar="SECONDS",
        help="Repeat the check every SECONDS (without a value: $CXN_WATCH_INTERVAL or the config interval)",
    )
    return parser


def handle_options(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments, defaulting to the check command."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "check"
        args.sequential = False
        args.watch = None
    return args


def create_probes() -> Tuple[Resolver, Pinger]:
    """
    Build the shared resolver and pinger handles.

    Raises:
        ResolverUnavailableError: If no resolver configuration is available.
        PingerUnavailableError: If the ping command is missing.
    """
    return Resolver(), Pinger()


def cmd_ping(host: str, count: int, timeout_ms: int, use_color: bool, out: TextIO) -> int:
    """Handle the ``cxn ping`` command."""
    address = parse_ip_address(host)
    if address is None:
        resolution = Resolver().lookup(host, False)
        if not resolution.succeeded or not resolution.addresses:
            print(
                f"{colorize('Error', 'fail', use_color)}: {host} - {resolution.error or 'DNS resolution failed'}",
                file=sys.stderr,
            )
            return 1
        address = resolution.addresses[0]

    result = Pinger().probe_detailed(address, timeout_ms / 1000.0, count)
    out.write(format_detailed_ping(result, use_color) + "\n")
    return 0 if result.packets_received > 0 else 1


def cmd_dns(hostname: str, include_ipv6: bool, use_color: bool, out: TextIO) -> int:
    """Handle the ``cxn dns`` command."""
    result = Resolver().lookup_detailed(hostname, include_ipv6)
    out.write(format_detailed_dns(result, include_ipv6, use_color) + "\n")
    return 1 if result.error is not None else 0


def cmd_check(config: Config, sequential: bool, probes: Tuple[Resolver, Pinger], use_color: bool, out: TextIO) -> bool:
    """
    Run one check of all configured hosts with the verbose report.

    Returns:
        True if every checked host passed
    """
    hosts = config.hosts
    resolver, pinger = probes
    start_time = time.monotonic()
    out.write(f"Checking {len(hosts)} hosts...\n\n")

    results = run_checks(hosts, resolver, pinger, config.timeout, parallel=not sequential)
    for line in render_check_report(results, use_color):
        out.write(line + "\n")

    summary = summarize_results(hosts, results, elapsed=time.monotonic() - start_time)
    for result in failed_results(hosts, results):
        logger.warning("Check failed for %s (%s)", result.name, result.address)
    logger.info("Check finished: %d/%d hosts OK", summary.success_count, summary.hosts_checked)
    out.write(format_summary(summary, use_color) + "\n")
    return summary.all_ok


def cmd_check_compact(
    config: Config, sequential: bool, probes: Tuple[Resolver, Pinger], use_color: bool, out: TextIO
) -> bool:
    """Run one check of all configured hosts and print the compact table."""
    hosts = config.hosts
    resolver, pinger = probes
    results = run_checks(hosts, resolver, pinger, config.timeout, parallel=not sequential)
    for line in render_compact_table(results, use_color):
        out.write(line + "\n")
    out.write("\n")
    out.flush()

    summary = summarize_results(hosts, results)
    logger.info("Watch cycle finished: %d/%d hosts OK", summary.success_count, summary.hosts_checked)
    return summary.all_ok


def run_watch(
    config: Config,
    sequential: bool,
    interval: int,
    probes: Tuple[Resolver, Pinger],
    use_color: bool,
    out: TextIO,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Repeat the compact check every ``interval`` seconds until interrupted."""
    stop_event = stop_event if stop_event is not None else threading.Event()

    def on_cycle_start() -> None:
        clear_screen(out)
        out.write(format_watch_header(datetime.now(), interval, use_color) + "\n\n")

    loop = WatchLoop(
        interval,
        lambda: cmd_check_compact(config, sequential, probes, use_color, out),
        stop_event=stop_event,
        on_cycle_start=on_cycle_start,
    )

    def handle_interrupt(_signum, _frame) -> None:
        stop_event.set()

    previous_handler = signal.signal(signal.SIGINT, handle_interrupt)
    try:
        loop.run()
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    out.write(f"\n\n{colorize('Watch mode stopped.', 'warn', use_color)}\n")
    return 0


def run_check_with_watch(
    config: Config, sequential: bool, watch: Optional[int], use_color: bool, out: TextIO
) -> int:
    """Run the check command once or in watch mode, returning the exit status."""
    if not config.hosts:
        out.write(colorize("No hosts configured", "warn", use_color) + "\n")
        out.write("Add hosts to ~/.config/cxn/cxn.yml or ./cxn.yml to get started.\n")
        return 0

    interval = resolve_watch_interval(watch, config.interval)
    probes = create_probes()

    if interval is None:
        return 0 if cmd_check(config, sequential, probes, use_color, out) else 1

    logger.info("Starting watch mode every %ds", interval)
    return run_watch(config, sequential, interval, probes, use_color, out)


def run(args: argparse.Namespace, out: TextIO = sys.stdout) -> int:
    """Dispatch the parsed command and return the process exit status."""
    use_color = should_use_color(out, disabled=args.no_color)
    try:
        if args.command == "ping":
            return cmd_ping(args.host, args.count, args.timeout, use_color, out)
        if args.command == "dns":
            return cmd_dns(args.hostname, args.ipv6, use_color, out)

        try:
            config = load_config(args.config)
        except ValueError as exc:
            print(f"Error: Failed to load configuration: {exc}", file=sys.stderr)
            return 1
        return run_check_with_watch(config, args.sequential, args.watch, use_color, out)
    except (ResolverUnavailableError, PingerUnavailableError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entrypoint for the CLI - parses arguments and runs the application."""
    args = handle_options(argv)
    try:
        _configure_logging(args.log_level, args.log_file, args.verbose)
    except OSError as exc:
        print(f"Error: Failed to set up logging: {exc}", file=sys.stderr)
        return 1
    logger.info("Starting with config from: %s", args.config)
    return run(args)
