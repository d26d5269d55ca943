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
Check scheduler for cxn.

This module fans a host list out to check_host(), either one host after the
other or on a bounded pool of worker threads, and returns the results in the
original host order regardless of completion order.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, Tuple

from cxn.host_probe import PingerLike, ResolverLike, check_host
from cxn.models import HostResult, HostSpec, ProbeOutcome, ResolutionOutcome

logger = logging.getLogger(__name__)

MAX_CONCURRENT_CHECKS = 20  # Hard cap on in-flight host checks.


def _failed_result(host: HostSpec, error: str) -> HostResult:
    """Build the result reported for a host whose check crashed."""
    resolution: Optional[ResolutionOutcome] = None
    probe: Optional[ProbeOutcome] = None
    if host.should_resolve_dns():
        resolution = ResolutionOutcome.failure(error)
    if host.want_ping:
        probe = ProbeOutcome.failure(error)
    return HostResult(name=host.name, address=host.address, resolution=resolution, probe=probe)


def _isolated_check(host: HostSpec, resolver: ResolverLike, pinger: PingerLike, timeout: float) -> HostResult:
    """Run check_host() so that a fault degrades to a failed result for this host only."""
    try:
        return check_host(host, resolver, pinger, timeout)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected error while checking %s (%s)", host.name, host.address)
        return _failed_result(host, f"internal error: {e}")


def run_sequential_checks(
    hosts: Sequence[HostSpec],
    resolver: ResolverLike,
    pinger: PingerLike,
    timeout: float,
) -> List[HostResult]:
    """Check each host in turn."""
    return [_isolated_check(host, resolver, pinger, timeout) for host in hosts]


def run_parallel_checks(
    hosts: Sequence[HostSpec],
    resolver: ResolverLike,
    pinger: PingerLike,
    timeout: float,
    max_concurrency: int = MAX_CONCURRENT_CHECKS,
) -> List[HostResult]:
    """
    Check hosts concurrently with at most ``max_concurrency`` checks in flight.

    Each submitted check is tagged with its index in ``hosts``; results are
    sorted by that index once every check has completed.
    """
    if not hosts:
        return []

    workers = max(1, min(max_concurrency, len(hosts)))
    indexed_results: List[Tuple[int, HostResult]] = []

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cxn-check") as executor:
        futures: Dict[Future, int] = {
            executor.submit(_isolated_check, host, resolver, pinger, timeout): idx for idx, host in enumerate(hosts)
        }
        for future in as_completed(futures):
            idx = futures[future]
            try:
                result = future.result()
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.exception("Check worker for %s failed", hosts[idx].name)
                result = _failed_result(hosts[idx], f"internal error: {e}")
            indexed_results.append((idx, result))

    indexed_results.sort(key=lambda item: item[0])
    return [result for _, result in indexed_results]


def run_checks(
    hosts: Sequence[HostSpec],
    resolver: ResolverLike,
    pinger: PingerLike,
    timeout: float,
    parallel: bool = True,
    max_concurrency: int = MAX_CONCURRENT_CHECKS,
) -> List[HostResult]:
    """
    Run all host checks.

    Args:
        hosts: Hosts to check, in display order
        resolver: Shared resolver handle
        pinger: Shared pinger handle
        timeout: Per-probe timeout in seconds
        parallel: Run checks concurrently (default) instead of sequentially
        max_concurrency: Upper bound on concurrently running checks

    Returns:
        One HostResult per host, ``results[i]`` belonging to ``hosts[i]``
    """
    logger.debug("Checking %d hosts (%s)", len(hosts), "parallel" if parallel else "sequential")
    if parallel:
        return run_parallel_checks(hosts, resolver, pinger, timeout, max_concurrency)
    return run_sequential_checks(hosts, resolver, pinger, timeout)
