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
Aggregate statistics for cxn check runs.

Only hosts with at least one enabled check take part in the tally: a host with
no checks is vacuously successful but counts in neither the successes nor the
number of hosts checked.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from cxn.models import HostResult, HostSpec


@dataclass(frozen=True)
class CheckSummary:
    """Success tally for one check run."""

    success_count: int
    hosts_checked: int
    elapsed: Optional[float] = None

    @property
    def failed_count(self) -> int:
        return self.hosts_checked - self.success_count

    @property
    def all_ok(self) -> bool:
        return self.success_count == self.hosts_checked


def count_checked_hosts(hosts: Sequence[HostSpec]) -> int:
    """Number of hosts with at least one check enabled."""
    return sum(1 for host in hosts if host.has_checks())


def summarize_results(
    hosts: Sequence[HostSpec],
    results: Sequence[HostResult],
    elapsed: Optional[float] = None,
) -> CheckSummary:
    """
    Tally the results of a run.

    Args:
        hosts: The hosts that were checked
        results: Results in the same order as ``hosts``
        elapsed: Optional wall-clock duration of the run in seconds

    Returns:
        CheckSummary counting successes among hosts with checks enabled
    """
    if len(hosts) != len(results):
        raise ValueError(f"Expected {len(hosts)} results, got {len(results)}")
    success_count = sum(1 for host, result in zip(hosts, results) if host.has_checks() and result.is_success())
    return CheckSummary(success_count=success_count, hosts_checked=count_checked_hosts(hosts), elapsed=elapsed)


def failed_results(hosts: Sequence[HostSpec], results: Sequence[HostResult]) -> List[HostResult]:
    """Results of checked hosts that did not fully succeed."""
    return [result for host, result in zip(hosts, results) if host.has_checks() and not result.is_success()]
