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
Watch mode for cxn.

WatchLoop repeats a check cycle on a fixed interval until a stop event is set.
The wait after each cycle is measured from the cycle's start, not from its end,
so slow cycles do not push later cycles back.
"""

import logging
import os
import threading
import time
from enum import Enum
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

WATCH_INTERVAL_ENV = "CXN_WATCH_INTERVAL"


class WatchState(Enum):
    """Lifecycle of a watch loop."""

    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


def _parse_positive_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def resolve_watch_interval(
    cli_value: Optional[int],
    config_interval: Optional[int],
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[int]:
    """
    Resolve the watch interval in seconds.

    Precedence: ``--watch N`` > CXN_WATCH_INTERVAL > config interval.

    Args:
        cli_value: None when ``--watch`` was not given, 0 when given without a
            value, otherwise the explicit interval
        config_interval: Interval from the config file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Interval in seconds, or None when watch mode is disabled
    """
    if cli_value is None:
        return None
    if cli_value > 0:
        return cli_value

    if environ is None:
        environ = os.environ
    raw_env = environ.get(WATCH_INTERVAL_ENV)
    env_value = _parse_positive_int(raw_env)
    if raw_env is not None and env_value is None:
        logger.warning("Ignoring invalid %s value %r", WATCH_INTERVAL_ENV, raw_env)
    if env_value is not None:
        return env_value
    if config_interval is not None and config_interval > 0:
        return config_interval
    return None


def compute_remaining(interval: float, elapsed: float) -> float:
    """Time left in the current cycle, never negative."""
    return max(0.0, interval - elapsed)


class WatchLoop:
    """
    Run ``run_cycle`` every ``interval`` seconds until ``stop_event`` is set.

    A stop request only takes effect between cycles: a cycle that is already
    running finishes, and no further cycle is started.
    """

    def __init__(
        self,
        interval: float,
        run_cycle: Callable[[], object],
        stop_event: Optional[threading.Event] = None,
        on_cycle_start: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the WatchLoop.

        Args:
            interval: Seconds between cycle starts
            run_cycle: Callable performing one check cycle
            stop_event: Event that ends the loop (created if not provided)
            on_cycle_start: Optional callable invoked before each cycle (screen repaint)
            clock: Monotonic time source
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.run_cycle = run_cycle
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self.on_cycle_start = on_cycle_start
        self.clock = clock
        self.state = WatchState.IDLE
        self.cycles = 0

    def stop(self) -> None:
        """Request the loop to stop after the current cycle."""
        self.stop_event.set()

    def run(self) -> int:
        """
        Run cycles until stopped.

        Returns:
            Number of completed cycles
        """
        if self.state is not WatchState.IDLE:
            raise RuntimeError(f"watch loop cannot be started from state {self.state.value}")

        while not self.stop_event.is_set():
            self.state = WatchState.RUNNING
            cycle_start = self.clock()
            if self.on_cycle_start is not None:
                self.on_cycle_start()
            self.run_cycle()
            self.cycles += 1

            remaining = compute_remaining(self.interval, self.clock() - cycle_start)
            self.state = WatchState.SLEEPING
            logger.debug("Cycle %d done, next cycle in %.2fs", self.cycles, remaining)
            if self.stop_event.wait(remaining):
                break

        self.state = WatchState.STOPPED
        logger.info("Watch mode stopped after %d cycles", self.cycles)
        return self.cycles
