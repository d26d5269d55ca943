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
# Review for correctness and security.

"""
Shared test helpers for cxn.

captured_logs() collects the records a cxn logger emits inside a ``with``
block; tests import it directly.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional


class RecordList(list):
    """Collected log records with a shortcut to their rendered messages."""

    def messages(self) -> List[str]:
        return [record.getMessage() for record in self]

    def contains(self, fragment: str) -> bool:
        return any(fragment in message for message in self.messages())


class _Collector(logging.Handler):
    def __init__(self, sink: RecordList, level: int) -> None:
        super().__init__(level)
        self.sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        self.sink.append(record)


@contextmanager
def captured_logs(logger_name: Optional[str] = "cxn", level: int = logging.WARNING) -> Iterator[RecordList]:
    """
    Collect records of ``level`` and above from ``logger_name``.

    The logger is opened up to ``level`` for the duration of the block and
    records still reach any handlers further up the hierarchy.
    """
    sink = RecordList()
    target = logging.getLogger(logger_name)
    collector = _Collector(sink, level)
    saved_level = target.level
    if target.getEffectiveLevel() > level:
        target.setLevel(level)
    target.addHandler(collector)
    try:
        yield sink
    finally:
        target.removeHandler(collector)
        target.setLevel(saved_level)

