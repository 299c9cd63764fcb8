# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from contextlib import contextmanager
from typing import Generator

import structlog
from structlog import configure, get_config
from structlog.testing import LogCapture
from structlog.typing import EventDict

from modelclone.policies import PolicyBuilder, PolicyRegistry


@contextmanager
def capture_logs() -> Generator[list[EventDict], None, None]:
    """
    Collect the structlog events emitted while the context is active.

    Like :func:`structlog.testing.capture_logs`, but the contextvars are merged
    into the captured events as well. The processors list is modified in place,
    since cached loggers hold a reference to it. Not thread-safe.
    """
    cap = LogCapture()
    processors = get_config()["processors"]
    old_processors = processors.copy()
    try:
        processors.clear()
        processors.extend([structlog.contextvars.merge_contextvars, cap])
        configure(processors=processors)
        yield cap.entries
    finally:
        processors.clear()
        processors.extend(old_processors)
        configure(processors=processors)


class RegistryMixin:
    """
    Give each test a private policy registry.
    """

    def setUp(self):
        super().setUp()
        self.registry = PolicyRegistry()

    def define(self, model, builder=None):
        return self.registry.define(model, builder or PolicyBuilder())
