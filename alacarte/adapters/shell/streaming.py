"""
Event stream runner — publish command progress to a consumer thread.

Wraps another runner. Every command, its outcome and every progress
annotation becomes a ``LogEvent`` on a bounded queue. A consumer (the
CLI's printer thread) drains the queue; when it falls behind, producers
block on ``put`` until there is room.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass

from alacarte.adapters.base import CommandRunner
from alacarte.core.services.provision.errors import CommandError

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 256


@dataclass(frozen=True)
class LogEvent:
    """One progress record.

    ``level`` is one of ``section``, ``info``, ``output``, ``success``
    or ``error``.
    """

    level: str
    text: str


class EventStreamRunner(CommandRunner):
    """Decorate *inner* so that its activity is streamed as events.

    ``close()`` puts a ``None`` sentinel on the queue to tell the
    consumer no more events will follow.
    """

    def __init__(self, inner: CommandRunner, events: queue.Queue | None = None):
        self.inner = inner
        self.events: queue.Queue = events if events is not None else queue.Queue(
            maxsize=DEFAULT_QUEUE_SIZE
        )

    @property
    def name(self) -> str:
        return f"stream:{self.inner.name}"

    def emit(self, level: str, text: str) -> None:
        self.events.put(LogEvent(level, text))

    def run(self, command: str, *args: str) -> None:
        if self.is_pseudo(command):
            self.emit(command, " ".join(args))
            self.inner.run(command, *args)
            return

        line = " ".join((command, *args))
        self.emit("info", line)
        try:
            self.inner.run(command, *args)
        except CommandError as e:
            self.emit("error", f"Error: {e}")
            raise
        self.emit("success", f"Success: {line}")

    def output(self, command: str, *args: str) -> bytes:
        return self.inner.output(command, *args)

    def close(self) -> None:
        self.events.put(None)
