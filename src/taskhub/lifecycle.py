"""Graceful shutdown of publisher and storage resources."""

from __future__ import annotations

import asyncio
import signal
from collections.abc import Iterable
from types import FrameType
from typing import Any

import structlog

from taskhub.domain.interfaces import Closable

logger = structlog.get_logger()

SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class ShutdownCoordinator:
    """Closes every registered resource exactly once.

    Features:
    - Idempotent: every ``close`` call waits for the one shared drain
    - Parallel close of all resources
    - Error isolation (one failing or hanging resource doesn't affect others)
    """

    def __init__(self, resources: Iterable[Closable], timeout: float | None = 10.0) -> None:
        """Initialize coordinator.

        Args:
            resources: Resources to close on shutdown
            timeout: Upper bound in seconds for each close, None to wait forever
        """
        self._resources: list[Closable] = list(resources)
        self._timeout = timeout
        self._closing: asyncio.Future[None] | None = None
        self._previous_handlers: dict[signal.Signals, Any] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: asyncio.Task[None] | None = None
        self._requested_signal: signal.Signals | None = None

    @property
    def is_closed(self) -> bool:
        """Check if shutdown has started."""
        return self._closing is not None

    @property
    def resources(self) -> list[Closable]:
        """Registered resources."""
        return list(self._resources)

    @property
    def pending_drain(self) -> asyncio.Task[None] | None:
        """Drain task started by a signal on a running loop, if any."""
        return self._pending

    async def close(self) -> None:
        """Close all resources concurrently.

        Only the first call starts the drain; every call returns once it has
        finished. Failures are logged per resource.
        """
        if self._closing is None:
            self._closing = asyncio.ensure_future(self._drain())
        await asyncio.shield(self._closing)

    async def _drain(self) -> None:
        logger.info("shutdown_started", resource_count=len(self._resources))
        await asyncio.gather(*(self._close_one(resource) for resource in self._resources))
        logger.info("shutdown_completed")

    async def _close_one(self, resource: Closable) -> None:
        name = type(resource).__name__
        try:
            await asyncio.wait_for(resource.close(), timeout=self._timeout)
        except TimeoutError:
            logger.error("resource_close_timeout", resource=name, timeout=self._timeout)
        except Exception as e:
            logger.error(
                "resource_close_failed",
                resource=name,
                error=str(e),
                error_type=type(e).__name__,
            )
        else:
            logger.debug("resource_closed", resource=name)

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Drain resources when SIGINT or SIGTERM arrives.

        After draining, the previous handler is restored and the signal is
        delivered again so the process still terminates as it would have.

        Args:
            loop: Event loop the resources belong to
        """
        self._loop = loop
        for sig in SHUTDOWN_SIGNALS:
            try:
                self._previous_handlers[sig] = signal.signal(sig, self._handle_signal)
            except ValueError:
                # Not the main thread of the main interpreter
                logger.warning("signal_handler_unavailable", signal=sig.name)
        logger.debug("signal_handlers_installed")

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        sig = signal.Signals(signum)
        logger.info("shutdown_signal_received", signal=sig.name)

        loop = self._loop
        if loop is None or loop.is_closed():
            self._redeliver(sig)
            return

        if loop.is_running():
            # Let the loop finish the drain before the signal is re-raised
            self._requested_signal = sig
            loop.call_soon_threadsafe(self._schedule_drain, loop, sig)
            return

        loop.run_until_complete(self.close())
        self._redeliver(sig)

    def _schedule_drain(
        self, loop: asyncio.AbstractEventLoop, sig: signal.Signals
    ) -> asyncio.Task[None]:
        if self._pending is None:
            self._pending = loop.create_task(self.close())
            self._pending.add_done_callback(lambda _: self._redeliver(sig))
        return self._pending

    def finish_pending_drain(self) -> None:
        """Complete a signal-triggered drain the loop stopped before finishing.

        Owners that drive the loop with ``run_until_complete`` call this after
        each run. A signal that arrived during the run is otherwise left with
        a drain task on a stopped loop and is never delivered again.
        """
        sig = self._requested_signal
        loop = self._loop
        if sig is None or loop is None or loop.is_closed() or loop.is_running():
            return

        # Runs the redelivery callback too, even when the drain already finished
        loop.run_until_complete(self._schedule_drain(loop, sig))
        self._requested_signal = None

    def _redeliver(self, sig: signal.Signals) -> None:
        previous = self._previous_handlers.pop(sig, signal.SIG_DFL)
        if previous is None:
            previous = signal.SIG_DFL
        signal.signal(sig, previous)
        if callable(previous):
            previous(sig.value, None)
        elif previous == signal.SIG_DFL:
            signal.raise_signal(sig)
