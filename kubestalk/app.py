"""Application bootstrap for kubestalk.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: logging → differ → cache/dispatcher → watcher → collector
              → one watch task per resource kind (or one stdin task)

The app runs until every watch stream has ended or a SIGINT/SIGTERM
cancels the watch tasks. Shutdown stops components in reverse order.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import TYPE_CHECKING, TextIO

from rich.console import Console

from kubestalk.cache import ResourceCache
from kubestalk.diff import Differ
from kubestalk.errors import StalkError
from kubestalk.models.config import StalkConfig
from kubestalk.observability.logging import get_logger, setup_logging
from kubestalk.watcher import Dispatcher, Watcher

if TYPE_CHECKING:
    import structlog

    from kubestalk.collector.kubernetes import KubernetesCollector


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class StalkApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    ``stop()`` is safe to call on an app that was never started or that is
    already stopped.
    """

    def __init__(
        self,
        config: StalkConfig,
        console: Console | None = None,
        stdin: TextIO | None = None,
    ) -> None:
        self.config = config
        self._console = console
        self._stdin = stdin

        self._differ: Differ | None = None
        self._cache: ResourceCache | None = None
        self._dispatcher: Dispatcher | None = None
        self._watcher: Watcher | None = None
        self._collector: KubernetesCollector | None = None

        # one task per watched kind
        self._watch_tasks: list[asyncio.Task[int]] = []

        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    @property
    def cache(self) -> ResourceCache | None:
        return self._cache

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a component cannot start.
        """
        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.debug("kubestalk starting", version=_kubestalk_version())

        self._start_differ()
        self._start_dispatcher()

        if self.config.watch.stdin:
            self._start_stdin()
        else:
            await self._start_collector()
            await self._start_watches()

        self._running = True

    def _start_differ(self) -> None:
        assert self._log is not None
        try:
            self._differ = Differ(self.config.diff, console=self._console)
        except StalkError as exc:
            raise _ComponentError("differ", exc) from exc

    def _start_dispatcher(self) -> None:
        assert self._differ is not None
        self._cache = ResourceCache()
        self._dispatcher = Dispatcher(self._differ, self._cache)
        self._watcher = Watcher(
            self._dispatcher,
            namespaces=self.config.watch.namespaces,
            names=self.config.watch.names,
        )

    def _start_stdin(self) -> None:
        assert self._log is not None
        assert self._watcher is not None
        from kubestalk.collector.stdin import stdin_events

        stream = stdin_events(self._stdin or sys.stdin)
        task = asyncio.create_task(self._watcher.watch(stream), name="watch-stdin")
        self._watch_tasks.append(task)
        self._log.debug("reading objects from stdin")

    async def _start_collector(self) -> None:
        """Connect to the cluster from in-cluster config or kubeconfig."""
        assert self._log is not None
        self._log.debug("starting k8s client")
        try:
            from kubestalk.collector.kubernetes import KubernetesCollector

            collector = KubernetesCollector(
                kubeconfig=self.config.watch.kubeconfig,
                label_selector=self.config.watch.label_selector,
            )
            await collector.connect()
            self._collector = collector
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    async def _start_watches(self) -> None:
        """Resolve every requested kind and start one watch task per kind."""
        assert self._log is not None
        assert self._collector is not None
        assert self._watcher is not None

        self._log.debug("resolving resource kinds")
        kinds = {}
        for resource in self.config.watch.kinds:
            try:
                resolved = await self._collector.resolve(resource)
            except StalkError as exc:
                raise _ComponentError("resolver", exc) from exc
            self._log.debug(
                "resolved",
                group=resolved.group,
                version=resolved.version,
                kind=resolved.kind,
            )
            # "deploy,deployments" must not watch twice
            kinds[str(resolved)] = resolved

        self._log.debug("starting to watch resources")
        for name, kind in kinds.items():
            task = asyncio.create_task(
                self._watcher.watch(self._collector.events(kind)),
                name=f"watch-{name}",
            )
            self._watch_tasks.append(task)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def wait(self) -> None:
        """Block until every watch task has ended or was cancelled."""
        if not self._watch_tasks:
            return
        results = await asyncio.gather(*self._watch_tasks, return_exceptions=True)
        log = self._log or get_logger("app")
        for task, result in zip(self._watch_tasks, results, strict=True):
            if isinstance(result, asyncio.CancelledError):
                continue
            if isinstance(result, BaseException):
                log.error("watch_failed", task=task.get_name(), error=str(result))
            else:
                log.debug("watch_ended", task=task.get_name(), dispatched=result)

    def cancel(self) -> None:
        """Ask every watch task to stop."""
        for task in self._watch_tasks:
            if not task.done():
                task.cancel()

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Cancel the watches and close the cluster connection."""
        if not self._running and self._log is None:
            # never started
            return

        self._running = False
        self.cancel()
        if self._watch_tasks:
            await asyncio.gather(*self._watch_tasks, return_exceptions=True)
        self._watch_tasks.clear()

        if self._collector is not None:
            log = self._log or get_logger("app")
            try:
                await self._collector.close()
            except Exception as exc:
                log.debug("k8s client close raised (non-fatal)", error=str(exc))
            self._collector = None


def _kubestalk_version() -> str:
    from kubestalk import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: StalkConfig) -> None:
    """Create the app, register OS signals, run until the watches end."""
    app = StalkApp(config)
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, app.cancel)

    try:
        await app.start()
        await app.wait()
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        raise SystemExit(1) from exc
    finally:
        await app.stop()
