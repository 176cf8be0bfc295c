# src/omado/theme/theme_watcher.py

"""
Theme watcher.

A small polling loop that:
- resolves the theme once, synchronously, before the UI draws anything,
- polls modification stamps of the root file and every file it imported,
- collapses bursts of changes into one re-resolution (trailing debounce),
- publishes each successfully resolved ThemeDocument into a LatestValue cell.

A failed resolution keeps the previous document. An unexpected OS error while
polling stops the watcher (state IDLE, degraded=True) and also keeps the
previous document.
"""

from __future__ import annotations

import asyncio
import contextlib
import errno
import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Generic, TypeVar

from .theme_models import DEFAULT_THEME, ThemeDocument, ThemeError, ThemeIssue, ThemeResolution
from .theme_parser import resolve_theme

logger = logging.getLogger(__name__)

T = TypeVar("T")

Stamp = tuple[int, int] | None
Snapshot = dict[Path, Stamp]


class LatestValue(Generic[T]):
    """
    Single-slot cell holding the most recently published value.

    The lock only guards the swap, so get() never waits for a resolution in
    progress; readers see the previous value until publish() returns.
    """

    def __init__(self, initial: T) -> None:
        self._lock = threading.Lock()
        self._value = initial
        self._version = 0
        self._listeners: list[Callable[[T], None]] = []

    def get(self) -> T:
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def publish(self, value: T) -> int:
        with self._lock:
            self._value = value
            self._version += 1
            version = self._version
            listeners = list(self._listeners)
        for cb in listeners:
            try:
                cb(value)
            except Exception:
                logger.exception("LatestValue listener failed")
        return version

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock, contextlib.suppress(ValueError):
                self._listeners.remove(callback)

        return unsubscribe


class WatcherState(StrEnum):
    IDLE = "idle"
    WATCHING = "watching"
    CHANGE_DETECTED = "change_detected"
    RESOLVING = "resolving"


def _stamp(path: Path) -> Stamp:
    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return None
    except OSError as exc:
        # A path that can never exist counts as absent.
        if exc.errno == errno.ENAMETOOLONG:
            return None
        raise
    return st.st_mtime_ns, st.st_size


def _snapshot(paths: Iterable[Path]) -> Snapshot:
    return {p: _stamp(p) for p in paths}


class ThemeWatcher:
    def __init__(
        self,
        root: str | Path,
        *,
        resolver: Callable[[Path], ThemeResolution] = resolve_theme,
        poll_interval: float = 0.5,
        debounce: float = 0.25,
        max_delay: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        fallback: ThemeDocument = DEFAULT_THEME,
    ) -> None:
        self.root = Path(root).expanduser()
        self.palette: LatestValue[ThemeDocument] = LatestValue(fallback)

        self._resolver = resolver
        self._poll_interval = max(0.01, float(poll_interval))
        self._debounce = max(0.0, float(debounce))
        self._max_delay = float(max_delay) if max_delay is not None else 4 * self._debounce
        self._clock = clock

        self._state = WatcherState.IDLE
        self._watched: tuple[Path, ...] = (self.root,)
        self._last_snapshot: Snapshot = {}
        self._pending_since: float | None = None
        self._last_change: float | None = None

        self.resolutions = 0
        self.degraded = False
        self.last_error: Exception | None = None
        self.last_issues: tuple[ThemeIssue, ...] = ()
        self._runner: ThemeWatcherRunner | None = None

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def watched(self) -> tuple[Path, ...]:
        return self._watched

    def current(self) -> ThemeDocument:
        return self.palette.get()

    def _set_state(self, state: WatcherState) -> None:
        if state != self._state:
            logger.debug("ThemeWatcher %s -> %s", self._state.value, state.value)
            self._state = state

    # ---- resolution ----

    def initialize(self) -> bool:
        """Blocking first resolution; the fallback palette stays if it fails."""
        ok = self.resolve_now()
        self._set_state(WatcherState.WATCHING)
        return ok

    def resolve_now(self) -> bool:
        """Resolve and publish. Returns False (and keeps the old palette) on failure."""
        self._set_state(WatcherState.RESOLVING)
        before = self._snapshot_or_empty(self._watched)
        self.resolutions += 1
        try:
            resolution = self._resolver(self.root)
        except ThemeError as exc:
            self.last_error = exc
            self._last_snapshot = before
            self._set_state(WatcherState.WATCHING)
            logger.warning("Theme resolution failed, keeping last palette: %s", exc)
            return False

        self.last_error = None
        self.last_issues = resolution.issues
        sources = tuple(dict.fromkeys(resolution.sources or (self.root,)))
        if sources != self._watched:
            self._watched = sources
            self._last_snapshot = self._snapshot_or_empty(sources)
        else:
            self._last_snapshot = before
        version = self.palette.publish(resolution.document)
        self._set_state(WatcherState.WATCHING)
        logger.info(
            "Theme published version=%d files=%d issues=%d",
            version,
            len(self._watched),
            len(resolution.issues),
        )
        return True

    def _snapshot_or_empty(self, paths: Iterable[Path]) -> Snapshot:
        # An empty snapshot makes the next check() see a change and retry the stat.
        try:
            return _snapshot(paths)
        except OSError as exc:
            logger.warning("Cannot stat theme files, deferring to the next poll: %s", exc)
            return {}

    # ---- polling ----

    def check(self, now: float | None = None) -> bool:
        """
        One poll step. Returns True if a re-resolution was attempted.

        Raises OSError if a watched file cannot be stat'ed for a reason other
        than being absent.
        """
        if now is None:
            now = self._clock()

        snap = _snapshot(self._watched)
        if snap != self._last_snapshot:
            self._last_snapshot = snap
            if self._pending_since is None:
                self._pending_since = now
            self._last_change = now
            self._set_state(WatcherState.CHANGE_DETECTED)
            logger.debug("Theme change detected at %.3f", now)

        if self._pending_since is None or self._last_change is None:
            return False

        quiet = now - self._last_change >= self._debounce
        overdue = now - self._pending_since >= self._max_delay
        if not (quiet or overdue):
            return False

        self._pending_since = None
        self._last_change = None
        self.resolve_now()
        return True

    async def run(self, stop_event: asyncio.Event) -> None:
        """Poll until stop_event is set, or until polling itself fails."""
        self._set_state(WatcherState.WATCHING)
        logger.info("ThemeWatcher started root=%s interval=%.2fs", self.root, self._poll_interval)
        try:
            while not stop_event.is_set():
                try:
                    self.check()
                except OSError as exc:
                    self.degraded = True
                    self.last_error = exc
                    logger.error("Theme watch degraded, keeping last palette: %s", exc)
                    break
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(stop_event.wait(), timeout=self._poll_interval)
        finally:
            self._set_state(WatcherState.IDLE)
            logger.info("ThemeWatcher stopped root=%s", self.root)

    # ---- background thread ----

    def start(self) -> ThemeWatcherRunner | None:
        """Resolve synchronously, then keep watching on a background thread."""
        self.initialize()
        self._runner = start_theme_watcher_in_background(self)
        return self._runner

    def stop(self, timeout: float | None = 5.0) -> None:
        runner = self._runner
        if runner is None:
            return
        runner.stop()
        runner.join(timeout=timeout)
        self._runner = None


@dataclass(slots=True)
class ThemeWatcherRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            # Loop already closed: the watcher has exited on its own.
            logger.debug("ThemeWatcher loop already closed.")

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_theme_watcher_in_background(watcher: ThemeWatcher) -> ThemeWatcherRunner | None:
    """
    Run watcher.run() on a daemon thread with its own event loop.

    The console front end blocks on input(), so the watcher cannot share its thread.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(watcher.run(stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="omado-theme-watcher", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Theme watcher thread did not initialize properly.")
        return None

    logger.debug("Theme watcher background thread started.")
    return ThemeWatcherRunner(thread=t, loop=loop, stop_event=stop_event)
