"""Progress reporting and deadline alerts for slow expansions and searches.

Supervision is advisory only: the watched work always runs to completion in
the calling thread, and the watcher thread never touches its result.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..ui_theme import DEFAULT_THEME, UITheme

logger = logging.getLogger(__name__)

ALERT_SECONDS = 4.0
PROGRESS_REFRESH_SECONDS = 0.1

T = TypeVar("T")


class ProgressTask:
    """One level of nested progress; ``total=None`` means size unknown."""

    def __init__(self, supervisor: ProgressSupervisor, label: str, total: int | None) -> None:
        self._supervisor = supervisor
        self.label = label
        self.total = total
        self.done = 0

    @property
    def fraction(self) -> float:
        if not self.total:
            return 0.0
        return max(0.0, min(1.0, self.done / self.total))

    def tick(self, count: int = 1) -> None:
        self.done += count
        self._supervisor._maybe_report()


class DeadlineWatcher:
    """Background thread that calls ``on_alert`` once ``seconds`` of unpaused time pass."""

    def __init__(
        self,
        seconds: float,
        on_alert: Callable[[], None],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.seconds = seconds
        self._on_alert = on_alert
        self._clock = clock
        self._cond = threading.Condition()
        self._stopped = False
        self._fired = False
        self._elapsed_before_pause = 0.0
        self._running_since: float | None = None
        self._thread: threading.Thread | None = None

    @property
    def fired(self) -> bool:
        with self._cond:
            return self._fired

    def _remaining_locked(self) -> float | None:
        if self._running_since is None:
            return None
        elapsed = self._elapsed_before_pause + (self._clock() - self._running_since)
        return self.seconds - elapsed

    def _run(self) -> None:
        fire = False
        with self._cond:
            while not self._stopped:
                remaining = self._remaining_locked()
                if remaining is None:
                    self._cond.wait()
                    continue
                if remaining <= 0:
                    self._fired = True
                    fire = True
                    break
                self._cond.wait(remaining)
        if fire:
            self._on_alert()

    def start(self) -> None:
        with self._cond:
            self._running_since = self._clock()
        self._thread = threading.Thread(target=self._run, name="lazyscope-deadline", daemon=True)
        self._thread.start()

    def pause(self) -> None:
        with self._cond:
            if self._running_since is not None:
                self._elapsed_before_pause += self._clock() - self._running_since
                self._running_since = None
            self._cond.notify_all()

    def resume(self) -> None:
        with self._cond:
            if self._running_since is None and not self._stopped:
                self._running_since = self._clock()
            self._cond.notify_all()

    def stop(self) -> None:
        with self._cond:
            self._stopped = True
            self._cond.notify_all()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()


@dataclass(frozen=True)
class Supervised(Generic[T]):
    """Outcome of one supervised unit of work."""

    value: T | None
    error: Exception | None
    elapsed: float
    alerted: bool

    def unwrap(self) -> T | None:
        if self.error is not None:
            raise self.error
        return self.value


class ProgressSupervisor:
    """Run work under nested progress reporting and a single deadline alert.

    ``on_progress`` receives the supervisor whenever the bar should be
    redrawn (throttled). ``on_alert`` is called from the watcher thread.
    """

    def __init__(
        self,
        alert_seconds: float = ALERT_SECONDS,
        on_alert: Callable[[str], None] | None = None,
        on_progress: Callable[[ProgressSupervisor], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.alert_seconds = alert_seconds
        self.on_alert = on_alert
        self.on_progress = on_progress
        self._clock = clock
        self.tasks: list[ProgressTask] = []
        self._watcher: DeadlineWatcher | None = None
        self._last_report = 0.0
        self._alert_flag = threading.Event()

    @contextlib.contextmanager
    def task(self, label: str, total: int | None = None) -> Iterator[ProgressTask]:
        progress = ProgressTask(self, label, total)
        self.tasks.append(progress)
        try:
            yield progress
        finally:
            self.tasks.remove(progress)

    @contextlib.contextmanager
    def paused(self) -> Iterator[None]:
        """Exclude the enclosed time (user text entry) from the running deadline."""
        watcher = self._watcher
        if watcher is None:
            yield
            return
        watcher.pause()
        try:
            yield
        finally:
            watcher.resume()

    @property
    def alert_pending(self) -> bool:
        return self._alert_flag.is_set()

    def consume_alert(self) -> bool:
        """Return whether an alert fired since the last call, clearing the flag."""
        was_set = self._alert_flag.is_set()
        self._alert_flag.clear()
        return was_set

    def supervise(self, label: str, work: Callable[[], T]) -> Supervised[T]:
        """Run ``work`` now; report whether it outlived the deadline.

        Nested calls share the outermost watcher so one slow operation rings
        at most once. Exceptions from ``work`` are captured, not raised.
        """
        owns_watcher = self._watcher is None
        if owns_watcher:

            def fire() -> None:
                logger.warning("%s still running after %.1fs", label, self.alert_seconds)
                self._alert_flag.set()
                if self.on_alert is not None:
                    self.on_alert(label)

            self._watcher = DeadlineWatcher(self.alert_seconds, fire, clock=self._clock)
            self._watcher.start()
        watcher = self._watcher
        started = self._clock()
        value: T | None = None
        error: Exception | None = None
        try:
            with self.task(label):
                value = work()
        except Exception as exc:
            error = exc
        finally:
            if owns_watcher:
                watcher.stop()
                self._watcher = None
        return Supervised(
            value=value,
            error=error,
            elapsed=self._clock() - started,
            alerted=watcher.fired,
        )

    def _maybe_report(self) -> None:
        if self.on_progress is None:
            return
        now = self._clock()
        if now - self._last_report < PROGRESS_REFRESH_SECONDS:
            return
        self._last_report = now
        self.on_progress(self)

    def render_bar(self, width: int, theme: UITheme = DEFAULT_THEME) -> str:
        """Render one segment per active task, outermost on the left."""
        if width <= 0 or not self.tasks:
            return ""
        count = len(self.tasks)
        base, extra = divmod(width, count)
        segments: list[str] = []
        for index, progress in enumerate(self.tasks):
            seg_width = base + (1 if index < extra else 0)
            if seg_width <= 0:
                continue
            label = progress.label[: max(0, seg_width - 1)].ljust(seg_width)
            filled = int(round(progress.fraction * seg_width))
            segments.append(
                f"{theme.progress_fill}{label[:filled]}{theme.reset}"
                f"{theme.progress_empty}{label[filled:]}{theme.reset}"
            )
        return "".join(segments)
