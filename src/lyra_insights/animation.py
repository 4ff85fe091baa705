"""
Accumulator animator for Lyra Insights.

PURPOSE: Count-up values for counter displays ("Lyra saved you $248").
AI CONTEXT: The only time-driven component. Everything else is pure.

SEQUENCE:
- step = target / (duration_ms / tick_ms)
- tick k emits floor(k * step) while k * step < target
- the first tick reaching target emits target exactly and ends the sequence
- non-decreasing, never overshoots

DRIVING:
- Iterate a CounterAnimation to pull values in virtual time (tests, CLI)
- Await CounterAnimation.run(callback) to emit values in real time, one
  per tick, using asyncio.sleep between ticks

OWNERSHIP:
AnimatedCounter owns at most one animation. Changing the target cancels
the running animation before the new one is created; teardown() cancels
it for good. A cancelled animation emits nothing further.

USAGE:
    animation = animate_to(100, duration_ms=1000)
    values = list(animation)          # [1, 3, 4, ..., 99, 100]

    counter = AnimatedCounter()
    counter.set_target(248.0)
    task = counter.start()            # inside a running event loop
    ...
    counter.teardown()
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable, Iterator

from .config import Config

__all__ = ["CounterAnimation", "AnimatedCounter", "animate_to"]

logger = logging.getLogger(__name__)


class CounterAnimation:
    """
    Cancelable, lazily evaluated count-up from 0 to a target.

    The handle is returned when the animation starts and must be
    cancelled when its display goes away. Iteration and run() share the
    same value sequence and the same cancellation flag.
    """

    def __init__(
        self,
        target: float,
        duration_ms: float | None = None,
        tick_ms: float | None = None,
    ) -> None:
        """
        Prepare an animation without emitting anything yet.

        Args:
            target: Final value. Non-finite targets resolve to 0.
            duration_ms: Total duration. Default Config.ANIMATION_DURATION_MS.
                Zero or less emits the target at once.
            tick_ms: Interval between values. Default Config.TICK_INTERVAL_MS.

        Example:
            >>> CounterAnimation(100, 1000).step
            1.6
        """
        if not math.isfinite(target):
            logger.warning(f"Non-finite counter target {target!r}, animating to 0")
            target = 0.0
        self.target = float(target)
        if duration_ms is None:
            duration_ms = Config.ANIMATION_DURATION_MS
        if tick_ms is None:
            tick_ms = Config.TICK_INTERVAL_MS
        self.duration_ms = float(duration_ms)
        self.tick_ms = float(tick_ms)
        ticks = self.duration_ms / self.tick_ms if self.tick_ms > 0 else 0.0
        self.step = self.target / ticks if ticks > 0 else self.target
        self._cancelled = False
        self._finished = False

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._cancelled

    @property
    def finished(self) -> bool:
        """True once the target value has been emitted."""
        return self._finished

    def cancel(self) -> None:
        """Stop the animation. No value is emitted after this returns."""
        self._cancelled = True

    def _values(self) -> Iterator[float]:
        if self.target <= 0 or self.step <= 0:
            yield self.target
            return
        k = 1
        while True:
            reached = k * self.step
            if reached >= self.target:
                yield self.target
                return
            yield float(math.floor(reached))
            k += 1

    def __iter__(self) -> Iterator[float]:
        """
        Yield values lazily until the target is reached or cancelled.

        Cancellation is checked before every value, so a consumer that
        cancels mid-iteration receives nothing further.
        """
        for value in self._values():
            if self._cancelled:
                return
            if value == self.target:
                self._finished = True
            yield value

    async def run(
        self,
        on_tick: Callable[[float], None],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Emit values in real time, one per tick.

        Waits one tick interval before each value, like an interval timer.
        Returns when the target is emitted or the animation is cancelled;
        task cancellation (asyncio.CancelledError) propagates after the
        handle is marked cancelled.

        Args:
            on_tick: Called with each value, in order.
            sleep: Awaitable sleep taking seconds. Injectable for tests.

        Example:
            >>> asyncio.run(CounterAnimation(10, 64).run(print))
        """
        try:
            for value in self:
                await sleep(self.tick_ms / 1000.0)
                if self._cancelled:
                    return
                on_tick(value)
        except asyncio.CancelledError:
            self._cancelled = True
            raise


def animate_to(target: float, duration_ms: float | None = None) -> CounterAnimation:
    """
    Start a count-up animation from 0 to target.

    Business context: The savings card counts up to the amount saved when
    it appears. The count restarts from 0 whenever the amount changes.

    Args:
        target: Final value.
        duration_ms: Total duration. Default 2000 ms.

    Returns:
        CounterAnimation handle: iterate it, or await run(), and cancel()
        it on teardown.

    Example:
        >>> values = list(animate_to(100, 1000))
        >>> values[-1], len(values)
        (100.0, 63)
    """
    return CounterAnimation(target, duration_ms)


class AnimatedCounter:
    """
    Counter display state owning a single animation.

    STATE:
    - current: Last emitted value (0 before the first tick)
    - target: Value being animated to
    - started_at: Monotonic clock reading when the animation started

    DISCIPLINE:
    Clear-before-create. set_target() cancels the outstanding animation
    and its task before starting a new one, so two timers never race on
    the same display value.
    """

    def __init__(
        self,
        duration_ms: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Create an idle counter.

        Args:
            duration_ms: Duration for every animation this counter runs.
            clock: Time source for started_at. Injectable for tests.
        """
        self.duration_ms = duration_ms
        self._clock = clock
        self.current = 0.0
        self.target: float | None = None
        self.started_at: float | None = None
        self._animation: CounterAnimation | None = None
        self._values: Iterator[float] | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def animation(self) -> CounterAnimation | None:
        """Handle of the animation currently owned, if any."""
        return self._animation

    def _cancel_outstanding(self) -> None:
        if self._animation is not None:
            self._animation.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._animation = None
        self._values = None
        self._task = None

    def set_target(self, target: float) -> CounterAnimation:
        """
        Animate to a new target, restarting from 0.

        An unchanged target keeps the running animation. A changed target
        cancels the old animation first.

        Args:
            target: New value to count up to.

        Returns:
            Handle of the animation now owned by this counter.
        """
        if self._animation is not None and target == self.target:
            return self._animation

        self._cancel_outstanding()
        self.target = target
        self.current = 0.0
        self.started_at = self._clock()
        self._animation = CounterAnimation(target, self.duration_ms)
        self._values = iter(self._animation)
        logger.debug(f"Counter animating to {target}")
        return self._animation

    def advance(self) -> float | None:
        """
        Pull the next value on the host's own tick.

        Returns:
            The new current value, or None when there is no running
            animation or it has finished.
        """
        if self._values is None:
            return None
        value = next(self._values, None)
        if value is None:
            self._values = None
            return None
        self.current = value
        return value

    def _on_tick(self, value: float) -> None:
        self.current = value

    def start(self) -> asyncio.Task[None]:
        """
        Run the owned animation in real time on the running event loop.

        Once started the task owns the ticks and advance() returns None.

        Returns:
            The asyncio task driving the animation.

        Raises:
            RuntimeError: If no target has been set, or no event loop is running.
        """
        if self._animation is None:
            raise RuntimeError("set_target() must be called before start()")
        if self._task is not None and not self._task.done():
            return self._task

        animation = self._animation
        self._task = asyncio.get_running_loop().create_task(animation.run(self._on_tick))
        self._values = None
        return self._task

    def teardown(self) -> None:
        """Cancel the running animation. Safe to call more than once."""
        self._cancel_outstanding()
