"""Repeat an async or sync action with a fixed delay between calls."""

import asyncio
import inspect
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from .config import REPEATER_CONFIG
from .duration import DurationSpec, parse_duration
from .models import RepeaterStatus, RunStats

logger = logging.getLogger(__name__)

# Receives the 1-based call index, may return an awaitable
RepeatedAction = Callable[[int], Any]
SleepFunc = Callable[[float], Awaitable[Any]]


async def _resolve(value: Any) -> Any:
    """Await the value if the callee handed back an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def _accepts_call_count(func: Callable[..., Any]) -> bool:
    """Check whether a predicate takes a positional argument for the call count."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False

    for param in signature.parameters.values():
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False


class Repeater:
    """Invoke an action repeatedly until a count, a predicate, or a stop signal ends the run.

    Example:
        finished = False

        async def check(rt: int) -> None:
            nonlocal finished
            logger.info(f"[Retries: {rt}] Checking maintenance state...")
            finished = await server.maintenance_finished()

        await repeat(check).every("1s").until(lambda: finished)
    """

    def __init__(
        self,
        action: RepeatedAction,
        sleep: Optional[SleepFunc] = None,
        debug: Optional[bool] = None,
    ):
        """Initialize the repeater.

        Args:
            action: Function to repeat, called with the current call index
            sleep: Delay primitive taking seconds (defaults to asyncio.sleep)
            debug: Log every invocation (defaults to REPEATER_DEBUG)
        """
        self.action = action
        self.debug = REPEATER_CONFIG["debug"] if debug is None else debug
        self._sleep: SleepFunc = sleep or asyncio.sleep

        self.status = RepeaterStatus.IDLE
        self.start_date: Optional[datetime] = None
        self.end_date: Optional[datetime] = None
        self.run_time: Optional[float] = None  # milliseconds
        self.call_count = 0
        self.delay: Optional[float] = None  # milliseconds

        # Infinite driver state
        self.task: Optional[asyncio.Task] = None
        self.error: Optional[Exception] = None
        self._stopped = False
        self._run_id = 0

        default_delay = REPEATER_CONFIG["default_delay"]
        if default_delay is not None:
            self.every(default_delay)

    def __repr__(self) -> str:
        return (
            f"Repeater(action={self._action_name}, status={self.status.value}, "
            f"call_count={self.call_count}, delay={self.delay})"
        )

    @property
    def _action_name(self) -> str:
        return getattr(self.action, "__qualname__", None) or repr(self.action)

    @property
    def stopped(self) -> bool:
        """Whether stop() has been called since the last infinite() run started."""
        return self._stopped

    def every(self, duration: Optional[DurationSpec]) -> "Repeater":
        """Set the delay applied before each action call.

        Must be called before a driver to affect that run. Malformed
        durations are ignored and leave the current delay in place.

        Args:
            duration: Milliseconds as a number, a timedelta, a string such as
                "500ms", "5s" or "1m", or None to remove the delay

        Returns:
            This repeater, for chaining
        """
        if duration is None:
            self.delay = None
            return self

        ms = parse_duration(duration)
        if ms is None:
            logger.warning(
                f"Ignoring invalid delay {duration!r} for {self._action_name}, "
                f"keeping delay={self.delay}"
            )
            return self

        self.delay = ms
        return self

    async def repeat(self, count: int) -> "Repeater":
        """Call the action `count` times in sequence.

        A count of zero or less completes the run without calling the action.

        Args:
            count: Number of calls

        Returns:
            This repeater once every call has finished
        """
        self._start("repeat")
        for _ in range(count):
            await self._do_action()
        return self._complete()

    async def until(self, predicate: Any) -> "Repeater":
        """Call the action until the predicate reports the run is finished.

        The predicate is checked after each call, so the action always runs at
        least once. A predicate that never becomes true never returns.

        Args:
            predicate: Callable returning a truthy value when done. It receives
                the call count if it takes a positional argument, and may be
                async. A non-callable value is evaluated once: truthy means a
                single call, falsy means calling forever.

        Returns:
            This repeater once the predicate is satisfied
        """
        self._start("until")

        if callable(predicate):
            pass_count = _accepts_call_count(predicate)

            async def finished() -> bool:
                args = (self.call_count,) if pass_count else ()
                return bool(await _resolve(predicate(*args)))

        else:
            done = bool(predicate)

            async def finished() -> bool:
                return done

        while True:
            await self._do_action()
            if await finished():
                break

        return self._complete()

    def infinite(self) -> "Repeater":
        """Start calling the action in the background until stop() is called.

        Returns immediately. The loop runs as a task on the running event loop
        and is reachable through `task`.

        Returns:
            This repeater, as a handle for stop()

        Raises:
            RuntimeError: If no event loop is running
        """
        loop = asyncio.get_running_loop()

        self._start("infinite")
        self._stopped = False
        self.error = None
        self.task = loop.create_task(self._run_infinite(self._run_id))
        return self

    def stop(self) -> "Repeater":
        """Stop an infinite run and mark the repeater complete.

        The background loop notices the stop once its pending delay elapses
        and skips the action for that tick, so `status` can read complete
        slightly before the loop has exited.
        """
        self._stopped = True
        logger.info(f"Stop requested for {self._action_name}")
        return self._complete()

    async def join(self) -> "Repeater":
        """Wait for the background loop started by infinite() to exit.

        Failures of the loop are not raised here; read `error` instead. If the
        task was cancelled from outside, asyncio.CancelledError propagates.
        """
        if self.task is not None:
            await self.task
        return self

    def stats(self) -> RunStats:
        """Snapshot of the current run state."""
        return RunStats(
            status=self.status,
            call_count=self.call_count,
            delay=self.delay,
            start_date=self.start_date,
            end_date=self.end_date,
            run_time=self.run_time,
            stopped=self._stopped,
        )

    def _start(self, driver: str) -> None:
        """Reset run state and mark the repeater as running."""
        self._run_id += 1
        self.status = RepeaterStatus.RUNNING
        self.call_count = 0
        self.start_date = datetime.now()
        self.end_date = None
        self.run_time = None

        logger.info(f"Starting {driver} run for {self._action_name} (delay={self.delay}ms)")

    def _complete(self) -> "Repeater":
        """Reset the call counter and record completion time."""
        self.call_count = 0
        self.status = RepeaterStatus.COMPLETE
        self.end_date = datetime.now()
        start_date = self.start_date or self.end_date
        self.run_time = (self.end_date - start_date).total_seconds() * 1000

        logger.info(f"Repeater for {self._action_name} completed in {self.run_time:.1f}ms")
        return self

    async def _wait(self) -> None:
        if self.delay:
            await self._sleep(self.delay / 1000)

    async def _invoke(self, index: int) -> None:
        if self.debug:
            logger.debug(f"Calling {self._action_name} (call {index})")
        await _resolve(self.action(index))

    async def _do_action(self) -> None:
        """Advance the counter, wait out the delay, then call the action."""
        self.call_count += 1
        index = self.call_count

        await self._wait()
        try:
            await self._invoke(index)
        except Exception as e:
            logger.error(f"Action {self._action_name} failed on call {index}: {e}")
            raise

    async def _run_infinite(self, run_id: int) -> None:
        """Background loop for infinite(); exits once stopped or superseded by another run."""
        index = 0
        try:
            while True:
                index += 1
                if self.delay:
                    await self._sleep(self.delay / 1000)
                else:
                    # Yield so stop() gets a chance to run between calls
                    await asyncio.sleep(0)

                if self._stopped or run_id != self._run_id:
                    break

                self.call_count = index
                await self._invoke(index)
        except Exception as e:
            self.error = e
            logger.error(
                f"Infinite run of {self._action_name} failed on call {index}: {e}", exc_info=True
            )
            return

        logger.debug(f"Infinite run of {self._action_name} exited after {index - 1} calls")


def repeat(action: RepeatedAction, **options: Any) -> Repeater:
    """Wrap an action in a Repeater.

    Args:
        action: Function to repeat
        **options: Passed to Repeater (sleep, debug)

    Example:
        await repeat(print).repeat(10)
        await repeat(print).every("5s").repeat(10)
    """
    return Repeater(action, **options)
