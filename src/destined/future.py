"""Lazy, cancellable deferred computations.

A :class:`Future` wraps a start procedure ``(reject, resolve) -> cancel``.
Building one, or combining several, performs no work; work starts only when a
caller runs it and supplies the success and failure handlers. Exactly one of
the two handlers fires, at most once. Abandoning a running future invokes its
cancel procedure and silences both handlers.

Running the same future twice runs its side effect twice.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from functools import partial, reduce
from typing import Any, Generic, TypeVar

from destined.errors import DestinedError
from destined.types import NO_OP, Cancel, Computation

L = TypeVar("L")
R = TypeVar("R")
T = TypeVar("T")

__all__ = [
    "Future",
    "Rejection",
    "after",
    "first_success",
    "is_future",
    "parallel",
    "race",
    "race_success",
    "reject_after",
]


class Rejection(DestinedError):
    """Raised when an awaited future fails with a value that is not an exception."""

    def __init__(self, reason: Any) -> None:
        super().__init__(f"Future rejected with {reason!r}")
        self.reason = reason


class Future(Generic[L, R]):
    """A deferred computation failing with ``L`` or succeeding with ``R``."""

    __slots__ = ("_computation",)

    def __init__(self, computation: Computation) -> None:
        self._computation = computation

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def resolve(cls, value: R) -> Future[Any, R]:
        """A future that succeeds with ``value`` as soon as it runs."""

        def computation(reject, resolve):
            resolve(value)
            return NO_OP

        return cls(computation)

    @classmethod
    def reject(cls, reason: L) -> Future[L, Any]:
        """A future that fails with ``reason`` as soon as it runs."""

        def computation(reject, resolve):
            reject(reason)
            return NO_OP

        return cls(computation)

    @classmethod
    def never(cls) -> Future[Any, Any]:
        """A future that never settles."""
        return cls(lambda reject, resolve: NO_OP)

    @classmethod
    def from_coroutine(
        cls, factory: Callable[[], Awaitable[R]], cancel: Cancel = NO_OP
    ) -> Future[BaseException, R]:
        """Adapt an async call into a future.

        ``factory`` is called each time the future runs and its awaitable is
        scheduled as a task on the running loop. An exception raised by
        ``factory`` or by the task becomes the failure value, unmodified.
        Abandoning the future cancels the task and then calls ``cancel``.

        Args:
            factory: Zero-argument callable returning the awaitable to run.
            cancel: Caller supplied procedure invoked on abandonment.

        Returns:
            Future of the awaitable's result.
        """

        def computation(reject, resolve):
            loop = asyncio.get_running_loop()
            try:
                awaitable = factory()
            except Exception as e:
                reject(e)
                return NO_OP
            task = asyncio.ensure_future(awaitable, loop=loop)

            def on_done(done: asyncio.Future) -> None:
                if done.cancelled():
                    return
                error = done.exception()
                if error is not None:
                    reject(error)
                else:
                    resolve(done.result())

            task.add_done_callback(on_done)

            def abort() -> None:
                task.cancel()
                cancel()

            return abort

        return cls(computation)

    # ------------------------------------------------------------------
    # Consumption
    # ------------------------------------------------------------------

    def run(self, on_success: Callable[[R], Any], on_failure: Callable[[L], Any]) -> Cancel:
        """Start the computation.

        Args:
            on_success: Called with the success value.
            on_failure: Called with the failure value.

        Returns:
            Procedure that abandons the computation if it has not settled.
        """
        settled = False

        def reject(reason: L) -> None:
            nonlocal settled
            if settled:
                return
            settled = True
            on_failure(reason)

        def resolve(value: R) -> None:
            nonlocal settled
            if settled:
                return
            settled = True
            on_success(value)

        cancel = self._computation(reject, resolve)

        def abort() -> None:
            nonlocal settled
            if settled:
                return
            settled = True
            cancel()

        return abort

    def fork(self, on_failure: Callable[[L], Any], on_success: Callable[[R], Any]) -> Cancel:
        """Same as :meth:`run`, failure handler first."""
        return self.run(on_success, on_failure)

    async def promise(self) -> R:
        """Run on the current event loop and wait for the outcome.

        Raises:
            The failure value, or :class:`Rejection` wrapping it when it is
            not an exception.
        """
        waiter: asyncio.Future = asyncio.get_running_loop().create_future()

        def on_success(value: R) -> None:
            if not waiter.done():
                waiter.set_result(value)

        def on_failure(reason: L) -> None:
            if waiter.done():
                return
            if isinstance(reason, BaseException):
                waiter.set_exception(reason)
            else:
                waiter.set_exception(Rejection(reason))

        cancel = self.run(on_success, on_failure)
        try:
            return await waiter
        except asyncio.CancelledError:
            cancel()
            raise

    def __await__(self):
        return self.promise().__await__()

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def map(self, fn: Callable[[R], T]) -> Future[L, T]:
        """Transform the success value. A raising ``fn`` fails the future."""

        def computation(reject, resolve):
            def on_success(value: R) -> None:
                try:
                    mapped = fn(value)
                except Exception as e:
                    reject(e)
                    return
                resolve(mapped)

            return self.run(on_success, reject)

        return Future(computation)

    def map_rej(self, fn: Callable[[L], T]) -> Future[T, R]:
        """Transform the failure value."""

        def computation(reject, resolve):
            def on_failure(reason: L) -> None:
                try:
                    mapped = fn(reason)
                except Exception as e:
                    reject(e)
                    return
                reject(mapped)

            return self.run(resolve, on_failure)

        return Future(computation)

    def bimap(self, on_failure: Callable[[L], Any], on_success: Callable[[R], T]) -> Future[Any, T]:
        """Transform whichever value the future settles with."""
        return self.map_rej(on_failure).map(on_success)

    def chain(self, fn: Callable[[R], Future[L, T]]) -> Future[L, T]:
        """On success, run the future built from the success value."""
        return Future(_sequence(self, fn, on_success=True))

    def chain_rej(self, fn: Callable[[L], Future[T, R]]) -> Future[T, R]:
        """On failure, run the fallback future built from the failure value."""
        return Future(_sequence(self, fn, on_success=False))

    def race(self, other: Future[L, R]) -> Future[L, R]:
        """First of the two to settle wins; the other is abandoned."""
        return race(self, other)

    def race_success(self, other: Future[L, R]) -> Future[L, R]:
        """First of the two to succeed wins; fails only when both fail."""
        return race_success(self, other)

    def __repr__(self) -> str:
        return f"Future({self._computation!r})"


def _sequence(first: Future, fn: Callable[[Any], Future], on_success: bool) -> Computation:
    """Start procedure running ``first`` then, on one outcome, ``fn(value)``."""

    def computation(reject, resolve):
        cancel_second: Cancel | None = None

        def proceed(value: Any) -> None:
            nonlocal cancel_second
            try:
                second = fn(value)
            except Exception as e:
                reject(e)
                return
            cancel_second = second.run(resolve, reject)

        if on_success:
            cancel_first = first.run(proceed, reject)
        else:
            cancel_first = first.run(resolve, proceed)

        def cancel() -> None:
            cancel_first()
            if cancel_second is not None:
                cancel_second()

        return cancel

    return computation


def is_future(value: Any) -> bool:
    """Whether ``value`` is a :class:`Future`."""
    return isinstance(value, Future)


def race(*futures: Future) -> Future:
    """Run every future; the first to settle, either way, wins.

    The losers are abandoned. Futures are started in argument order and none
    is started once a winner is known.
    """
    if not futures:
        raise ValueError("race needs at least one future")

    def computation(reject, resolve):
        done = False
        cancels: list[Cancel] = []

        def settle(callback: Callable[[Any], None]) -> Callable[[Any], None]:
            def settled(value: Any) -> None:
                nonlocal done
                if done:
                    return
                done = True
                for cancel in cancels:
                    cancel()
                callback(value)

            return settled

        for future in futures:
            if done:
                break
            cancels.append(future.run(settle(resolve), settle(reject)))

        def cancel_all() -> None:
            for cancel in cancels:
                cancel()

        return cancel_all

    return Future(computation)


def race_success(first: Future, second: Future) -> Future:
    """Run both; the first success wins and abandons the other.

    The combined future fails only once both have failed, with the failure
    that arrived last.
    """

    def computation(reject, resolve):
        done = False
        failures = 0
        cancels: list[Cancel] = []

        def on_success(value: Any) -> None:
            nonlocal done
            if done:
                return
            done = True
            for cancel in cancels:
                cancel()
            resolve(value)

        def on_failure(reason: Any) -> None:
            nonlocal failures
            failures += 1
            if failures == 2:
                reject(reason)

        for future in (first, second):
            if done:
                break
            cancels.append(future.run(on_success, on_failure))

        def cancel_all() -> None:
            for cancel in cancels:
                cancel()

        return cancel_all

    return Future(computation)


def parallel(limit: int, futures: Iterable[Future]) -> Future:
    """Run futures with at most ``limit`` in flight.

    Succeeds with every success value in input order. The first failure fails
    the whole batch and abandons whatever is still running; work that already
    finished is not undone.

    Args:
        limit: Maximum number of futures running at once.
        futures: Futures to run.

    Raises:
        ValueError: If ``limit`` is below one.
    """
    if limit < 1:
        raise ValueError(f"parallel limit must be at least 1, got {limit}")
    pending = list(futures)

    def computation(reject, resolve):
        total = len(pending)
        if total == 0:
            resolve([])
            return NO_OP

        results: list[Any] = [None] * total
        running: dict[int, Cancel] = {}
        next_index = 0
        remaining = total
        stopped = False
        draining = False

        def drain() -> None:
            # Started only from this loop, never from a settling handler
            nonlocal next_index, draining
            if draining:
                return
            draining = True
            try:
                while not stopped and next_index < total and len(running) < limit:
                    index = next_index
                    next_index += 1
                    running[index] = NO_OP
                    cancel = pending[index].run(partial(on_success, index), on_failure)
                    if index in running:
                        running[index] = cancel
            finally:
                draining = False

        def on_success(index: int, value: Any) -> None:
            nonlocal remaining
            if stopped:
                return
            results[index] = value
            running.pop(index, None)
            remaining -= 1
            if remaining == 0:
                resolve(results)
            else:
                drain()

        def on_failure(reason: Any) -> None:
            nonlocal stopped
            if stopped:
                return
            stopped = True
            abandon()
            reject(reason)

        def abandon() -> None:
            for cancel in list(running.values()):
                cancel()
            running.clear()

        def cancel_all() -> None:
            nonlocal stopped
            stopped = True
            abandon()

        drain()
        return cancel_all

    return Future(computation)


def after(seconds: float, value: Any = None) -> Future:
    """A future that succeeds with ``value`` after ``seconds``."""

    def computation(reject, resolve):
        handle = asyncio.get_running_loop().call_later(seconds, resolve, value)
        return handle.cancel

    return Future(computation)


def reject_after(seconds: float, reason: Any) -> Future:
    """A future that fails with ``reason`` after ``seconds``."""

    def computation(reject, resolve):
        handle = asyncio.get_running_loop().call_later(seconds, reject, reason)
        return handle.cancel

    return Future(computation)


def first_success(futures: Iterable[Future]) -> Future:
    """Fold futures with :func:`race_success`."""
    futures = list(futures)
    if not futures:
        raise ValueError("first_success needs at least one future")
    return reduce(race_success, futures)
