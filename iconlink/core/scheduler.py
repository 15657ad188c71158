"""Deferred-call queue standing in for the host's event loop."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple


class DeferredCall:
    """One queued continuation. Cancelling it before its turn skips it."""

    def __init__(self, fn: Callable[..., Any], args: Tuple[Any, ...]):
        self.fn = fn
        self.args = args
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        if self.cancelled or self.done:
            return
        self.done = True
        self.fn(*self.args)


class DeferredQueue:
    """
    Single-threaded queue of work to run "on a later turn".

    A turn runs only the calls queued before it started; anything scheduled
    while the turn is running waits for the next one. That ordering is what
    lets a retry re-schedule itself without spinning inside one turn.
    """

    def __init__(self) -> None:
        self._pending: Deque[DeferredCall] = deque()

    def call_soon(self, fn: Callable[..., Any], *args: Any) -> DeferredCall:
        call = DeferredCall(fn, args)
        self._pending.append(call)
        return call

    def run_pending(self) -> int:
        """Run one turn. Returns the number of calls that actually ran."""
        batch, self._pending = self._pending, deque()
        ran = 0
        while batch:
            call = batch.popleft()
            if call.cancelled:
                continue
            call.run()
            ran += 1
        return ran

    def run_until_idle(self, max_turns: Optional[int] = 100) -> int:
        """Run turns until nothing is queued (or `max_turns` is reached)."""
        turns = 0
        while self._pending and (max_turns is None or turns < max_turns):
            self.run_pending()
            turns += 1
        return turns

    def __len__(self) -> int:
        return sum(1 for call in self._pending if not call.cancelled)
