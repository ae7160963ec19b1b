"""
Promise 状态机 - 单次结算的延迟值

A :class:`Promise` starts pending and settles once, either fulfilled with a
value or rejected with a reason. Continuations registered through
:meth:`Promise.then` are queued and drained on the promise's scheduler after
settlement, strictly in registration order.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Dict, Optional, Tuple

from .common import get_logger
from .interfaces import Scheduler
from .scheduler import get_default_scheduler
from .types import Continuation, PromiseState

Handler = Optional[Callable[[Any], Any]]
Executor = Callable[[Callable[[Any], None], Callable[[Any], None]], Any]


class Promise:
    """
    Eventual value with a three-state lifecycle.

    The optional ``executor`` runs synchronously with ``(resolve, reject)``.
    ``resolve`` goes through the resolution procedure, ``reject`` settles
    directly. An exception raised by the executor is not caught: it
    propagates to the caller of the constructor.
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        label: Optional[str] = None,
    ) -> None:
        self._state = PromiseState.PENDING
        self._value: Any = None
        self._queue: Deque[Continuation] = deque()
        self.scheduler = scheduler if scheduler is not None else get_default_scheduler()
        self.label = label

        if executor is not None:
            executor(self.resolve, self.reject)

    @property
    def state(self) -> PromiseState:
        return self._state

    @property
    def value(self) -> Any:
        """Fulfillment value or rejection reason; ``None`` while pending."""
        return self._value

    def is_pending(self) -> bool:
        return self._state is PromiseState.PENDING

    def is_fulfilled(self) -> bool:
        return self._state is PromiseState.FULFILLED

    def is_rejected(self) -> bool:
        return self._state is PromiseState.REJECTED

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def transition(self, state: PromiseState, value: Any) -> bool:
        """
        Settle the promise. Only ``PENDING -> FULFILLED`` and
        ``PENDING -> REJECTED`` are honoured; any other attempt is ignored
        and returns False.
        """
        if self._state.is_settled:
            return False
        if not isinstance(state, PromiseState) or not state.is_settled:
            return False

        self._state = state
        self._value = value
        get_logger().transition(self, state)
        self.process()
        return True

    def fulfill(self, value: Any) -> bool:
        return self.transition(PromiseState.FULFILLED, value)

    def reject(self, reason: Any) -> bool:
        return self.transition(PromiseState.REJECTED, reason)

    def resolve(self, value: Any) -> None:
        """Run the resolution procedure with this promise as target."""
        resolve_promise(self, value)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def then(self, on_fulfilled: Handler = None, on_rejected: Handler = None) -> "Promise":
        """
        Register handlers and return the downstream promise that receives
        their outcome. Non-callable handlers are ignored.
        """
        downstream = Promise(scheduler=self.scheduler)
        self._queue.append(
            Continuation(
                on_fulfilled=on_fulfilled if callable(on_fulfilled) else None,
                on_rejected=on_rejected if callable(on_rejected) else None,
                downstream=downstream,
            )
        )
        try:
            self.process()
        except Exception:
            # scheduler refused the drain; leave the queue as it was
            self._queue.pop()
            raise
        return downstream

    def catch(self, on_rejected: Handler) -> "Promise":
        return self.then(None, on_rejected)

    # ------------------------------------------------------------------
    # Queue drain
    # ------------------------------------------------------------------

    def process(self) -> None:
        """Schedule a drain of the continuation queue once settled."""
        if self._state is PromiseState.PENDING or not self._queue:
            return
        self.scheduler.schedule(self._drain)

    def _drain(self) -> None:
        # Entries appended by handlers during this loop are picked up here;
        # a later drain job scheduled for them finds the queue empty.
        while self._queue:
            continuation = self._queue.popleft()
            ok, payload = self._run_handler(continuation)
            if ok:
                resolve_promise(continuation.downstream, payload)
            else:
                continuation.downstream.reject(payload)

    def _run_handler(self, continuation: Continuation) -> Tuple[bool, Any]:
        """Return ``(True, result)`` or ``(False, reason)`` for one continuation."""
        handler = continuation.select_handler(self._state)
        if handler is None:
            return self._state is PromiseState.FULFILLED, self._value
        try:
            return True, handler(self._value)
        except Exception as exc:
            get_logger().debug(f"{self!r}: handler raised {exc!r}, rejecting downstream")
            return False, exc

    # ------------------------------------------------------------------
    # Interop
    # ------------------------------------------------------------------

    def __await__(self):
        from .sync_adapter import to_asyncio_future

        return to_asyncio_future(self).__await__()

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the current state, for logs and debugging."""
        return {
            "state": self._state.value,
            "value": self._value,
            "pending_continuations": len(self._queue),
            "label": self.label,
        }

    def __repr__(self) -> str:
        name = f" {self.label!r}" if self.label else ""
        if self._state is PromiseState.PENDING:
            return f"<Promise{name} pending>"
        return f"<Promise{name} {self._state.value}: {self._value!r}>"


# resolution imports Promise; bind it after the class exists.
from .resolution import resolve_promise  # noqa: E402
