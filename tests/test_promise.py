"""
Promise 状态机与续体队列测试
"""

import pytest

from fractal_promise import Promise, PromiseState, deferred, rejected, resolved


class Recorder:
    """按调用顺序记录回调"""

    def __init__(self):
        self.calls = []

    def handler(self, name, result=None):
        def _record(value):
            self.calls.append((name, value))
            return result
        return _record


def test_new_promise_is_pending(scheduler):
    promise = Promise()
    assert promise.state is PromiseState.PENDING
    assert promise.value is None
    assert promise.is_pending()
    assert promise.scheduler is scheduler


def test_transition_settles_only_once(scheduler):
    promise = Promise()

    assert promise.fulfill(1) is True
    assert promise.fulfill(2) is False
    assert promise.reject("late") is False
    assert promise.transition(PromiseState.REJECTED, "late") is False

    assert promise.state is PromiseState.FULFILLED
    assert promise.value == 1


def test_invalid_transition_targets_are_ignored(scheduler):
    promise = Promise()

    assert promise.transition(PromiseState.PENDING, "x") is False
    assert promise.transition("fulfilled", "x") is False
    assert promise.is_pending()

    assert promise.reject("no") is True
    assert promise.is_rejected()
    assert promise.value == "no"


def test_then_returns_new_pending_promise_synchronously(scheduler):
    upstream = resolved(1)
    recorder = Recorder()

    downstream = upstream.then(recorder.handler("f"))

    assert isinstance(downstream, Promise)
    assert downstream is not upstream
    assert downstream.is_pending()
    assert recorder.calls == []


def test_handlers_never_run_in_settling_step(scheduler):
    d = deferred()
    recorder = Recorder()
    d.promise.then(recorder.handler("f"))

    d.resolve("v")
    assert recorder.calls == []

    scheduler.flush()
    assert recorder.calls == [("f", "v")]


def test_then_value_is_transformed(scheduler):
    d = deferred()
    result = d.promise.then(lambda v: v + 1)

    d.resolve(42)
    scheduler.flush()

    assert result.state is PromiseState.FULFILLED
    assert result.value == 43


def test_multiple_then_fire_in_registration_order(scheduler):
    d = deferred()
    recorder = Recorder()

    first = d.promise.then(recorder.handler("first", "a"))
    second = d.promise.then(recorder.handler("second", "b"))

    d.resolve("v")
    # registered after settlement, still after the first two
    third = d.promise.then(recorder.handler("third", "c"))
    scheduler.flush()

    assert recorder.calls == [("first", "v"), ("second", "v"), ("third", "v")]
    assert (first.value, second.value, third.value) == ("a", "b", "c")


def test_rejection_handlers_fire_in_order(scheduler):
    d = deferred()
    recorder = Recorder()
    d.promise.then(None, recorder.handler("r1"))
    d.promise.then(recorder.handler("f"), recorder.handler("r2"))

    d.reject("boom")
    scheduler.flush()

    assert recorder.calls == [("r1", "boom"), ("r2", "boom")]


def test_each_handler_fires_at_most_once(scheduler):
    d = deferred()
    recorder = Recorder()
    d.promise.then(recorder.handler("f"), recorder.handler("r"))

    d.resolve(1)
    d.resolve(2)
    d.reject(3)
    scheduler.flush()
    d.promise.process()
    scheduler.flush()

    assert recorder.calls == [("f", 1)]


def test_then_registered_inside_handler_is_processed(scheduler):
    d = deferred()
    order = []
    upstream = d.promise

    def first(value):
        order.append("first")
        upstream.then(lambda v: order.append("nested"))

    upstream.then(first)
    upstream.then(lambda v: order.append("second"))

    d.resolve(1)
    scheduler.flush()

    assert order == ["first", "second", "nested"]


def test_then_after_drain_finished_schedules_new_drain(scheduler):
    promise = resolved("v")
    seen = []
    promise.then(seen.append)
    scheduler.flush()

    def late(value):
        promise.then(lambda v: seen.append(("late", v)))

    other = resolved(None)
    other.then(late)
    scheduler.flush()

    assert seen == ["v", ("late", "v")]


def test_missing_fulfillment_handler_passes_value_through(scheduler):
    result = resolved("keep").then(None, lambda r: "unused").then(lambda v: v * 2)
    scheduler.flush()
    assert result.value == "keepkeep"


def test_missing_rejection_handler_propagates_reason(scheduler):
    seen = []
    reason = object()
    rejected(reason).then(lambda v: "unused").then(None, seen.append)
    scheduler.flush()
    assert seen == [reason]


def test_non_callable_handlers_are_ignored(scheduler):
    result = resolved(3).then(5, "x")
    failed = rejected("r").then({}, [])
    scheduler.flush()

    assert result.value == 3
    assert failed.is_rejected()
    assert failed.value == "r"


def test_rejection_recovered_by_handler(scheduler):
    result = rejected("boom").then(None, lambda r: len(r))
    scheduler.flush()

    assert result.state is PromiseState.FULFILLED
    assert result.value == 4


def test_handler_exception_rejects_downstream_and_drain_continues(scheduler):
    error = ValueError("bad handler")
    d = deferred()

    def explode(value):
        raise error

    failed = d.promise.then(explode)
    ok = d.promise.then(lambda v: v)

    d.resolve(1)
    scheduler.flush()

    assert failed.is_rejected()
    assert failed.value is error
    assert ok.value == 1


def test_handler_receives_single_positional_argument(scheduler):
    received = []
    resolved("only").then(lambda *args, **kwargs: received.append((args, kwargs)))
    scheduler.flush()
    assert received == [(("only",), {})]


def test_catch_is_then_without_fulfillment_handler(scheduler):
    result = rejected(KeyError("k")).catch(lambda r: type(r).__name__)
    scheduler.flush()
    assert result.value == "KeyError"


def test_long_then_chain_does_not_grow_stack(scheduler):
    promise = resolved(0)
    for _ in range(5000):
        promise = promise.then(lambda v: v + 1)
    scheduler.flush()
    assert promise.value == 5000


def test_to_dict_and_repr(scheduler):
    promise = Promise(label="job")
    promise.then(lambda v: v)
    snapshot = promise.to_dict()

    assert snapshot == {
        "state": "pending",
        "value": None,
        "pending_continuations": 1,
        "label": "job",
    }
    assert repr(promise) == "<Promise 'job' pending>"

    promise.reject("no")
    assert repr(promise) == "<Promise 'job' rejected: 'no'>"
    scheduler.flush()
    assert promise.to_dict()["pending_continuations"] == 0
