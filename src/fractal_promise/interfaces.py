"""
协议接口定义
"""

from typing import Protocol, runtime_checkable, Any, Callable

# Values that can never carry a ``then`` member worth looking up.
PLAIN_VALUE_TYPES = (type(None), bool, int, float, complex, str, bytes)


@runtime_checkable
class Scheduler(Protocol):
    """调度器协议"""

    def schedule(self, job: Callable[[], Any]) -> None:
        """
        Run ``job`` after the current synchronous execution unwinds.

        Jobs scheduled on the same scheduler run in FIFO order and never
        inline inside ``schedule``.
        """
        ...


@runtime_checkable
class Thenable(Protocol):
    """Any object exposing a callable ``then(resolve, reject)`` member."""

    def then(self, on_fulfilled: Any = None, on_rejected: Any = None) -> Any:
        ...


def is_thenable_candidate(value: Any) -> bool:
    """Return True when ``value`` is an object whose ``then`` member must be inspected."""
    # Classes expose ``then`` as an unbound function, not a thenable member.
    return not isinstance(value, PLAIN_VALUE_TYPES) and not isinstance(value, type)
