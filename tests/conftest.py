"""公共测试夹具"""

import pytest

from fractal_promise import ManualScheduler, PromiseSettings, set_default_scheduler
from fractal_promise.common import configure_logger


@pytest.fixture
def scheduler():
    """Fresh ManualScheduler, also installed as the process default for the test."""
    configure_logger(PromiseSettings())
    manual = ManualScheduler()
    previous = set_default_scheduler(manual)
    yield manual
    set_default_scheduler(previous)
    configure_logger(PromiseSettings())
