"""
Fractal Promise - 可互操作的单次结算延迟值

一个独立的 Promise 原语，供组合异步工作使用。

主要功能:
- 三态生命周期 (pending / fulfilled / rejected)，仅结算一次
- then 续体队列，按注册顺序在后续轮次执行
- 解析过程：采纳其他 Promise 与外部 thenable 对象
- 可注入调度器 (手动工作队列 / asyncio 事件循环)
"""

# 主要API导出
from .types import (
    PromiseState,
    Continuation,
    PromiseError,
    SelfResolutionError,
    SchedulerOverflowError,
    SchedulerUnavailableError,
    RejectionError,
)
from .common import PromiseSettings, SchedulerMode, UnifiedLogger, convert_settings
from .interfaces import Scheduler, Thenable
from .scheduler import (
    ManualScheduler,
    AsyncioScheduler,
    configure,
    get_default_scheduler,
    set_default_scheduler,
)
from .promise import Promise
from .resolution import resolve_promise
from .construction import Deferred, resolved, rejected, deferred
from .sync_adapter import to_asyncio_future, from_awaitable, run_until_settled

__version__ = "1.0.0"
__author__ = "Fractal Think Team"

# 主要接口
__all__ = [
    # 核心类型
    "Promise",
    "PromiseState",
    "Continuation",
    "Deferred",

    # 构造
    "resolved",
    "rejected",
    "deferred",
    "resolve_promise",

    # 调度器
    "Scheduler",
    "Thenable",
    "ManualScheduler",
    "AsyncioScheduler",
    "configure",
    "get_default_scheduler",
    "set_default_scheduler",

    # 配置与日志
    "PromiseSettings",
    "SchedulerMode",
    "UnifiedLogger",
    "convert_settings",

    # 互操作
    "to_asyncio_future",
    "from_awaitable",
    "run_until_settled",

    # 异常
    "PromiseError",
    "SelfResolutionError",
    "SchedulerOverflowError",
    "SchedulerUnavailableError",
    "RejectionError",
]


def get_version() -> str:
    """获取版本信息"""
    return __version__
