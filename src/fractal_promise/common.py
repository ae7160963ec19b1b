"""
公用工具组件 - 配置与日志工具
"""

import logging
from typing import Optional, Any
from dataclasses import dataclass
from enum import Enum


class SchedulerMode(Enum):
    """默认调度器类型"""
    MANUAL = "manual"     # 手动刷新的工作队列
    ASYNCIO = "asyncio"   # asyncio 事件循环


@dataclass
class PromiseSettings:
    """进程级配置"""
    scheduler_mode: SchedulerMode = SchedulerMode.MANUAL
    flush_limit: Optional[int] = None    # ManualScheduler.flush 默认上限
    log_transitions: bool = False        # 记录每次状态迁移
    logger_name: str = "fractal_promise"

    def __post_init__(self):
        """验证配置参数"""
        if isinstance(self.scheduler_mode, str):
            self.scheduler_mode = SchedulerMode(self.scheduler_mode)
        if self.flush_limit is not None and self.flush_limit <= 0:
            raise ValueError("flush_limit 必须大于0")
        if not self.logger_name:
            raise ValueError("logger_name 不能为空")


class UnifiedLogger:
    """统一日志器"""

    def __init__(self, logger: Optional[logging.Logger] = None, tag: str = "promise"):
        self.logger = logger or self._create_default_logger()
        self.tag = tag
        self.log_transitions = False

    def _create_default_logger(self) -> logging.Logger:
        """创建默认日志器"""
        logger = logging.getLogger("fractal_promise")
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
        return logger

    def debug(self, message: str, **kwargs):
        """调试信息"""
        self.logger.debug(f"[{self.tag.upper()}] {message}", **kwargs)

    def info(self, message: str, **kwargs):
        """普通信息"""
        self.logger.info(f"[{self.tag.upper()}] {message}", **kwargs)

    def warning(self, message: str, **kwargs):
        """警告信息"""
        self.logger.warning(f"[{self.tag.upper()}] {message}", **kwargs)

    def transition(self, promise: Any, state: Any) -> None:
        """状态迁移日志，仅在开启 log_transitions 时输出"""
        if self.log_transitions:
            self.debug(f"{promise!r} -> {state.value}")


# 全局日志器，首次使用时创建
logger: Optional[UnifiedLogger] = None


def configure_logger(settings: PromiseSettings) -> UnifiedLogger:
    """按配置重建全局日志器"""
    global logger
    logger = UnifiedLogger(logging.getLogger(settings.logger_name))
    logger.log_transitions = settings.log_transitions
    return logger


def get_logger() -> UnifiedLogger:
    global logger
    if logger is None:
        logger = UnifiedLogger()
    return logger


def convert_settings(settings: Any) -> PromiseSettings:
    """
    转换配置对象为PromiseSettings

    支持 PromiseSettings、字典或带有相应属性的任意对象
    """
    if settings is None:
        return PromiseSettings()

    if isinstance(settings, PromiseSettings):
        return settings

    # 处理字典格式
    if isinstance(settings, dict):
        return PromiseSettings(
            scheduler_mode=settings.get("scheduler_mode", SchedulerMode.MANUAL),
            flush_limit=settings.get("flush_limit"),
            log_transitions=settings.get("log_transitions", False),
            logger_name=settings.get("logger_name", "fractal_promise"),
        )

    # 处理对象格式
    return PromiseSettings(
        scheduler_mode=getattr(settings, "scheduler_mode", SchedulerMode.MANUAL),
        flush_limit=getattr(settings, "flush_limit", None),
        log_transitions=getattr(settings, "log_transitions", False),
        logger_name=getattr(settings, "logger_name", "fractal_promise"),
    )
