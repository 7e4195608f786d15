"""
View Events - 视图事件源与定时器协议

视图挂载时向事件源注册 keydown / pointermove / resize 监听器，
并通过调度器安排一个有上限的就绪定时器。

设计原则：
- Protocol 模式，任何宿主（浏览器桥接、asyncio 事件循环、测试替身）都可实现
- asyncio 事件循环本身满足 Scheduler 协议（loop.call_later 返回可 cancel 的句柄）
"""

import logging
from abc import abstractmethod
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]

# 视图监听的事件类型
KEYDOWN = "keydown"
POINTERMOVE = "pointermove"
RESIZE = "resize"


@runtime_checkable
class Cancellable(Protocol):
    """可取消的定时器句柄"""

    @abstractmethod
    def cancel(self) -> None:
        ...


@runtime_checkable
class Scheduler(Protocol):
    """定时器调度协议"""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable:
        """delay 秒后调用 callback，返回可取消的句柄"""
        ...


@runtime_checkable
class EventSource(Protocol):
    """事件源协议（窗口 / 文档级事件）"""

    @abstractmethod
    def add_listener(self, event_type: str, listener: Listener) -> None:
        ...

    @abstractmethod
    def remove_listener(self, event_type: str, listener: Listener) -> None:
        ...


class LocalEventSource:
    """进程内事件源

    按事件类型保存监听器，dispatch 时按注册顺序同步调用。
    """

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
        if not listeners:
            self._listeners.pop(event_type, None)

    def listener_count(self, event_type: str | None = None) -> int:
        """已注册的监听器数量（不指定类型时统计全部）"""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(items) for items in self._listeners.values())

    def dispatch(self, event_type: str, event: Any = None) -> int:
        """分发事件，返回被调用的监听器数量"""
        listeners = list(self._listeners.get(event_type, []))
        for listener in listeners:
            listener(event)
        logger.debug(f"Dispatched {event_type} to {len(listeners)} listener(s)")
        return len(listeners)


__all__ = [
    "Listener",
    "KEYDOWN",
    "POINTERMOVE",
    "RESIZE",
    "Cancellable",
    "Scheduler",
    "EventSource",
    "LocalEventSource",
]
