"""
Interaction State Models - 交互状态数据模型

一个视图实例独占一份 InteractionState，视图卸载时销毁。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from cosmic_nexus.config import NexusConfig
from cosmic_nexus.models.graph import GraphLayout


class MousePosition(BaseModel):
    """指针位置（图坐标或屏幕坐标）"""

    x: float
    y: float


class InteractionState(BaseModel):
    """图谱视图交互状态"""

    # 悬停（各自至多一个）
    hovered_node_id: str | None = Field(default=None)
    hovered_link_id: str | None = Field(default=None)

    # 连接模式
    connection_mode: bool = Field(default=False)
    source_node_id: str | None = Field(default=None, description="待定的第一个端点")
    mouse_pos: MousePosition | None = Field(default=None)

    # 布局与显示
    graph_layout: GraphLayout = Field(default=GraphLayout.FORCE)
    show_labels: bool = Field(default=True)
    show_arrows: bool = Field(default=True)
    highlight_connections: bool = Field(default=True)
    dark_mode: bool = Field(default=True)
    zoom_level: float = Field(default=1.0)

    @classmethod
    def from_config(cls, config: NexusConfig) -> InteractionState:
        """按配置的默认值初始化"""
        return cls(
            graph_layout=GraphLayout(config.default_layout),
            show_labels=config.show_labels,
            show_arrows=config.show_arrows,
            highlight_connections=config.highlight_connections,
            dark_mode=config.dark_mode,
        )

    @property
    def has_pending_source(self) -> bool:
        return self.connection_mode and self.source_node_id is not None

    def clear_pending(self) -> None:
        """丢弃待定源节点及其临时连线"""
        self.source_node_id = None
        self.mouse_pos = None


class NoticeLevel(str, Enum):
    """提示级别"""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


@dataclass
class InteractionResult:
    """交互事件处理结果

    Attributes:
        handled: 事件是否引起了状态变化或回调
        level: 提示级别（无提示时为 None）
        message: 显示给用户的提示
        reason: 未处理的原因（调试用）
    """

    handled: bool = True
    level: NoticeLevel | None = None
    message: str | None = None
    reason: str | None = None

    @classmethod
    def quiet(cls) -> InteractionResult:
        """已处理，无提示"""
        return cls()

    @classmethod
    def info(cls, message: str) -> InteractionResult:
        return cls(level=NoticeLevel.INFO, message=message)

    @classmethod
    def success(cls, message: str) -> InteractionResult:
        return cls(level=NoticeLevel.SUCCESS, message=message)

    @classmethod
    def warning(cls, message: str) -> InteractionResult:
        return cls(level=NoticeLevel.WARNING, message=message)

    @classmethod
    def ignored(cls, reason: str | None = None) -> InteractionResult:
        """事件被忽略"""
        return cls(handled=False, reason=reason)


class InfoPanelKind(str, Enum):
    NODE = "node"
    LINK = "link"


class InfoPanel(BaseModel):
    """悬停元素的信息面板"""

    kind: InfoPanelKind
    title: str
    description: str = ""
    category: str | None = None
    icon: str | None = None
    color: str | None = None
    created: str = ""
    notes: str | None = None
    relationship: str | None = None
    strength: list[bool] = Field(default_factory=list)
    hint: str | None = None


__all__ = [
    "MousePosition",
    "InteractionState",
    "NoticeLevel",
    "InteractionResult",
    "InfoPanelKind",
    "InfoPanel",
]
