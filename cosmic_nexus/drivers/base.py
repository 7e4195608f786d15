"""
Graph Canvas Driver - 画布驱动抽象层

交互状态机只通过这个接口操作渲染库：
1. set_layout - 应用布局（力导向参数或固定坐标）
2. focus_all - 相机适配全部节点
3. pan / zoom - 相机平移与缩放
4. refresh - 重新加热模拟并重绘
5. draw - 绘制一帧场景

任何具体渲染库都是实现此接口的适配器。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from cosmic_nexus.models.graph import GraphLayout, RenderGraph

if TYPE_CHECKING:
    from cosmic_nexus.services.layout import ForceParameters


class GraphCanvasDriver(ABC):
    """画布驱动基类

    所有驱动必须实现：
    - set_layout(): 应用布局
    - focus_all(): 适配视野
    - pan() / zoom(): 相机控制
    - refresh(): 重新计算并重绘

    可选重写：
    - supports_coordinate_mapping: 是否支持屏幕坐标 -> 图坐标转换（默认 False）
    - screen_to_graph(): 坐标转换
    - resize(): 视口尺寸变化
    - draw(): 绘制场景（默认不做任何事）
    """

    @abstractmethod
    def set_layout(
        self,
        layout: GraphLayout,
        graph: RenderGraph,
        params: ForceParameters | None = None,
    ) -> None:
        """应用布局

        Args:
            layout: 布局类型
            graph: 渲染图（聚簇布局时节点已带 fx/fy）
            params: 力导向参数（仅 force 布局）
        """
        pass

    @abstractmethod
    def focus_all(self, duration_ms: int = 400) -> None:
        """相机适配所有节点边界"""
        pass

    @abstractmethod
    def pan(self, dx: float, dy: float) -> None:
        """平移相机"""
        pass

    @abstractmethod
    def zoom(self, factor: float) -> float:
        """按倍数缩放，返回新的缩放级别"""
        pass

    @abstractmethod
    def refresh(self) -> None:
        """重新加热模拟并重绘"""
        pass

    @property
    def supports_coordinate_mapping(self) -> bool:
        """是否支持屏幕坐标到图坐标的转换"""
        return False

    def screen_to_graph(self, x: float, y: float) -> tuple[float, float]:
        """屏幕坐标 -> 图坐标"""
        raise NotImplementedError(f"{type(self).__name__} does not map coordinates")

    def resize(self, width: float, height: float) -> None:
        """视口尺寸变化（默认不做任何事）"""
        return None

    def draw(self, scene: Any) -> None:
        """绘制一帧场景"""
        return None


__all__ = ["GraphCanvasDriver"]
