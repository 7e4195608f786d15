"""NetworkX Canvas Driver - 基于 networkx 的无界面画布驱动

用 networkx 的 spring_layout 执行力导向模拟，固定坐标（fx/fy）的节点保持不动。
斥力和边长决定弹簧模型的理想间距，模拟结束后按碰撞半径分离重叠节点。
维护一个二维相机（中心点 + 缩放），支持屏幕坐标到图坐标的转换。
"""

import logging
import math
from typing import Any

import networkx as nx

from cosmic_nexus.config import NexusConfig, get_config
from cosmic_nexus.drivers.base import GraphCanvasDriver
from cosmic_nexus.models.graph import GraphLayout, RenderGraph
from cosmic_nexus.services.layout import ForceParameters, resolve_collisions

logger = logging.getLogger(__name__)


class NetworkxCanvasDriver(GraphCanvasDriver):
    """无界面画布驱动（API / CLI 使用）"""

    def __init__(
        self,
        width: float | None = None,
        height: float | None = None,
        iterations: int | None = None,
        seed: int | None = None,
        config: NexusConfig | None = None,
    ):
        self._config = config or get_config()
        self.width = width or self._config.viewport_width
        self.height = height or self._config.viewport_height
        self.iterations = iterations or self._config.layout_iterations
        self.seed = seed if seed is not None else self._config.layout_seed
        self.padding = self._config.fit_padding

        self._graph: RenderGraph | None = None
        self._layout = GraphLayout.FORCE
        self._params: ForceParameters | None = None
        self._positions: dict[str, tuple[float, float]] = {}

        # 相机
        self.center: tuple[float, float] = (0.0, 0.0)
        self.zoom_level: float = 1.0
        self.last_transition_ms: int = 0

        self.last_scene: Any = None
        self.frame_count = 0

    @property
    def positions(self) -> dict[str, tuple[float, float]]:
        return dict(self._positions)

    @property
    def layout(self) -> GraphLayout:
        return self._layout

    @property
    def params(self) -> ForceParameters | None:
        return self._params

    def set_layout(
        self,
        layout: GraphLayout,
        graph: RenderGraph,
        params: ForceParameters | None = None,
    ) -> None:
        self._graph = graph
        self._layout = GraphLayout(layout)
        self._params = params or ForceParameters.from_config(self._config)
        logger.debug(f"Layout set to {self._layout.value} ({len(graph.nodes)} nodes)")

    def refresh(self) -> None:
        """重新执行模拟，把结果写回节点的 x/y"""
        if self._graph is None:
            return
        self._positions = self._simulate(self._graph)
        for node in self._graph.nodes:
            if node.id in self._positions:
                node.x, node.y = self._positions[node.id]

    def _simulate(self, graph: RenderGraph) -> dict[str, tuple[float, float]]:
        if not graph.nodes:
            return {}

        pinned = {n.id: (float(n.fx), float(n.fy)) for n in graph.nodes if n.is_pinned}
        if len(pinned) == len(graph.nodes):
            return dict(pinned)

        params = self._params or ForceParameters.from_config(self._config)
        distance = params.spring_distance()

        g = nx.Graph()
        for node in graph.nodes:
            g.add_node(node.id)
        for link in graph.links:
            g.add_edge(link.source, link.target, weight=link.value)

        # 初始位置：随机铺开到与理想间距相当的范围，再用已有坐标热启动
        spread = distance * math.sqrt(len(graph.nodes))
        initial = {
            node_id: (float(xy[0]) * spread - spread / 2, float(xy[1]) * spread - spread / 2)
            for node_id, xy in nx.random_layout(g, seed=self.seed).items()
        }
        for node in graph.nodes:
            if node.x is not None and node.y is not None:
                initial[node.id] = (node.x, node.y)
        initial.update(pinned)

        # 在图坐标中模拟（scale=None 不做归一化），k 即理想间距
        layout = nx.spring_layout(
            g,
            k=distance,
            pos=initial,
            fixed=list(pinned) or None,
            iterations=self.iterations,
            seed=self.seed,
            scale=None,
        )
        positions = {node_id: (float(xy[0]), float(xy[1])) for node_id, xy in layout.items()}

        radii = {node.id: params.collision_radius(node) for node in graph.nodes}
        return resolve_collisions(positions, radii, fixed=pinned)

    def focus_all(self, duration_ms: int = 400) -> None:
        """相机中心移到包围盒中心，缩放到刚好容纳全部节点"""
        self.last_transition_ms = duration_ms
        if not self._positions:
            return

        xs = [p[0] for p in self._positions.values()]
        ys = [p[1] for p in self._positions.values()]
        min_x, max_x, min_y, max_y = min(xs), max(xs), min(ys), max(ys)
        self.center = ((min_x + max_x) / 2, (min_y + max_y) / 2)

        span_x = max_x - min_x
        span_y = max_y - min_y
        if span_x == 0 and span_y == 0:
            self.zoom_level = 1.0
            return

        avail_w = max(self.width - 2 * self.padding, 1.0)
        avail_h = max(self.height - 2 * self.padding, 1.0)
        candidates = []
        if span_x > 0:
            candidates.append(avail_w / span_x)
        if span_y > 0:
            candidates.append(avail_h / span_y)
        self.zoom_level = min(candidates)

    def pan(self, dx: float, dy: float) -> None:
        self.center = (self.center[0] + dx, self.center[1] + dy)

    def zoom(self, factor: float) -> float:
        self.zoom_level *= factor
        return self.zoom_level

    @property
    def supports_coordinate_mapping(self) -> bool:
        return True

    def screen_to_graph(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.center[0] + (x - self.width / 2) / self.zoom_level,
            self.center[1] + (y - self.height / 2) / self.zoom_level,
        )

    def graph_to_screen(self, x: float, y: float) -> tuple[float, float]:
        return (
            (x - self.center[0]) * self.zoom_level + self.width / 2,
            (y - self.center[1]) * self.zoom_level + self.height / 2,
        )

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def draw(self, scene: Any) -> None:
        self.last_scene = scene
        self.frame_count += 1
