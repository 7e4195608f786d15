"""
Interaction State Machine - 交互状态机

把悬停、连接模式、布局切换、显示开关和相机控制建模为
单一 InteractionState 上的命名状态转换：

    Idle --进入节点--> NodeHovered --离开--> Idle
    Idle --进入边--> LinkHovered
    c/C: 切换连接模式（进入时清空待定源节点，退出时丢弃）
    连接模式: 点击 A -> 记录源节点；点击 B (B != A) -> on_create_connection(A, B)
    Escape: 退出连接模式并丢弃待定源节点

节点显示尺寸每次渲染时根据 (RenderNode, InteractionState) 重新推导，
从不原地修改 node.val。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from cosmic_nexus.config import NexusConfig, get_config
from cosmic_nexus.drivers.base import GraphCanvasDriver
from cosmic_nexus.models.graph import (
    GraphLayout,
    PhantomOverlay,
    RenderGraph,
    TransientLink,
    TransientNode,
)
from cosmic_nexus.services import visual_encoder as encoder
from cosmic_nexus.services.layout import ForceParameters, apply_cluster_layout, clear_pins
from cosmic_nexus.state.models import (
    InfoPanel,
    InfoPanelKind,
    InteractionResult,
    InteractionState,
    MousePosition,
)

logger = logging.getLogger(__name__)

NodeClickHandler = Callable[[str], None]
DeleteConnectionHandler = Callable[[str], None]
CreateConnectionHandler = Callable[[str, str], None]
ConfirmHandler = Callable[[str], bool]

# 提示文案
MSG_MODE_ENABLED = "Connection mode enabled. Click on a node to start creating a connection."
MSG_MODE_DISABLED = "Connection mode disabled"
MSG_MODE_CANCELLED = "Connection mode cancelled"
MSG_SAME_NODE = "Please select a different node to connect to."
MSG_SELECT_FIRST = "Select first node to create connection"
DELETE_CONFIRM_PROMPT = "Are you sure you want to delete this connection?"

TOGGLE_KEYS = ("c", "C")
CANCEL_KEY = "Escape"


class PanDirection(str, Enum):
    """相机平移方向"""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


_PAN_VECTORS = {
    PanDirection.UP: (0, -1),
    PanDirection.DOWN: (0, 1),
    PanDirection.LEFT: (-1, 0),
    PanDirection.RIGHT: (1, 0),
}


def _deny(prompt: str) -> bool:
    """默认确认器：未提供确认协作者时拒绝破坏性操作"""
    logger.debug(f"No confirm handler, denying: {prompt}")
    return False


class InteractionStateMachine:
    """交互状态机

    一个视图实例持有一个状态机；状态只在同步的事件处理中修改。
    """

    def __init__(
        self,
        graph: RenderGraph,
        driver: GraphCanvasDriver,
        *,
        on_node_click: NodeClickHandler | None = None,
        on_delete_connection: DeleteConnectionHandler | None = None,
        on_create_connection: CreateConnectionHandler | None = None,
        confirm: ConfirmHandler | None = None,
        config: NexusConfig | None = None,
        state: InteractionState | None = None,
    ):
        self._config = config or get_config()
        self._graph = graph
        self._driver = driver
        self._on_node_click = on_node_click
        self._on_delete_connection = on_delete_connection
        self._on_create_connection = on_create_connection
        self._confirm = confirm or _deny
        self.state = state or InteractionState.from_config(self._config)

        # 坐标转换能力在初始化时确定一次
        self._maps_coordinates = bool(driver.supports_coordinate_mapping)

    @property
    def graph(self) -> RenderGraph:
        return self._graph

    @property
    def maps_coordinates(self) -> bool:
        return self._maps_coordinates

    def set_graph(self, graph: RenderGraph) -> None:
        """替换渲染图，清理指向已消失元素的状态"""
        self._graph = graph
        state = self.state
        if state.hovered_node_id and graph.get_node(state.hovered_node_id) is None:
            state.hovered_node_id = None
        if state.hovered_link_id and graph.get_link(state.hovered_link_id) is None:
            state.hovered_link_id = None
        if state.source_node_id and graph.get_node(state.source_node_id) is None:
            logger.debug(f"Pending source {state.source_node_id} disappeared, discarding")
            state.clear_pending()

    # ============ Hover ============

    def hover_node(self, node_id: str | None) -> InteractionResult:
        """指针进入节点（node_id 为 None 表示离开）"""
        if node_id is None:
            if self.state.hovered_node_id is None:
                return InteractionResult.ignored("no hovered node")
            self.state.hovered_node_id = None
            return InteractionResult.quiet()

        if self._graph.get_node(node_id) is None:
            return InteractionResult.ignored(f"unknown node: {node_id}")
        self.state.hovered_node_id = node_id
        return InteractionResult.quiet()

    def hover_link(self, link_id: str | None) -> InteractionResult:
        """指针进入边（link_id 为 None 表示离开）"""
        if link_id is not None and self._graph.get_link(link_id) is None:
            return InteractionResult.ignored(f"unknown link: {link_id}")
        self.state.hovered_link_id = link_id
        return InteractionResult.quiet()

    def display_sizes(self) -> dict[str, float]:
        """
        推导每个节点的显示尺寸

        悬停节点 ×1.5；开启高亮时，相邻节点 ×1.2，其余节点 ×0.6。
        无悬停时所有节点等于 original_val。
        """
        sizes = {node.id: node.original_val for node in self._graph.nodes}
        hovered = self._graph.get_node(self.state.hovered_node_id)
        if hovered is None:
            return sizes

        sizes[hovered.id] = hovered.original_val * self._config.hover_factor
        if self.state.highlight_connections:
            neighbors = self._graph.neighbors(hovered.id)
            for node in self._graph.nodes:
                if node.id == hovered.id:
                    continue
                factor = (
                    self._config.neighbor_factor
                    if node.id in neighbors
                    else self._config.dim_factor
                )
                sizes[node.id] = node.original_val * factor
        return sizes

    # ============ Connection Mode ============

    def toggle_connection_mode(self) -> InteractionResult:
        return self.set_connection_mode(not self.state.connection_mode)

    def set_connection_mode(self, enabled: bool) -> InteractionResult:
        """进入或退出连接模式（两种情况都丢弃待定源节点）"""
        if enabled == self.state.connection_mode:
            return InteractionResult.ignored("connection mode unchanged")

        self.state.connection_mode = enabled
        self.state.clear_pending()
        logger.debug(f"Connection mode {'enabled' if enabled else 'disabled'}")
        return InteractionResult.info(MSG_MODE_ENABLED if enabled else MSG_MODE_DISABLED)

    def cancel_connection(self) -> InteractionResult:
        """Escape：退出连接模式，不创建任何连接"""
        if not self.state.connection_mode:
            return InteractionResult.ignored("not in connection mode")
        self.state.connection_mode = False
        self.state.clear_pending()
        return InteractionResult.info(MSG_MODE_CANCELLED)

    def key_down(self, key: str) -> InteractionResult:
        """键盘事件：c/C 切换连接模式，Escape 取消"""
        if key in TOGGLE_KEYS:
            return self.toggle_connection_mode()
        if key == CANCEL_KEY:
            return self.cancel_connection()
        return InteractionResult.ignored(f"unbound key: {key}")

    def pointer_move(self, x: float, y: float) -> InteractionResult:
        """有待定源节点时记录指针位置"""
        if not self.state.has_pending_source:
            return InteractionResult.ignored("no pending connection")
        if self._maps_coordinates:
            x, y = self._driver.screen_to_graph(x, y)
        self.state.mouse_pos = MousePosition(x=x, y=y)
        return InteractionResult.quiet()

    def phantom(self) -> PhantomOverlay | None:
        """进行中的连接；当且仅当连接模式开启且存在待定源节点时存在"""
        if not self.state.has_pending_source:
            return None

        pos = self.state.mouse_pos
        if pos is None:
            source = self._graph.get_node(self.state.source_node_id)
            x = source.x if source and source.x is not None else 0.0
            y = source.y if source and source.y is not None else 0.0
        else:
            x, y = pos.x, pos.y

        return PhantomOverlay(
            node=TransientNode(x=x, y=y),
            link=TransientLink(source=self.state.source_node_id),
        )

    # ============ Clicks ============

    def click_node(self, node_id: str) -> InteractionResult:
        """节点点击：连接模式下选择端点，否则交给 on_node_click"""
        node = self._graph.get_node(node_id)
        if node is None:
            return InteractionResult.ignored(f"unknown node: {node_id}")

        if not self.state.connection_mode:
            if self._on_node_click is None:
                return InteractionResult.ignored("no node click handler")
            self._fire("on_node_click", self._on_node_click, node.id)
            return InteractionResult.quiet()

        source_id = self.state.source_node_id
        if source_id is None:
            self.state.source_node_id = node.id
            return InteractionResult.info(
                f'Selected "{node.name}" as source. '
                f"Now click another node to create a connection."
            )

        if source_id == node.id:
            return InteractionResult.info(MSG_SAME_NODE)

        source = self._graph.get_node(source_id)
        source_name = source.name if source else source_id
        # 回到“选择第一个节点”子状态，保持连接模式
        self.state.clear_pending()

        if self._on_create_connection is None:
            logger.warning("No create-connection handler; connection not created")
            return InteractionResult.warning("Connections cannot be created here")

        self._fire("on_create_connection", self._on_create_connection, source_id, node.id)
        return InteractionResult.success(
            f'Created connection between "{source_name}" and "{node.name}"'
        )

    def click_link(self, link_id: str) -> InteractionResult:
        """边点击：确认后删除连接"""
        if self.state.connection_mode:
            return InteractionResult.ignored("link clicks are inactive in connection mode")

        link = self._graph.get_link(link_id)
        if link is None or not link.connection_id:
            return InteractionResult.ignored(f"unknown link: {link_id}")
        if self._on_delete_connection is None:
            return InteractionResult.ignored("no delete handler")

        if not self._confirm(DELETE_CONFIRM_PROMPT):
            return InteractionResult.ignored("deletion not confirmed")

        self._fire("on_delete_connection", self._on_delete_connection, link.connection_id)
        return InteractionResult.quiet()

    # ============ Layout ============

    def set_layout(self, layout: GraphLayout | str) -> InteractionResult:
        """切换布局：清除固定坐标，应用新布局并适配视野"""
        layout = GraphLayout(layout)
        self.state.graph_layout = layout

        nodes = self._graph.nodes
        clear_pins(nodes)

        params = None
        if layout == GraphLayout.CLUSTER:
            apply_cluster_layout(nodes, self._config)
        else:
            params = ForceParameters.from_config(self._config)

        self._driver.set_layout(layout, self._graph, params)
        self._driver.refresh()
        self._driver.focus_all(self._config.focus_duration_ms)
        logger.debug(f"Applied {layout.value} layout to {len(nodes)} nodes")
        return InteractionResult.quiet()

    # ============ Display Toggles ============

    def toggle_labels(self) -> InteractionResult:
        self.state.show_labels = not self.state.show_labels
        return InteractionResult.quiet()

    def toggle_arrows(self) -> InteractionResult:
        self.state.show_arrows = not self.state.show_arrows
        return InteractionResult.quiet()

    def toggle_highlight(self) -> InteractionResult:
        self.state.highlight_connections = not self.state.highlight_connections
        return InteractionResult.quiet()

    def toggle_dark_mode(self) -> InteractionResult:
        self.state.dark_mode = not self.state.dark_mode
        return InteractionResult.quiet()

    # ============ Camera ============

    def pan(self, direction: PanDirection | str) -> InteractionResult:
        dx, dy = _PAN_VECTORS[PanDirection(direction)]
        step = self._config.pan_step
        self._driver.pan(dx * step, dy * step)
        return InteractionResult.quiet()

    def zoom_in(self) -> InteractionResult:
        self.state.zoom_level = self._driver.zoom(self._config.zoom_in_factor)
        return InteractionResult.quiet()

    def zoom_out(self) -> InteractionResult:
        self.state.zoom_level = self._driver.zoom(self._config.zoom_out_factor)
        return InteractionResult.quiet()

    def focus_all(self) -> InteractionResult:
        self._driver.focus_all(self._config.focus_duration_ms)
        return InteractionResult.quiet()

    def zoom_end(self, k: float) -> InteractionResult:
        """渲染库缩放结束回调"""
        self.state.zoom_level = k
        return InteractionResult.quiet()

    # ============ Derived UI ============

    def status_banner(self) -> str | None:
        """连接模式状态横幅"""
        if not self.state.connection_mode:
            return None
        source = self._graph.get_node(self.state.source_node_id)
        if source is None:
            return MSG_SELECT_FIRST
        return f'Select target node to connect with "{source.name}"'

    def info_panel(self) -> InfoPanel | None:
        """悬停信息面板；节点与边同时悬停时节点优先"""
        node = self._graph.get_node(self.state.hovered_node_id)
        if node is not None:
            return InfoPanel(
                kind=InfoPanelKind.NODE,
                title=node.name,
                description=node.description,
                category=node.category,
                icon=encoder.category_icon(node.category),
                color=encoder.category_color(node.category),
                created=encoder.format_date(node.created_at),
                notes=node.notes,
                hint="Click to view details",
            )

        link = self._graph.get_link(self.state.hovered_link_id)
        if link is not None:
            return InfoPanel(
                kind=InfoPanelKind.LINK,
                title="Connection",
                description=link.description,
                icon=encoder.relationship_icon(link.relationship_type),
                relationship=encoder.relationship_label(link.relationship_type),
                strength=encoder.strength_stars(link.value),
            )
        return None

    def _fire(self, name: str, callback: Callable, *args) -> None:
        """调用外部协作者；结果不被观察，失败只记录日志"""
        try:
            callback(*args)
        except Exception:
            logger.exception(f"Collaborator {name}{args} failed")


__all__ = [
    "InteractionStateMachine",
    "PanDirection",
    "DELETE_CONFIRM_PROMPT",
]
