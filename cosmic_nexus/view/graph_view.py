"""
Knowledge Graph View - 知识图谱视图

组合投影器、视觉编码和交互状态机：
1. update_data - 接收 nodes / connections，投影为渲染图
2. mount / unmount - 管理事件监听器和就绪定时器的生命周期
3. render - 输出 placeholder | loading | graph | error 四种渲染结果

渲染库的异常只在 _renderer_boundary 一处捕获，降级为 error 渲染。
"""

import logging
from collections.abc import Callable, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from cosmic_nexus.config import NexusConfig, get_config
from cosmic_nexus.drivers.base import GraphCanvasDriver
from cosmic_nexus.drivers.networkx_driver import NetworkxCanvasDriver
from cosmic_nexus.models.graph import (
    GraphLayout,
    PhantomOverlay,
    ProjectionResult,
    ProjectionStatus,
    RenderGraph,
    RenderLink,
    RenderNode,
)
from cosmic_nexus.services import visual_encoder as encoder
from cosmic_nexus.services.graph_projector import GraphProjector
from cosmic_nexus.state.machine import (
    ConfirmHandler,
    CreateConnectionHandler,
    DeleteConnectionHandler,
    InteractionStateMachine,
    NodeClickHandler,
    PanDirection,
)
from cosmic_nexus.state.models import InfoPanel, InteractionResult
from cosmic_nexus.view.events import (
    KEYDOWN,
    POINTERMOVE,
    RESIZE,
    Cancellable,
    EventSource,
    Listener,
    Scheduler,
)

logger = logging.getLogger(__name__)

NoticeHandler = Callable[[InteractionResult], None]

PLACEHOLDER_TITLE = "Graph data is not available"
PLACEHOLDER_MESSAGES = {
    ProjectionStatus.INVALID_NODES: "Invalid nodes data format.",
    ProjectionStatus.INVALID_CONNECTIONS: "Invalid connections data format.",
    ProjectionStatus.EMPTY: "Add some interest nodes to visualize your knowledge graph.",
}
LOADING_TITLE = "Loading Graph"
LOADING_MESSAGE = "Preparing your knowledge visualization..."
ERROR_TITLE = "Error rendering graph"


class ViewKind(str, Enum):
    """渲染结果类型"""

    PLACEHOLDER = "placeholder"
    LOADING = "loading"
    GRAPH = "graph"
    ERROR = "error"


class ControlsPanel(BaseModel):
    """控制面板（布局、显示开关、相机按钮）"""

    layout: GraphLayout = Field(..., description="当前布局")
    layouts: list[GraphLayout] = Field(default_factory=lambda: list(GraphLayout))
    show_labels: bool
    show_arrows: bool
    highlight_connections: bool
    dark_mode: bool
    connection_mode: bool
    zoom_level: float
    camera_actions: list[str] = Field(
        default_factory=lambda: ["zoom_in", "zoom_out", "focus_all"]
        + [f"pan_{d.value}" for d in PanDirection]
    )


@dataclass
class NodeDrawing:
    node: RenderNode
    style: encoder.NodeStyle


@dataclass
class LinkDrawing:
    link: RenderLink
    style: encoder.LinkStyle


@dataclass
class GraphScene:
    """一帧场景：持久元素 + 可选的临时连线"""

    nodes: list[NodeDrawing] = field(default_factory=list)
    links: list[LinkDrawing] = field(default_factory=list)
    phantom: PhantomOverlay | None = None
    phantom_style: encoder.LinkStyle | None = None
    background: str | None = None
    gradients: list[encoder.GradientDefinition] = field(default_factory=list)


@dataclass
class ViewRender:
    """视图渲染结果"""

    kind: ViewKind
    title: str | None = None
    message: str | None = None
    scene: GraphScene | None = None
    controls: ControlsPanel | None = None
    info_panel: InfoPanel | None = None
    status_banner: str | None = None


def _event_key(event: Any) -> str | None:
    if isinstance(event, str):
        return event
    if isinstance(event, Mapping):
        return event.get("key")
    return getattr(event, "key", None)


def _event_point(event: Any, x_key: str, y_key: str) -> tuple[float, float] | None:
    """从事件中读取坐标（映射、属性或二元组）"""
    if isinstance(event, (tuple, list)) and len(event) == 2:
        return float(event[0]), float(event[1])
    if isinstance(event, Mapping):
        x, y = event.get(x_key), event.get(y_key)
    else:
        x, y = getattr(event, x_key, None), getattr(event, y_key, None)
    if x is None or y is None:
        return None
    return float(x), float(y)


class KnowledgeGraphView:
    """知识图谱视图

    每个视图实例独占一份交互状态；卸载后所有处理器不再生效。
    """

    def __init__(
        self,
        nodes: Any,
        connections: Any,
        *,
        driver: GraphCanvasDriver | None = None,
        on_node_click: NodeClickHandler | None = None,
        on_delete_connection: DeleteConnectionHandler | None = None,
        on_create_connection: CreateConnectionHandler | None = None,
        confirm: ConfirmHandler | None = None,
        on_notice: NoticeHandler | None = None,
        config: NexusConfig | None = None,
    ):
        self._config = config or get_config()
        self._driver = driver or NetworkxCanvasDriver(config=self._config)
        self._projector = GraphProjector(base_val=self._config.base_node_val)
        self._on_node_click = on_node_click
        self._on_delete_connection = on_delete_connection
        self._on_create_connection = on_create_connection
        self._confirm = confirm
        self._on_notice = on_notice

        self._result: ProjectionResult | None = None
        self._machine: InteractionStateMachine | None = None

        # 生命周期
        self._events: EventSource | None = None
        self._listeners: list[tuple[str, Listener]] = []
        self._timer: Cancellable | None = None
        self._mounted = False
        self._torn_down = False
        self._ready = False

        # 渲染错误
        self._error: str | None = None

        self.update_data(nodes, connections)

    # ============ Properties ============

    @property
    def machine(self) -> InteractionStateMachine | None:
        """交互状态机（数据不可渲染或视图已卸载时为 None）"""
        return self._machine

    @property
    def graph(self) -> RenderGraph | None:
        return self._result.graph if self._result and self._result.is_renderable else None

    @property
    def projection(self) -> ProjectionResult | None:
        return self._result

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def is_ready(self) -> bool:
        return self._ready

    # ============ Data ============

    def update_data(self, nodes: Any, connections: Any) -> ProjectionResult:
        """接收新的输入数组；引用不变时不做任何事"""
        result = self._projector.project(nodes, connections)
        if result is self._result:
            return result
        self._result = result

        if not result.is_renderable:
            # 无可渲染数据：不保留交互状态
            self._machine = None
            return result

        if self._torn_down:
            # 已卸载：交互状态在下一次 mount 时重新创建
            return result

        if self._machine is None:
            self._create_machine(result.graph)
        else:
            self._machine.set_graph(result.graph)
            with self._renderer_boundary("layout"):
                self._machine.set_layout(self._machine.state.graph_layout)
        return result

    def _create_machine(self, graph: RenderGraph) -> None:
        """创建一份全新的交互状态并应用初始布局"""
        self._machine = InteractionStateMachine(
            graph,
            self._driver,
            on_node_click=self._on_node_click,
            on_delete_connection=self._on_delete_connection,
            on_create_connection=self._on_create_connection,
            confirm=self._confirm,
            config=self._config,
        )
        with self._renderer_boundary("layout"):
            self._machine.set_layout(self._machine.state.graph_layout)

    # ============ Lifecycle ============

    def mount(self, events: EventSource, scheduler: Scheduler | None = None) -> None:
        """注册事件监听器并安排就绪定时器"""
        if self._mounted:
            logger.warning("Graph view is already mounted")
            return

        self._events = events
        self._listeners = [
            (KEYDOWN, self._handle_keydown),
            (POINTERMOVE, self._handle_pointermove),
            (RESIZE, self._handle_resize),
        ]
        for event_type, listener in self._listeners:
            events.add_listener(event_type, listener)
        self._mounted = True
        self._torn_down = False

        if self._machine is None and self._result.is_renderable:
            self._create_machine(self._result.graph)

        if scheduler is None:
            self._ready = True
        else:
            self._timer = scheduler.call_later(self._config.ready_delay_seconds, self._mark_ready)
        logger.debug("Graph view mounted")

    def unmount(self) -> None:
        """取消定时器、移除全部监听器并销毁交互状态"""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._events is not None:
            for event_type, listener in self._listeners:
                self._events.remove_listener(event_type, listener)
        self._listeners = []
        self._events = None
        self._mounted = False
        self._torn_down = True
        self._ready = False
        self._machine = None
        logger.debug("Graph view unmounted")

    def _mark_ready(self) -> None:
        self._timer = None
        if not self._mounted:
            return
        self._ready = True
        with self._renderer_boundary("focus"):
            if self._machine is not None:
                self._machine.focus_all()

    # ============ Event Handlers ============

    def _handle_keydown(self, event: Any) -> None:
        if not self._mounted or self._machine is None:
            return
        key = _event_key(event)
        if key is None:
            return
        self._notify(self._machine.key_down(key))

    def _handle_pointermove(self, event: Any) -> None:
        if not self._mounted or self._machine is None:
            return
        point = _event_point(event, "x", "y")
        if point is None:
            return
        with self._renderer_boundary("pointer mapping"):
            self._machine.pointer_move(*point)

    def _handle_resize(self, event: Any) -> None:
        if not self._mounted:
            return
        size = _event_point(event, "width", "height")
        if size is None:
            return
        with self._renderer_boundary("resize"):
            self._driver.resize(*size)

    def _notify(self, result: InteractionResult) -> InteractionResult:
        if result.message and self._on_notice is not None:
            self._on_notice(result)
        return result

    # ============ Renderer Callbacks ============

    def node_hover(self, node_id: str | None) -> InteractionResult:
        return self._dispatch(lambda m: m.hover_node(node_id))

    def link_hover(self, link_id: str | None) -> InteractionResult:
        return self._dispatch(lambda m: m.hover_link(link_id))

    def node_click(self, node_id: str) -> InteractionResult:
        return self._dispatch(lambda m: m.click_node(node_id))

    def link_click(self, link_id: str) -> InteractionResult:
        return self._dispatch(lambda m: m.click_link(link_id))

    def zoom_end(self, k: float) -> InteractionResult:
        return self._dispatch(lambda m: m.zoom_end(k))

    # ============ Controls ============

    def toggle_connection_mode(self) -> InteractionResult:
        return self._dispatch(lambda m: m.toggle_connection_mode())

    def set_layout(self, layout: GraphLayout | str) -> InteractionResult:
        layout = GraphLayout(layout)
        return self._dispatch(lambda m: m.set_layout(layout), "layout")

    def toggle_labels(self) -> InteractionResult:
        return self._dispatch(lambda m: m.toggle_labels())

    def toggle_arrows(self) -> InteractionResult:
        return self._dispatch(lambda m: m.toggle_arrows())

    def toggle_highlight(self) -> InteractionResult:
        return self._dispatch(lambda m: m.toggle_highlight())

    def toggle_dark_mode(self) -> InteractionResult:
        return self._dispatch(lambda m: m.toggle_dark_mode())

    def pan(self, direction: PanDirection | str) -> InteractionResult:
        return self._dispatch(lambda m: m.pan(direction), "pan")

    def zoom_in(self) -> InteractionResult:
        return self._dispatch(lambda m: m.zoom_in(), "zoom")

    def zoom_out(self) -> InteractionResult:
        return self._dispatch(lambda m: m.zoom_out(), "zoom")

    def focus_all(self) -> InteractionResult:
        return self._dispatch(lambda m: m.focus_all(), "focus")

    def _dispatch(
        self,
        action: Callable[[InteractionStateMachine], InteractionResult],
        operation: str | None = None,
    ) -> InteractionResult:
        """把操作转发给状态机；涉及渲染库的操作放在边界内执行"""
        if self._torn_down:
            return InteractionResult.ignored("view unmounted")
        if self._machine is None:
            return InteractionResult.ignored("no graph to interact with")
        if operation is None:
            return self._notify(action(self._machine))

        result = InteractionResult.ignored("renderer failed")
        with self._renderer_boundary(operation):
            result = action(self._machine)
        return self._notify(result)

    # ============ Render ============

    def render(self) -> ViewRender:
        """按当前数据、生命周期和交互状态输出渲染结果"""
        result = self._result
        if not result.is_renderable:
            status = result.status
            return ViewRender(
                kind=ViewKind.PLACEHOLDER,
                title=PLACEHOLDER_TITLE,
                message=PLACEHOLDER_MESSAGES[status],
            )

        if self._error is not None:
            return self._error_render()

        if not self._ready:
            return ViewRender(kind=ViewKind.LOADING, title=LOADING_TITLE, message=LOADING_MESSAGE)

        machine = self._machine
        scene = None
        with self._renderer_boundary("draw"):
            scene = self.compose_scene()
            self._driver.draw(scene)
        if self._error is not None:
            return self._error_render()

        state = machine.state
        return ViewRender(
            kind=ViewKind.GRAPH,
            scene=scene,
            controls=ControlsPanel(
                layout=state.graph_layout,
                show_labels=state.show_labels,
                show_arrows=state.show_arrows,
                highlight_connections=state.highlight_connections,
                dark_mode=state.dark_mode,
                connection_mode=state.connection_mode,
                zoom_level=state.zoom_level,
            ),
            info_panel=machine.info_panel(),
            status_banner=machine.status_banner(),
        )

    def compose_scene(self) -> GraphScene:
        """按当前显示尺寸和交互状态为每个元素生成绘制属性"""
        machine = self._machine
        graph = machine.graph
        state = machine.state
        sizes = machine.display_sizes()
        index = graph.node_index()

        nodes = [
            NodeDrawing(
                node=node,
                style=encoder.node_style(
                    node,
                    sizes[node.id],
                    hovered=node.id == state.hovered_node_id,
                    dark_mode=state.dark_mode,
                    show_labels=state.show_labels,
                    global_scale=state.zoom_level,
                ),
            )
            for node in graph.nodes
        ]
        links = [
            LinkDrawing(
                link=link,
                style=encoder.link_style(
                    link,
                    index,
                    hovered=link.id == state.hovered_link_id,
                    show_arrows=state.show_arrows,
                    has_reverse=graph.has_reverse(link),
                ),
            )
            for link in graph.links
        ]

        phantom = machine.phantom()
        return GraphScene(
            nodes=nodes,
            links=links,
            phantom=phantom,
            phantom_style=encoder.transient_link_style(state.show_arrows) if phantom else None,
            background=encoder.background_color(state.dark_mode),
            gradients=encoder.gradient_definitions(),
        )

    def _error_render(self) -> ViewRender:
        return ViewRender(kind=ViewKind.ERROR, title=ERROR_TITLE, message=self._error)

    def reset_error(self) -> None:
        """清除渲染错误，下一次 render 重新尝试绘制"""
        self._error = None

    @contextmanager
    def _renderer_boundary(self, operation: str):
        """渲染库调用的唯一异常边界"""
        try:
            yield
        except Exception as e:
            logger.exception(f"Rendering library failed during {operation}")
            self._error = str(e) or type(e).__name__


__all__ = [
    "KnowledgeGraphView",
    "ViewKind",
    "ViewRender",
    "GraphScene",
    "NodeDrawing",
    "LinkDrawing",
    "ControlsPanel",
    "PLACEHOLDER_TITLE",
    "LOADING_TITLE",
    "ERROR_TITLE",
]
