"""Graph snapshot - 无界面地挂载视图，完成布局后导出节点坐标和样式"""

import logging
from collections import Counter
from typing import Any

from cosmic_nexus.config import NexusConfig, get_config
from cosmic_nexus.drivers.networkx_driver import NetworkxCanvasDriver
from cosmic_nexus.models.graph import GraphLayout, ProjectionStatus
from cosmic_nexus.models.snapshot import GraphSnapshot, SnapshotEdge, SnapshotNode
from cosmic_nexus.services import visual_encoder as encoder
from cosmic_nexus.view.events import LocalEventSource
from cosmic_nexus.view.graph_view import KnowledgeGraphView, ViewKind

logger = logging.getLogger(__name__)


def build_snapshot(
    nodes: Any,
    connections: Any,
    layout: GraphLayout | str | None = None,
    config: NexusConfig | None = None,
) -> GraphSnapshot:
    """
    投影并布局图谱，返回快照

    Args:
        nodes: 知识节点数组
        connections: 连接数组
        layout: 布局（默认取配置的 default_layout）
        config: 配置

    Returns:
        GraphSnapshot（数据形状非法或为空时只有 status 和 message）
    """
    config = config or get_config()
    layout = GraphLayout(layout or config.default_layout)

    view = KnowledgeGraphView(
        nodes, connections, driver=NetworkxCanvasDriver(config=config), config=config
    )
    projection = view.projection
    if view.machine is not None and view.machine.state.graph_layout != layout:
        view.set_layout(layout)

    view.mount(LocalEventSource())
    try:
        render = view.render()
    finally:
        view.unmount()

    if render.kind == ViewKind.PLACEHOLDER:
        return GraphSnapshot(status=projection.status, layout=layout, message=render.message)
    if render.kind == ViewKind.ERROR:
        logger.warning(f"Snapshot rendering failed: {render.message}")
        return GraphSnapshot(status=projection.status, layout=layout, message=render.message)

    scene = render.scene
    snapshot_nodes = [
        SnapshotNode(
            id=drawing.node.id,
            label=drawing.node.name,
            category=drawing.node.category,
            description=drawing.node.description,
            created_at=drawing.node.created_at,
            color=drawing.style.color,
            icon=drawing.style.icon,
            symbol=drawing.style.symbol,
            size=drawing.style.size,
            connection_count=drawing.node.connection_count,
            x=drawing.node.x,
            y=drawing.node.y,
        )
        for drawing in scene.nodes
    ]
    snapshot_edges = [
        SnapshotEdge(
            id=drawing.link.id,
            connection_id=drawing.link.connection_id,
            source=drawing.link.source,
            target=drawing.link.target,
            relationship=encoder.relationship_label(drawing.link.relationship_type),
            value=drawing.link.value,
            color=drawing.style.color,
            width=drawing.style.width,
            curvature=drawing.style.curvature,
        )
        for drawing in scene.links
    ]

    return GraphSnapshot(
        status=ProjectionStatus.OK,
        layout=layout,
        nodes=snapshot_nodes,
        edges=snapshot_edges,
        node_count=len(snapshot_nodes),
        edge_count=len(snapshot_edges),
        dropped_links=projection.dropped_links,
        category_stats=dict(Counter(node.category for node in snapshot_nodes)),
    )
