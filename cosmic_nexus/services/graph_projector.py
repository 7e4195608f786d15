"""Graph Projector - 图谱数据投影服务

把知识节点/连接记录转换成渲染库需要的节点/边结构，
并按输入数组的身份（identity）做记忆化。
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from cosmic_nexus.config import get_config
from cosmic_nexus.models.graph import (
    ProjectionResult,
    ProjectionStatus,
    RenderGraph,
    RenderLink,
    RenderNode,
)

logger = logging.getLogger(__name__)


def _is_array(value: Any) -> bool:
    """只接受 list / tuple（字符串、字典、None 都不算数组）"""
    return isinstance(value, (list, tuple))


def as_record(item: Any) -> dict:
    """把 pydantic 模型或映射统一成字典"""
    if isinstance(item, BaseModel):
        return item.model_dump()
    if isinstance(item, Mapping):
        return dict(item)
    # 普通对象：按属性读取
    return {
        key: getattr(item, key)
        for key in (
            "id", "title", "description", "category", "created_at", "notes",
            "source_node_id", "target_node_id", "relationship_type", "strength",
        )
        if hasattr(item, key)
    }


def _unique_link_id(
    source: str, target: str, connection_id: str | None, position: int, taken: set[str]
) -> str:
    """
    生成边 ID

    第一条边用 "source-target"；同一对节点之间的平行连接追加连接 ID，
    没有连接 ID 时追加边的位置序号。
    """
    link_id = f"{source}-{target}"
    if link_id not in taken:
        return link_id
    if connection_id is not None and f"{link_id}:{connection_id}" not in taken:
        return f"{link_id}:{connection_id}"
    suffix = position
    while f"{link_id}#{suffix}" in taken:
        suffix += 1
    return f"{link_id}#{suffix}"


class GraphProjector:
    """图谱投影器：nodes + connections -> RenderGraph

    同一对输入引用重复投影时直接返回上一次的结果对象。
    """

    def __init__(self, base_val: float | None = None):
        self._base_val = base_val if base_val is not None else get_config().base_node_val
        self._last_nodes: Sequence | None = None
        self._last_connections: Sequence | None = None
        self._last_result: ProjectionResult | None = None

    def project(self, nodes: Any, connections: Any) -> ProjectionResult:
        """
        投影图谱数据

        Args:
            nodes: 知识节点数组
            connections: 连接数组

        Returns:
            ProjectionResult（形状非法时 status 标记为 invalid，不抛异常）
        """
        if (
            self._last_result is not None
            and nodes is self._last_nodes
            and connections is self._last_connections
        ):
            return self._last_result

        result = self._build(nodes, connections)

        self._last_nodes = nodes
        self._last_connections = connections
        self._last_result = result
        return result

    def invalidate(self) -> None:
        """丢弃记忆化结果"""
        self._last_nodes = None
        self._last_connections = None
        self._last_result = None

    def _build(self, nodes: Any, connections: Any) -> ProjectionResult:
        if not _is_array(nodes):
            logger.warning(f"Invalid nodes data format: {type(nodes).__name__}")
            return ProjectionResult(status=ProjectionStatus.INVALID_NODES)
        if not _is_array(connections):
            logger.warning(f"Invalid connections data format: {type(connections).__name__}")
            return ProjectionResult(status=ProjectionStatus.INVALID_CONNECTIONS)

        render_nodes = self._build_nodes(nodes)
        render_links, dropped = self._build_links(connections, render_nodes)

        # 派生连接数
        index = {node.id: node for node in render_nodes}
        for link in render_links:
            index[link.source].connection_count += 1
            index[link.target].connection_count += 1

        logger.debug(
            f"Projected graph: {len(render_nodes)} nodes, "
            f"{len(render_links)} links ({dropped} dropped)"
        )

        status = ProjectionStatus.OK if render_nodes else ProjectionStatus.EMPTY
        return ProjectionResult(
            status=status,
            graph=RenderGraph(nodes=render_nodes, links=render_links),
            dropped_links=dropped,
        )

    def _build_nodes(self, nodes: Sequence) -> list[RenderNode]:
        """构建渲染节点（ID 重复时保留第一条记录）"""
        render_nodes = []
        seen: set[str] = set()
        for item in nodes:
            record = as_record(item)
            node_id = record.get("id")
            if node_id is None:
                logger.debug("Skipping node without id")
                continue
            node_id = str(node_id)
            if node_id in seen:
                logger.debug(f"Skipping duplicate node id: {node_id}")
                continue
            seen.add(node_id)
            render_nodes.append(
                RenderNode(
                    id=node_id,
                    name=record.get("title") or "",
                    category=record.get("category") or "other",
                    description=record.get("description") or "",
                    created_at=record.get("created_at"),
                    notes=record.get("notes"),
                    val=self._base_val,
                    original_val=self._base_val,
                )
            )
        return render_nodes

    def _build_links(
        self, connections: Sequence, render_nodes: list[RenderNode]
    ) -> tuple[list[RenderLink], int]:
        """构建渲染边，丢弃悬空引用"""
        node_ids = {node.id for node in render_nodes}
        links = []
        link_ids: set[str] = set()
        dropped = 0

        for item in connections:
            record = as_record(item)
            source = record.get("source_node_id")
            target = record.get("target_node_id")
            source = str(source) if source is not None else None
            target = str(target) if target is not None else None

            if source not in node_ids or target not in node_ids:
                # 端点不存在：静默丢弃
                logger.debug(f"Dropping dangling connection {record.get('id')}: {source} -> {target}")
                dropped += 1
                continue

            conn_id = record.get("id")
            conn_id = str(conn_id) if conn_id is not None else None
            link_id = _unique_link_id(source, target, conn_id, len(links), link_ids)
            link_ids.add(link_id)
            links.append(
                RenderLink(
                    id=link_id,
                    connection_id=conn_id,
                    source=source,
                    target=target,
                    value=record.get("strength") or 1,
                    description=record.get("description") or "",
                    relationship_type=record.get("relationship_type"),
                )
            )

        return links, dropped


# 单例
_graph_projector: GraphProjector | None = None


def get_graph_projector() -> GraphProjector:
    """获取 GraphProjector 单例"""
    global _graph_projector
    if _graph_projector is None:
        _graph_projector = GraphProjector()
    return _graph_projector
