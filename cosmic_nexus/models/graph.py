"""Render graph models for the knowledge graph view - 图谱渲染数据模型"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

# 临时目标节点 ID（连接模式下跟随指针）
PHANTOM_NODE_ID = "temp-target"


class GraphLayout(str, Enum):
    """图谱布局"""

    FORCE = "force"  # 力导向
    CLUSTER = "cluster"  # 按分类聚簇


class RenderNode(BaseModel):
    """渲染节点（由 KnowledgeNode 投影而来，仅视图内使用）"""

    id: str = Field(..., description="节点 ID")
    name: str = Field(..., description="显示名称（来自 title）")
    category: str = Field(default="other", description="节点分类")
    description: str = Field(default="", description="节点描述")
    created_at: datetime | None = Field(default=None, description="创建时间")
    notes: str | None = Field(default=None, description="附加笔记")

    # 可视化属性
    val: float = Field(default=3.0, description="视觉尺寸")
    original_val: float = Field(default=3.0, description="基准尺寸（悬停结束后恢复）")
    connection_count: int = Field(default=0, description="已渲染的连接数")

    # 布局坐标
    x: float | None = Field(default=None, description="模拟坐标 x")
    y: float | None = Field(default=None, description="模拟坐标 y")
    fx: float | None = Field(default=None, description="固定坐标 x")
    fy: float | None = Field(default=None, description="固定坐标 y")

    def clear_pin(self) -> None:
        """清除固定坐标"""
        self.fx = None
        self.fy = None

    @property
    def is_pinned(self) -> bool:
        return self.fx is not None and self.fy is not None


class RenderLink(BaseModel):
    """渲染边（由 Connection 投影而来）"""

    id: str = Field(..., description="边 ID（source-target，平行连接追加后缀，图内唯一）")
    connection_id: str | None = Field(default=None, description="原始连接 ID")
    source: str = Field(..., description="源节点 ID")
    target: str = Field(..., description="目标节点 ID")
    value: int = Field(default=1, description="强度（默认 1）")
    description: str = Field(default="", description="连接描述")
    relationship_type: str | None = Field(default=None, description="关系类型")


class RenderGraph(BaseModel):
    """完整渲染图（不包含任何临时元素）"""

    nodes: list[RenderNode] = Field(default_factory=list, description="节点列表")
    links: list[RenderLink] = Field(default_factory=list, description="边列表")

    def node_index(self) -> dict[str, RenderNode]:
        """按 ID 索引节点"""
        return {node.id: node for node in self.nodes}

    def get_node(self, node_id: str | None) -> RenderNode | None:
        if node_id is None:
            return None
        return next((n for n in self.nodes if n.id == node_id), None)

    def get_link(self, link_id: str | None) -> RenderLink | None:
        if link_id is None:
            return None
        return next((link for link in self.links if link.id == link_id), None)

    def neighbors(self, node_id: str) -> set[str]:
        """与指定节点直接相连的节点 ID"""
        result = set()
        for link in self.links:
            if link.source == node_id:
                result.add(link.target)
            elif link.target == node_id:
                result.add(link.source)
        return result

    def has_reverse(self, link: RenderLink) -> bool:
        """是否存在反向边（用于弯曲绘制）"""
        return any(
            other.source == link.target and other.target == link.source
            for other in self.links
        )


class TransientNode(BaseModel):
    """连接模式下跟随指针的临时端点"""

    id: str = PHANTOM_NODE_ID
    x: float = 0.0
    y: float = 0.0
    temp: bool = True


class TransientLink(BaseModel):
    """从待定源节点指向指针的临时虚线"""

    source: str
    target: str = PHANTOM_NODE_ID
    temp: bool = True
    dashed: bool = True


class PhantomOverlay(BaseModel):
    """进行中的连接（临时节点 + 临时边），永远不属于 RenderGraph"""

    node: TransientNode
    link: TransientLink


class ProjectionStatus(str, Enum):
    """投影结果状态"""

    OK = "ok"
    EMPTY = "empty"  # 没有节点
    INVALID_NODES = "invalid_nodes"  # nodes 不是数组
    INVALID_CONNECTIONS = "invalid_connections"  # connections 不是数组


class ProjectionResult(BaseModel):
    """投影结果"""

    status: ProjectionStatus = Field(..., description="投影状态")
    graph: RenderGraph = Field(default_factory=RenderGraph, description="渲染图")
    dropped_links: int = Field(default=0, description="因悬空引用被丢弃的边数")

    @property
    def is_valid(self) -> bool:
        return self.status in (ProjectionStatus.OK, ProjectionStatus.EMPTY)

    @property
    def is_renderable(self) -> bool:
        return self.status == ProjectionStatus.OK
