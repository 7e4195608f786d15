"""Graph snapshot models - 布局完成后的图谱快照（API / CLI 输出）"""

from datetime import datetime

from pydantic import BaseModel, Field

from cosmic_nexus.models.graph import GraphLayout, ProjectionStatus


class SnapshotNode(BaseModel):
    """快照节点"""

    id: str = Field(..., description="节点 ID")
    label: str = Field(..., description="节点标题")
    category: str = Field(..., description="节点分类")
    description: str = Field(default="", description="节点描述")
    created_at: datetime | None = Field(default=None, description="创建时间")

    # 可视化属性
    color: str = Field(..., description="节点颜色（按分类分配）")
    icon: str = Field(..., description="图标名")
    symbol: str = Field(..., description="图标符号")
    size: float = Field(..., description="显示尺寸")
    connection_count: int = Field(default=0, description="连接数")

    # 布局坐标
    x: float | None = Field(default=None)
    y: float | None = Field(default=None)


class SnapshotEdge(BaseModel):
    """快照边"""

    id: str = Field(..., description="边 ID（source-target）")
    connection_id: str | None = Field(default=None, description="原始连接 ID")
    source: str = Field(..., description="源节点 ID")
    target: str = Field(..., description="目标节点 ID")
    relationship: str = Field(..., description="关系显示文本")
    value: int = Field(default=1, description="强度")

    # 可视化属性
    color: str = Field(..., description="边颜色（渐变引用或中性色）")
    width: float = Field(..., description="线宽")
    curvature: float = Field(default=0.0, description="弯曲度（存在反向边时）")


class GraphSnapshot(BaseModel):
    """完整图谱快照"""

    status: ProjectionStatus = Field(..., description="投影状态")
    layout: GraphLayout = Field(default=GraphLayout.FORCE, description="布局")
    message: str | None = Field(default=None, description="占位或错误提示")

    nodes: list[SnapshotNode] = Field(default_factory=list, description="节点列表")
    edges: list[SnapshotEdge] = Field(default_factory=list, description="边列表")

    # 统计信息
    node_count: int = Field(default=0, description="节点总数")
    edge_count: int = Field(default=0, description="边总数")
    dropped_links: int = Field(default=0, description="被丢弃的悬空边数")
    category_stats: dict[str, int] = Field(default_factory=dict, description="各分类节点数")
