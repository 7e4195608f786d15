"""Graph API - 知识图谱投影接口"""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from cosmic_nexus.models.graph import GraphLayout
from cosmic_nexus.models.knowledge import Category, RelationshipType
from cosmic_nexus.models.snapshot import GraphSnapshot
from cosmic_nexus.services import visual_encoder as encoder
from cosmic_nexus.view.snapshot import build_snapshot

router = APIRouter(prefix="/graph", tags=["graph"])


class ProjectRequest(BaseModel):
    """投影请求（nodes / connections 形状非法时返回带 status 的空快照）"""

    nodes: Any = Field(default_factory=list, description="知识节点数组")
    connections: Any = Field(default_factory=list, description="连接数组")
    layout: GraphLayout | None = Field(default=None, description="布局（默认取配置）")


class CategoryPalette(BaseModel):
    category: str
    color: str
    icon: str
    symbol: str


class RelationshipPalette(BaseModel):
    relationship_type: str
    label: str
    icon: str


class Palette(BaseModel):
    """视觉编码表"""

    categories: list[CategoryPalette]
    relationships: list[RelationshipPalette]
    fallback_color: str = encoder.FALLBACK_COLOR
    fallback_icon: str = encoder.FALLBACK_ICON
    unresolved_link_color: str = encoder.UNRESOLVED_LINK_COLOR


@router.post("/project", response_model=GraphSnapshot)
async def project_graph(request: ProjectRequest) -> GraphSnapshot:
    """
    投影并布局知识图谱

    返回每个节点的坐标（networkx 力导向或聚簇布局）、颜色、图标，
    以及每条边的渐变颜色和线宽，用于前端绘制。
    """
    return build_snapshot(request.nodes, request.connections, request.layout)


@router.get("/palette", response_model=Palette)
async def get_palette() -> Palette:
    """
    获取视觉编码表

    分类 -> 颜色 / 图标 / 符号；关系类型 -> 显示文本 / 图标。
    """
    categories = [
        CategoryPalette(
            category=category.value,
            color=encoder.category_color(category.value),
            icon=encoder.category_icon(category.value),
            symbol=encoder.icon_symbol(encoder.category_icon(category.value)),
        )
        for category in Category
    ]
    relationships = [
        RelationshipPalette(
            relationship_type=rel.value,
            label=encoder.relationship_label(rel.value),
            icon=encoder.relationship_icon(rel.value),
        )
        for rel in RelationshipType
    ]
    return Palette(categories=categories, relationships=relationships)
