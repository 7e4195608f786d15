"""Knowledge node and connection models - 知识节点与连接数据模型"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Category(str, Enum):
    """知识节点分类"""

    ART = "art"
    SCIENCE = "science"
    HISTORY = "history"
    MUSIC = "music"
    LITERATURE = "literature"
    PHILOSOPHY = "philosophy"
    TECHNOLOGY = "technology"
    HOBBY = "hobby"
    OTHER = "other"

    @classmethod
    def normalize(cls, value: str | None) -> "Category":
        """
        把任意字符串归一化为已知分类。

        未知或空值一律归为 OTHER（不抛异常）。
        """
        if not value:
            return cls.OTHER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class RelationshipType(str, Enum):
    """连接关系类型"""

    RELATED = "related"  # 默认
    INFLUENCES = "influences"
    INSPIRES = "inspires"
    CONTRASTS = "contrasts"
    BUILDS_ON = "builds_on"
    COMPLEMENTS = "complements"


class KnowledgeNode(BaseModel):
    """知识节点（兴趣/想法）

    category 保持为字符串：未知分类是合法输入，由视觉编码器兜底。
    """

    id: str = Field(..., min_length=1, description="节点 ID")
    title: str = Field(..., description="节点标题")
    description: str = Field(default="", description="节点描述")
    category: str = Field(default=Category.OTHER.value, description="节点分类")
    created_at: datetime | None = Field(default=None, description="创建时间")
    notes: str | None = Field(default=None, description="附加笔记")

    model_config = ConfigDict(from_attributes=True)


class Connection(BaseModel):
    """两个知识节点之间的有向连接"""

    id: str = Field(..., min_length=1, description="连接 ID")
    source_node_id: str = Field(..., description="源节点 ID")
    target_node_id: str = Field(..., description="目标节点 ID")
    relationship_type: str = Field(
        default=RelationshipType.RELATED.value, description="关系类型"
    )
    description: str = Field(default="", description="连接描述")
    strength: int | None = Field(default=None, ge=1, le=5, description="连接强度 1-5")
    created_at: datetime | None = Field(default=None, description="创建时间")

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def check_distinct_endpoints(self) -> "Connection":
        """源节点与目标节点必须不同"""
        if self.source_node_id == self.target_node_id:
            raise ValueError("source_node_id and target_node_id must differ")
        return self
