"""Insight models - 连接建议与探索提示"""

from pydantic import BaseModel, Field


class SuggestedConnection(BaseModel):
    """建议的连接"""

    source_node_id: str = Field(..., description="源节点 ID")
    target_node_id: str = Field(..., description="目标节点 ID")
    source_name: str = Field(..., description="源节点标题")
    target_name: str = Field(..., description="目标节点标题")
    description: str = Field(..., description="连接描述")
    strength: int = Field(..., ge=1, le=5, description="建议强度")


class DiscoveryPrompt(BaseModel):
    """探索提示"""

    content: str = Field(..., description="提示内容")
    related_nodes: list[str] = Field(default_factory=list, description="相关节点标题")


class InsightReport(BaseModel):
    """一次洞察生成的结果"""

    connections: list[SuggestedConnection] = Field(default_factory=list)
    discovery_prompts: list[DiscoveryPrompt] = Field(default_factory=list)

    @property
    def connection_count(self) -> int:
        return len(self.connections)
