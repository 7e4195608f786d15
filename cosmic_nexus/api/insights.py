"""Insights API - 连接建议接口"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from cosmic_nexus.models.insight import InsightReport
from cosmic_nexus.models.knowledge import KnowledgeNode
from cosmic_nexus.services.insight_service import InsightError, get_insight_service

router = APIRouter(prefix="/insights", tags=["insights"])


class InsightRequest(BaseModel):
    nodes: list[KnowledgeNode] = Field(..., description="参与生成的知识节点")
    seed: int | None = Field(default=None, description="随机种子（结果可复现）")


@router.post("/generate", response_model=InsightReport)
async def generate_insights(request: InsightRequest) -> InsightReport:
    """
    生成连接建议和探索提示

    至少需要两个节点，否则返回 400。
    """
    try:
        return get_insight_service().generate(request.nodes, seed=request.seed)
    except InsightError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
