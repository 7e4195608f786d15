"""
Insight Service - 洞察生成服务

为一组知识节点生成连接建议和探索提示：
- 每一对节点生成一条模板化的连接建议，强度 1-5
- 最多三条探索提示（第三条只在存在第三个节点时生成）

强度由带种子的 random.Random 产生，同一种子结果可复现。
"""

import logging
import random
from collections.abc import Sequence
from itertools import combinations
from typing import Any

from cosmic_nexus.config import get_config
from cosmic_nexus.models.insight import DiscoveryPrompt, InsightReport, SuggestedConnection
from cosmic_nexus.services.graph_projector import as_record

logger = logging.getLogger(__name__)

MIN_NODES = 2

CONNECTION_TEMPLATE = (
    "{a} and {b} share interesting connections in terms of historical context, "
    "conceptual frameworks, and cultural significance."
)
PROMPT_TEMPLATES = [
    ("Explore how {a} influenced the development of {b} during the 20th century.", (0, 1)),
    (
        "Consider the question: How might the principles of {a} be applied to solve "
        "challenges in {b}?",
        (0, 1),
    ),
    ("Research the key figures who bridged the worlds of {a} and {b}.", (0, 2)),
]


class InsightError(Exception):
    """洞察生成失败（如节点数量不足）"""

    pass


class InsightService:
    """洞察生成服务"""

    def __init__(self, seed: int | None = None):
        self._seed = seed if seed is not None else get_config().insight_seed

    def generate(self, nodes: Sequence[Any], seed: int | None = None) -> InsightReport:
        """
        生成连接建议和探索提示

        Args:
            nodes: 知识节点（pydantic 模型或映射）
            seed: 本次生成使用的随机种子（覆盖实例种子）

        Returns:
            InsightReport

        Raises:
            InsightError: 节点少于两个
        """
        records = [r for r in (as_record(node) for node in nodes) if r.get("id") is not None]
        if len(records) < MIN_NODES:
            raise InsightError(f"At least {MIN_NODES} nodes are required to generate insights")

        rng = random.Random(seed if seed is not None else self._seed)
        titles = [str(record.get("title") or record.get("id")) for record in records]

        connections = []
        for (i, source), (j, target) in combinations(enumerate(records), 2):
            connections.append(
                SuggestedConnection(
                    source_node_id=str(source["id"]),
                    target_node_id=str(target["id"]),
                    source_name=titles[i],
                    target_name=titles[j],
                    description=CONNECTION_TEMPLATE.format(a=titles[i], b=titles[j]),
                    strength=rng.randint(1, 5),
                )
            )

        prompts = []
        for template, (a, b) in PROMPT_TEMPLATES:
            if b >= len(titles):
                continue
            prompts.append(
                DiscoveryPrompt(
                    content=template.format(a=titles[a], b=titles[b]),
                    related_nodes=[titles[a], titles[b]],
                )
            )

        logger.info(
            f"Generated {len(connections)} suggested connections and "
            f"{len(prompts)} discovery prompts for {len(records)} nodes"
        )
        return InsightReport(connections=connections, discovery_prompts=prompts)


# 单例
_insight_service: InsightService | None = None


def get_insight_service() -> InsightService:
    """获取 InsightService 单例"""
    global _insight_service
    if _insight_service is None:
        _insight_service = InsightService()
    return _insight_service
