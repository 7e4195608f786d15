"""Data models for Cosmic Nexus"""

from cosmic_nexus.models.graph import (
    PHANTOM_NODE_ID,
    GraphLayout,
    PhantomOverlay,
    ProjectionResult,
    ProjectionStatus,
    RenderGraph,
    RenderLink,
    RenderNode,
    TransientLink,
    TransientNode,
)
from cosmic_nexus.models.insight import DiscoveryPrompt, InsightReport, SuggestedConnection
from cosmic_nexus.models.knowledge import (
    Category,
    Connection,
    KnowledgeNode,
    RelationshipType,
)
from cosmic_nexus.models.snapshot import GraphSnapshot, SnapshotEdge, SnapshotNode

__all__ = [
    "Category",
    "RelationshipType",
    "KnowledgeNode",
    "Connection",
    "GraphLayout",
    "RenderNode",
    "RenderLink",
    "RenderGraph",
    "TransientNode",
    "TransientLink",
    "PhantomOverlay",
    "ProjectionStatus",
    "ProjectionResult",
    "PHANTOM_NODE_ID",
    "SuggestedConnection",
    "DiscoveryPrompt",
    "InsightReport",
    "GraphSnapshot",
    "SnapshotNode",
    "SnapshotEdge",
]
