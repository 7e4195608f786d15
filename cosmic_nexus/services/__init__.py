"""Graph services for Cosmic Nexus"""

from cosmic_nexus.services.graph_projector import GraphProjector, get_graph_projector
from cosmic_nexus.services.insight_service import (
    InsightError,
    InsightService,
    get_insight_service,
)
from cosmic_nexus.services.layout import (
    ForceParameters,
    apply_cluster_layout,
    clear_pins,
    cluster_positions,
)

__all__ = [
    "GraphProjector",
    "get_graph_projector",
    "InsightService",
    "InsightError",
    "get_insight_service",
    "ForceParameters",
    "apply_cluster_layout",
    "clear_pins",
    "cluster_positions",
]
