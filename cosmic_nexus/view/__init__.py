"""Knowledge graph view and its event/timer seams"""

from cosmic_nexus.view.events import EventSource, LocalEventSource, Scheduler
from cosmic_nexus.view.graph_view import (
    ControlsPanel,
    GraphScene,
    KnowledgeGraphView,
    ViewKind,
    ViewRender,
)
from cosmic_nexus.view.snapshot import build_snapshot

__all__ = [
    "KnowledgeGraphView",
    "ViewKind",
    "ViewRender",
    "GraphScene",
    "ControlsPanel",
    "EventSource",
    "LocalEventSource",
    "Scheduler",
    "build_snapshot",
]
