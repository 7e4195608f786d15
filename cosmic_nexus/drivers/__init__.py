"""Canvas drivers for the knowledge graph view"""

from cosmic_nexus.drivers.base import GraphCanvasDriver
from cosmic_nexus.drivers.networkx_driver import NetworkxCanvasDriver

__all__ = ["GraphCanvasDriver", "NetworkxCanvasDriver"]
