"""
Cosmic Nexus Interaction State - 交互状态

用法：
    from cosmic_nexus.state import InteractionStateMachine

    machine = InteractionStateMachine(graph, driver, on_create_connection=save)
    machine.key_down("c")
    machine.click_node("n1")
    machine.click_node("n2")  # -> save("n1", "n2")
"""

from cosmic_nexus.state.machine import InteractionStateMachine, PanDirection
from cosmic_nexus.state.models import (
    InfoPanel,
    InfoPanelKind,
    InteractionResult,
    InteractionState,
    MousePosition,
    NoticeLevel,
)

__all__ = [
    "InteractionStateMachine",
    "PanDirection",
    "InteractionState",
    "InteractionResult",
    "NoticeLevel",
    "MousePosition",
    "InfoPanel",
    "InfoPanelKind",
]
