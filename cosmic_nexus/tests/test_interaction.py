"""Tests for the interaction state machine"""

from unittest.mock import MagicMock

import pytest

from cosmic_nexus.models.graph import PHANTOM_NODE_ID, GraphLayout
from cosmic_nexus.services.graph_projector import GraphProjector
from cosmic_nexus.state.machine import (
    DELETE_CONFIRM_PROMPT,
    InteractionStateMachine,
    PanDirection,
)
from cosmic_nexus.state.models import InfoPanelKind, NoticeLevel


@pytest.fixture
def graph(sample_nodes, sample_connections):
    return GraphProjector().project(sample_nodes, sample_connections).graph


@pytest.fixture
def callbacks():
    return {
        "on_node_click": MagicMock(),
        "on_delete_connection": MagicMock(),
        "on_create_connection": MagicMock(),
        "confirm": MagicMock(return_value=True),
    }


@pytest.fixture
def machine(graph, mock_driver, callbacks, config):
    return InteractionStateMachine(graph, mock_driver, config=config, **callbacks)


class TestConnectionMode:
    """Tests for creating connections with two clicks"""

    def test_create_connection(self, machine, callbacks):
        """c, click n1, click n2 creates exactly one connection"""
        machine.key_down("c")
        first = machine.click_node("n1")
        second = machine.click_node("n2")

        callbacks["on_create_connection"].assert_called_once_with("n1", "n2")
        assert machine.state.source_node_id is None
        assert machine.state.connection_mode is True
        assert first.message == (
            'Selected "Stoicism" as source. Now click another node to create a connection.'
        )
        assert second.level == NoticeLevel.SUCCESS
        assert second.message == 'Created connection between "Stoicism" and "CBT"'

    def test_escape_cancels(self, machine, callbacks):
        """c, click n1, Escape never creates a connection"""
        machine.key_down("c")
        machine.click_node("n1")
        result = machine.key_down("Escape")

        callbacks["on_create_connection"].assert_not_called()
        assert machine.state.connection_mode is False
        assert machine.state.source_node_id is None
        assert result.message == "Connection mode cancelled"

    def test_uppercase_toggle(self, machine):
        result = machine.key_down("C")
        assert machine.state.connection_mode is True
        assert result.message == (
            "Connection mode enabled. Click on a node to start creating a connection."
        )
        assert machine.key_down("C").message == "Connection mode disabled"
        assert machine.state.connection_mode is False

    def test_same_node_reprompts(self, machine, callbacks):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        result = machine.click_node("n1")

        callbacks["on_create_connection"].assert_not_called()
        assert machine.state.source_node_id == "n1"
        assert result.message == "Please select a different node to connect to."

    def test_toggle_discards_source(self, machine):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        machine.toggle_connection_mode()
        machine.toggle_connection_mode()

        assert machine.state.connection_mode is True
        assert machine.state.source_node_id is None

    def test_escape_outside_connection_mode_ignored(self, machine):
        assert machine.key_down("Escape").handled is False

    def test_unbound_key_ignored(self, machine):
        assert machine.key_down("x").handled is False
        assert machine.state.connection_mode is False

    def test_node_click_does_not_fire_handler_in_connection_mode(self, machine, callbacks):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        callbacks["on_node_click"].assert_not_called()

    def test_status_banner(self, machine):
        assert machine.status_banner() is None
        machine.toggle_connection_mode()
        assert machine.status_banner() == "Select first node to create connection"
        machine.click_node("n1")
        assert machine.status_banner() == 'Select target node to connect with "Stoicism"'

    def test_missing_create_handler_warns(self, graph, mock_driver, config):
        machine = InteractionStateMachine(graph, mock_driver, config=config)
        machine.toggle_connection_mode()
        machine.click_node("n1")
        result = machine.click_node("n2")

        assert result.level == NoticeLevel.WARNING
        assert machine.state.source_node_id is None

    def test_failing_callback_does_not_propagate(self, machine, callbacks):
        callbacks["on_create_connection"].side_effect = RuntimeError("backend down")
        machine.toggle_connection_mode()
        machine.click_node("n1")

        result = machine.click_node("n2")

        assert result.level == NoticeLevel.SUCCESS
        assert machine.state.source_node_id is None


class TestPhantom:
    """Tests for the in-progress connection overlay"""

    def test_no_phantom_without_source(self, machine):
        assert machine.phantom() is None
        machine.toggle_connection_mode()
        assert machine.phantom() is None

    def test_phantom_follows_pointer(self, machine):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        machine.pointer_move(120, 80)

        overlay = machine.phantom()
        assert overlay.node.id == PHANTOM_NODE_ID
        assert (overlay.node.x, overlay.node.y) == (120, 80)
        assert overlay.link.source == "n1"
        assert overlay.link.target == PHANTOM_NODE_ID
        assert overlay.link.dashed is True

    def test_phantom_gone_after_escape(self, machine):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        machine.pointer_move(10, 10)
        machine.key_down("Escape")

        assert machine.phantom() is None
        assert machine.state.mouse_pos is None

    def test_phantom_gone_after_create(self, machine):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        machine.click_node("n2")
        assert machine.phantom() is None

    def test_phantom_never_in_render_graph(self, machine, graph):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        machine.pointer_move(1, 2)

        assert PHANTOM_NODE_ID not in {node.id for node in graph.nodes}
        assert all(link.target != PHANTOM_NODE_ID for link in graph.links)

    def test_pointer_move_ignored_without_source(self, machine):
        assert machine.pointer_move(5, 5).handled is False
        assert machine.state.mouse_pos is None

    def test_pointer_mapped_to_graph_coordinates(self, graph, mock_driver, config):
        mock_driver.supports_coordinate_mapping = True
        mock_driver.screen_to_graph.return_value = (1.5, -2.5)
        machine = InteractionStateMachine(graph, mock_driver, config=config)
        machine.toggle_connection_mode()
        machine.click_node("n1")

        machine.pointer_move(400, 300)

        mock_driver.screen_to_graph.assert_called_once_with(400, 300)
        assert (machine.state.mouse_pos.x, machine.state.mouse_pos.y) == (1.5, -2.5)

    def test_mapping_capability_resolved_once(self, graph, mock_driver, config):
        machine = InteractionStateMachine(graph, mock_driver, config=config)
        mock_driver.supports_coordinate_mapping = True
        machine.toggle_connection_mode()
        machine.click_node("n1")

        machine.pointer_move(3, 4)

        mock_driver.screen_to_graph.assert_not_called()
        assert machine.state.mouse_pos.x == 3


class TestHover:
    """Tests for hover sizing and info panel"""

    def test_hover_sizes(self, machine):
        machine.hover_node("n1")
        sizes = machine.display_sizes()

        assert sizes["n1"] == pytest.approx(4.5)
        assert sizes["n2"] == pytest.approx(3.6)  # neighbour
        assert sizes["n3"] == pytest.approx(1.8)  # dimmed

    def test_leaving_restores_original(self, machine, graph):
        machine.hover_node("n1")
        machine.hover_node(None)

        sizes = machine.display_sizes()
        assert all(sizes[node.id] == node.original_val for node in graph.nodes)
        assert all(node.val == 3 for node in graph.nodes)

    def test_hover_without_highlight(self, machine):
        machine.toggle_highlight()
        machine.hover_node("n2")
        sizes = machine.display_sizes()

        assert sizes == {"n1": 3, "n2": pytest.approx(4.5), "n3": 3}

    def test_hover_unknown_node_ignored(self, machine):
        assert machine.hover_node("ghost").handled is False
        assert machine.state.hovered_node_id is None

    def test_node_info_panel(self, machine):
        machine.hover_node("n1")
        panel = machine.info_panel()

        assert panel.kind == InfoPanelKind.NODE
        assert panel.title == "Stoicism"
        assert panel.icon == "bi-lightbulb"
        assert panel.created == "Dec 28, 2025"
        assert panel.hint == "Click to view details"

    def test_link_info_panel(self, machine):
        machine.hover_link("n1-n2")
        panel = machine.info_panel()

        assert panel.kind == InfoPanelKind.LINK
        assert panel.relationship == "influences"
        assert panel.strength == [True, True, True, True, False]

    def test_node_takes_precedence_over_link(self, machine):
        machine.hover_link("n1-n2")
        machine.hover_node("n3")
        assert machine.info_panel().kind == InfoPanelKind.NODE

    def test_no_panel_without_hover(self, machine):
        assert machine.info_panel() is None


class TestClicks:
    """Tests for clicks outside connection mode"""

    def test_node_click(self, machine, callbacks):
        machine.click_node("n2")
        callbacks["on_node_click"].assert_called_once_with("n2")

    def test_link_click_confirms_then_deletes(self, machine, callbacks):
        machine.click_link("n1-n2")

        callbacks["confirm"].assert_called_once_with(DELETE_CONFIRM_PROMPT)
        callbacks["on_delete_connection"].assert_called_once_with("c1")

    def test_parallel_link_click_deletes_clicked_connection(
        self, sample_nodes, mock_driver, callbacks, config
    ):
        connections = [
            {"id": "c1", "source_node_id": "n1", "target_node_id": "n2", "strength": 4},
            {"id": "c2", "source_node_id": "n1", "target_node_id": "n2", "strength": 2},
        ]
        graph = GraphProjector().project(sample_nodes, connections).graph
        machine = InteractionStateMachine(graph, mock_driver, config=config, **callbacks)

        second = graph.links[1]
        machine.hover_link(second.id)
        panel = machine.info_panel()
        machine.click_link(second.id)

        assert panel.strength == [True, True, False, False, False]
        callbacks["on_delete_connection"].assert_called_once_with("c2")

    def test_link_click_declined(self, machine, callbacks):
        callbacks["confirm"].return_value = False
        result = machine.click_link("n1-n2")

        assert result.handled is False
        callbacks["on_delete_connection"].assert_not_called()

    def test_link_click_without_confirm_collaborator(self, graph, mock_driver, config):
        on_delete = MagicMock()
        machine = InteractionStateMachine(
            graph, mock_driver, on_delete_connection=on_delete, config=config
        )
        machine.click_link("n1-n2")
        on_delete.assert_not_called()

    def test_link_click_inactive_in_connection_mode(self, machine, callbacks):
        machine.toggle_connection_mode()
        machine.click_link("n1-n2")
        callbacks["confirm"].assert_not_called()


class TestLayoutAndCamera:
    """Tests for layout switching and camera controls"""

    def test_cluster_layout(self, machine, graph, mock_driver):
        machine.set_layout("cluster")

        assert machine.state.graph_layout == GraphLayout.CLUSTER
        assert all(node.is_pinned for node in graph.nodes)
        mock_driver.set_layout.assert_called_once_with(GraphLayout.CLUSTER, graph, None)
        mock_driver.refresh.assert_called_once()
        mock_driver.focus_all.assert_called_once_with(400)

    def test_force_layout_clears_pins(self, machine, graph, mock_driver):
        machine.set_layout(GraphLayout.CLUSTER)
        machine.set_layout(GraphLayout.FORCE)

        assert not any(node.is_pinned for node in graph.nodes)
        _, _, params = mock_driver.set_layout.call_args.args
        assert params.charge == -180
        assert params.link_distance == 120
        assert params.collision_radius(graph.nodes[0]) == pytest.approx(4.5)

    @pytest.mark.parametrize(
        "direction,expected",
        [("up", (0, -50)), ("down", (0, 50)), ("left", (-50, 0)), (PanDirection.RIGHT, (50, 0))],
    )
    def test_pan(self, machine, mock_driver, direction, expected):
        machine.pan(direction)
        mock_driver.pan.assert_called_once_with(*expected)

    def test_zoom(self, machine, mock_driver):
        mock_driver.zoom.return_value = 1.2
        machine.zoom_in()
        mock_driver.zoom.assert_called_with(1.2)
        assert machine.state.zoom_level == 1.2

        mock_driver.zoom.return_value = 0.96
        machine.zoom_out()
        mock_driver.zoom.assert_called_with(0.8)
        assert machine.state.zoom_level == 0.96

    def test_zoom_end(self, machine):
        machine.zoom_end(2.5)
        assert machine.state.zoom_level == 2.5

    def test_display_toggles(self, machine):
        machine.toggle_labels()
        machine.toggle_arrows()
        machine.toggle_dark_mode()

        assert machine.state.show_labels is False
        assert machine.state.show_arrows is False
        assert machine.state.dark_mode is False


class TestGraphReplacement:
    def test_stale_state_cleared(self, machine, sample_nodes):
        machine.toggle_connection_mode()
        machine.click_node("n1")
        machine.hover_node("n1")
        machine.hover_link("n1-n2")

        smaller = GraphProjector().project(sample_nodes[1:], []).graph
        machine.set_graph(smaller)

        assert machine.state.source_node_id is None
        assert machine.state.hovered_node_id is None
        assert machine.state.hovered_link_id is None
        assert machine.state.connection_mode is True
