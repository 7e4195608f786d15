"""Tests for the knowledge graph view lifecycle and render output"""

from unittest.mock import MagicMock

import pytest

from cosmic_nexus.config import NexusConfig
from cosmic_nexus.drivers.networkx_driver import NetworkxCanvasDriver
from cosmic_nexus.models.graph import GraphLayout, ProjectionStatus
from cosmic_nexus.state.models import NoticeLevel
from cosmic_nexus.view.events import KEYDOWN, POINTERMOVE, RESIZE, LocalEventSource
from cosmic_nexus.view.graph_view import (
    ERROR_TITLE,
    LOADING_TITLE,
    PLACEHOLDER_TITLE,
    KnowledgeGraphView,
    ViewKind,
)
from cosmic_nexus.view.snapshot import build_snapshot


class ManualScheduler:
    """Scheduler double: timers fire only when run() is called"""

    def __init__(self):
        self.pending = []

    def call_later(self, delay, callback, *args):
        handle = MagicMock()
        handle.cancelled = False

        def cancel():
            handle.cancelled = True

        handle.cancel.side_effect = cancel
        self.pending.append((delay, callback, args, handle))
        return handle

    def run(self):
        for _, callback, args, handle in self.pending:
            if not handle.cancelled:
                callback(*args)
        self.pending = []


@pytest.fixture
def events():
    return LocalEventSource()


@pytest.fixture
def view(sample_nodes, sample_connections, config):
    return KnowledgeGraphView(
        sample_nodes,
        sample_connections,
        driver=NetworkxCanvasDriver(),
        on_create_connection=MagicMock(),
        config=config,
    )


class TestPlaceholder:
    """Tests for placeholder renders"""

    def test_invalid_nodes(self, config, mock_driver):
        view = KnowledgeGraphView("nope", [], driver=mock_driver, config=config)
        render = view.render()

        assert render.kind == ViewKind.PLACEHOLDER
        assert render.title == PLACEHOLDER_TITLE
        assert render.message == "Invalid nodes data format."
        assert view.machine is None

    def test_invalid_connections(self, config, mock_driver, sample_nodes):
        view = KnowledgeGraphView(sample_nodes, None, driver=mock_driver, config=config)
        assert view.render().message == "Invalid connections data format."

    def test_empty(self, config, mock_driver):
        view = KnowledgeGraphView([], [], driver=mock_driver, config=config)
        render = view.render()

        assert render.message == "Add some interest nodes to visualize your knowledge graph."
        mock_driver.set_layout.assert_not_called()

    def test_update_to_empty_drops_interaction_state(self, view):
        assert view.machine is not None
        view.update_data([], [])
        assert view.machine is None
        assert view.render().kind == ViewKind.PLACEHOLDER


class TestLifecycle:
    """Tests for mount / unmount"""

    def test_loading_until_ready(self, view, events):
        scheduler = ManualScheduler()
        view.mount(events, scheduler)

        assert view.render().kind == ViewKind.LOADING
        assert view.render().title == LOADING_TITLE
        assert scheduler.pending[0][0] == pytest.approx(0.5)

        scheduler.run()
        assert view.render().kind == ViewKind.GRAPH

    def test_ready_immediately_without_scheduler(self, view, events):
        view.mount(events)
        assert view.is_ready

    def test_mount_registers_listeners(self, view, events):
        view.mount(events)
        assert events.listener_count(KEYDOWN) == 1
        assert events.listener_count(POINTERMOVE) == 1
        assert events.listener_count(RESIZE) == 1

    def test_unmount_removes_listeners_and_cancels_timer(self, view, events):
        scheduler = ManualScheduler()
        view.mount(events, scheduler)
        view.unmount()

        assert events.listener_count() == 0
        handle = scheduler.pending[0][3]
        handle.cancel.assert_called_once()

        scheduler.run()
        assert not view.is_ready

    def test_no_handler_after_unmount(self, sample_nodes, sample_connections, config, events):
        on_node_click = MagicMock()
        on_delete = MagicMock()
        view = KnowledgeGraphView(
            sample_nodes,
            sample_connections,
            driver=NetworkxCanvasDriver(config=config),
            on_node_click=on_node_click,
            on_delete_connection=on_delete,
            confirm=MagicMock(return_value=True),
            config=config,
        )
        view.mount(events)
        view.unmount()

        events.dispatch(KEYDOWN, {"key": "c"})
        results = [
            view.node_click("n1"),
            view.link_click("n1-n2"),
            view.node_hover("n1"),
            view.toggle_connection_mode(),
            view.zoom_in(),
        ]

        assert all(result.handled is False for result in results)
        assert results[0].reason == "view unmounted"
        on_node_click.assert_not_called()
        on_delete.assert_not_called()

    def test_unmount_discards_interaction_state(self, view, events):
        view.mount(events)
        events.dispatch(KEYDOWN, {"key": "c"})
        view.node_click("n1")
        assert view.machine.state.source_node_id == "n1"

        view.unmount()
        assert view.machine is None

        view.mount(events)
        assert view.machine.state.connection_mode is False
        assert view.machine.state.source_node_id is None
        assert view.render().kind == ViewKind.GRAPH

    def test_data_update_while_unmounted_applies_on_remount(self, view, events, sample_nodes):
        view.mount(events)
        view.unmount()

        view.update_data(sample_nodes[:2], [])
        assert view.machine is None

        view.mount(events)
        assert [node.id for node in view.machine.graph.nodes] == ["n1", "n2"]

    def test_keyboard_through_event_source(self, view, events):
        notices = []
        view._on_notice = notices.append
        view.mount(events)

        events.dispatch(KEYDOWN, {"key": "c"})
        view.node_click("n1")
        events.dispatch(POINTERMOVE, {"x": 400, "y": 300})

        assert view.machine.state.connection_mode is True
        assert view.machine.phantom() is not None
        assert notices[0].level == NoticeLevel.INFO

        events.dispatch(KEYDOWN, "Escape")
        assert view.machine.phantom() is None

    def test_default_driver_uses_view_config(self, sample_nodes, sample_connections):
        config = NexusConfig(viewport_width=1024, viewport_height=768, layout_seed=3)
        view = KnowledgeGraphView(sample_nodes, sample_connections, config=config)

        assert (view._driver.width, view._driver.height) == (1024, 768)
        assert view._driver.seed == 3

    def test_resize_reaches_driver(self, view, events):
        view.mount(events)
        events.dispatch(RESIZE, {"width": 1280, "height": 720})
        assert (view._driver.width, view._driver.height) == (1280, 720)


class TestGraphRender:
    """Tests for composed graph renders"""

    def test_scene(self, view, events):
        view.mount(events)
        render = view.render()

        assert render.kind == ViewKind.GRAPH
        assert len(render.scene.nodes) == 3
        assert len(render.scene.links) == 2
        assert render.scene.phantom is None
        assert render.scene.background == "#1a1a2e"
        assert render.controls.layout == GraphLayout.FORCE
        assert render.status_banner is None
        assert view._driver.last_scene is render.scene

    def test_hover_reflected_in_scene(self, view, events):
        view.mount(events)
        view.node_hover("n1")
        render = view.render()

        sizes = {d.node.id: d.style.size for d in render.scene.nodes}
        assert sizes["n1"] == pytest.approx(4.5)
        assert render.info_panel.title == "Stoicism"
        assert all(d.node.val == 3 for d in render.scene.nodes)

    def test_hover_highlights_only_hovered_parallel_link(self, sample_nodes, config, events):
        connections = [
            {"id": "c1", "source_node_id": "n1", "target_node_id": "n2", "strength": 4},
            {"id": "c2", "source_node_id": "n1", "target_node_id": "n2", "strength": 2},
        ]
        on_delete = MagicMock()
        view = KnowledgeGraphView(
            sample_nodes,
            connections,
            driver=NetworkxCanvasDriver(config=config),
            on_delete_connection=on_delete,
            confirm=MagicMock(return_value=True),
            config=config,
        )
        view.mount(events)

        second = view.graph.links[1]
        view.link_hover(second.id)
        widths = [drawing.style.width for drawing in view.render().scene.links]
        view.link_click(second.id)

        assert widths == [pytest.approx(3.2), 4]
        on_delete.assert_called_once_with("c2")

    def test_phantom_in_scene(self, view, events):
        view.mount(events)
        view.toggle_connection_mode()
        view.node_click("n1")
        render = view.render()

        assert render.scene.phantom is not None
        assert render.scene.phantom_style.dash == (5, 5)
        assert render.status_banner == 'Select target node to connect with "Stoicism"'

    def test_layout_switch(self, view, events):
        view.mount(events)
        view.set_layout("cluster")
        render = view.render()

        assert render.controls.layout == GraphLayout.CLUSTER
        assert all(d.node.is_pinned for d in render.scene.nodes)

    def test_same_data_keeps_projection(self, view, sample_nodes, sample_connections):
        before = view.projection
        view.update_data(sample_nodes, sample_connections)
        assert view.projection is before


class TestRendererBoundary:
    """Tests for renderer fault degradation"""

    def test_draw_failure_degrades_to_error(self, sample_nodes, sample_connections, config, mock_driver, events):
        mock_driver.draw.side_effect = RuntimeError("canvas lost")
        view = KnowledgeGraphView(sample_nodes, sample_connections, driver=mock_driver, config=config)
        view.mount(events)

        render = view.render()

        assert render.kind == ViewKind.ERROR
        assert render.title == ERROR_TITLE
        assert render.message == "canvas lost"

    def test_layout_failure_degrades_to_error(self, sample_nodes, sample_connections, config, mock_driver, events):
        mock_driver.refresh.side_effect = RuntimeError("simulation failed")
        view = KnowledgeGraphView(sample_nodes, sample_connections, driver=mock_driver, config=config)
        view.mount(events)

        assert view.render().kind == ViewKind.ERROR

    def test_camera_failure_does_not_propagate(self, view, events):
        view._driver.pan = MagicMock(side_effect=RuntimeError("no camera"))
        view.mount(events)

        result = view.pan("up")

        assert result.handled is False
        assert view.render().kind == ViewKind.ERROR

    def test_reset_error(self, sample_nodes, sample_connections, config, mock_driver, events):
        mock_driver.draw.side_effect = [RuntimeError("once"), None]
        view = KnowledgeGraphView(sample_nodes, sample_connections, driver=mock_driver, config=config)
        view.mount(events)

        assert view.render().kind == ViewKind.ERROR
        view.reset_error()
        assert view.render().kind == ViewKind.GRAPH


class TestSnapshot:
    """Tests for headless snapshots"""

    def test_snapshot(self, sample_nodes, sample_connections):
        snapshot = build_snapshot(sample_nodes, sample_connections, "cluster")

        assert snapshot.status == ProjectionStatus.OK
        assert snapshot.layout == GraphLayout.CLUSTER
        assert snapshot.node_count == 3
        assert snapshot.edge_count == 2
        assert snapshot.category_stats == {
            "philosophy": 1,
            "science": 1,
            "underwater_basket_weaving": 1,
        }
        n3 = next(node for node in snapshot.nodes if node.id == "n3")
        assert n3.color == "#6b7280"
        assert n3.icon == "bi-tag"
        assert all(node.x is not None for node in snapshot.nodes)

    def test_snapshot_placeholder(self):
        snapshot = build_snapshot({"bad": True}, [])
        assert snapshot.status == ProjectionStatus.INVALID_NODES
        assert snapshot.message == "Invalid nodes data format."
        assert snapshot.nodes == []
