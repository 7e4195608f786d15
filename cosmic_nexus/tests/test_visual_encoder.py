"""Tests for the visual encoder"""

from datetime import datetime

import pytest

from cosmic_nexus.models.graph import RenderLink, RenderNode
from cosmic_nexus.models.knowledge import Category
from cosmic_nexus.services import visual_encoder as encoder


def _node(node_id: str, category: str = "art", **kwargs) -> RenderNode:
    return RenderNode(id=node_id, name=node_id.upper(), category=category, **kwargs)


class TestCategoryEncoding:
    """Tests for category -> color / icon"""

    def test_unknown_category_falls_back(self):
        """An unknown category gets the neutral gray and the generic tag"""
        assert encoder.category_color("underwater_basket_weaving") == "#6b7280"
        assert encoder.category_icon("underwater_basket_weaving") == "bi-tag"

    @pytest.mark.parametrize("category", [None, "", "other"])
    def test_empty_and_other_fall_back(self, category):
        assert encoder.category_color(category) == encoder.FALLBACK_COLOR
        assert encoder.category_icon(category) == encoder.FALLBACK_ICON

    def test_known_categories(self):
        assert encoder.category_color("philosophy") == "#6366f1"
        assert encoder.category_color("science") == "#3b82f6"
        assert encoder.category_icon("music") == "bi-music-note-beamed"
        assert encoder.category_icon("technology") == "bi-cpu"

    def test_every_named_category_is_total(self):
        for category in Category:
            assert encoder.category_color(category.value).startswith("#")
            assert encoder.category_icon(category.value).startswith("bi-")

    def test_icon_symbols(self):
        assert encoder.icon_symbol("bi-book") == "\U0001f4da"
        assert encoder.icon_symbol("bi-unknown") == "•"
        assert encoder.icon_symbol(None) == "•"


class TestRelationshipEncoding:
    def test_relationship_icon(self):
        assert encoder.relationship_icon("influences") == "bi-arrow-right"
        assert encoder.relationship_icon("builds_on") == "bi-layers"
        assert encoder.relationship_icon("related") == "bi-link"
        assert encoder.relationship_icon("made_up") == "bi-link"

    def test_relationship_label(self):
        assert encoder.relationship_label("builds_on") == "builds on"
        assert encoder.relationship_label(None) == "related"
        assert encoder.relationship_label("") == "related"


class TestLinkColor:
    """Tests for gradient link colors"""

    def test_gradient_by_endpoint_categories(self):
        index = {"a": _node("a", "art"), "b": _node("b", "science")}
        link = RenderLink(id="a-b", source="a", target="b")
        assert encoder.link_color(link, index) == "url(#art-science-gradient)"

    def test_unknown_category_normalized_to_other(self):
        index = {"a": _node("a", "underwater_basket_weaving"), "b": _node("b", "music")}
        link = RenderLink(id="a-b", source="a", target="b")
        assert encoder.link_color(link, index) == "url(#other-music-gradient)"

    def test_unresolved_endpoint(self):
        index = {"a": _node("a")}
        link = RenderLink(id="a-x", source="a", target="x")
        assert encoder.link_color(link, index) == encoder.UNRESOLVED_LINK_COLOR

    def test_gradient_definitions_cover_every_pair(self):
        definitions = encoder.gradient_definitions()
        ids = {d.gradient_id for d in definitions}

        assert len(definitions) == len(Category) ** 2
        assert "art-science-gradient" in ids
        assert "other-other-gradient" in ids
        art_science = next(d for d in definitions if d.gradient_id == "art-science-gradient")
        assert art_science.start_color == "#f43f5e"
        assert art_science.stop_color == "#3b82f6"
        assert art_science.opacity == 0.8


class TestStyles:
    """Tests for node / link drawing attributes"""

    def test_node_style_uses_given_size(self):
        node = _node("a", "history", connection_count=2)
        style = encoder.node_style(node, 4.5)

        assert style.size == 4.5
        assert style.color == "#f59e0b"
        assert style.badge == 2
        assert style.glow_color is None
        assert node.val == 3

    def test_hovered_node_glows(self):
        style = encoder.node_style(_node("a", "art"), 4.5, hovered=True)
        assert style.glow_color == "#f43f5e33"
        assert style.border_color == "#ffffff"
        assert style.label_color == "#f43f5e"

    def test_label_and_icon_thresholds(self):
        node = _node("a")
        assert encoder.node_style(node, 3, global_scale=0.7).show_label
        assert not encoder.node_style(node, 3, global_scale=0.6).show_label
        assert encoder.node_style(node, 3, global_scale=0.5).show_icon
        assert not encoder.node_style(node, 3, global_scale=0.4).show_icon
        assert not encoder.node_style(node, 3, show_labels=False).show_label

    def test_no_badge_without_connections(self):
        assert encoder.node_style(_node("a"), 3).badge is None

    def test_link_style(self):
        index = {"a": _node("a"), "b": _node("b")}
        link = RenderLink(id="a-b", source="a", target="b", value=5)

        plain = encoder.link_style(link, index)
        assert plain.width == pytest.approx(4.0)
        assert plain.arrow_length == 5
        assert plain.particles == 3
        assert plain.particle_speed == pytest.approx(0.05)
        assert plain.dash is None
        assert plain.curvature == 0

        hovered = encoder.link_style(link, index, hovered=True, show_arrows=False, has_reverse=True)
        assert hovered.width == 4
        assert hovered.arrow_length == 0
        assert hovered.curvature == 0.3

    def test_transient_link_style(self):
        style = encoder.transient_link_style()
        assert style.dash == (5, 5)
        assert style.width == 3
        assert style.particles == 5
        assert style.particle_speed == 0.05

    def test_background(self):
        assert encoder.background_color(True) == "#1a1a2e"
        assert encoder.background_color(False) is None


class TestFormatting:
    def test_strength_stars(self):
        assert encoder.strength_stars(3) == [True, True, True, False, False]
        assert encoder.strength_stars(None) == [False] * 5

    def test_format_date(self):
        assert encoder.format_date(datetime(2025, 12, 28, 10)) == "Dec 28, 2025"
        assert encoder.format_date("2025-12-28T10:00:00Z") == "Dec 28, 2025"
        assert encoder.format_date("not a date") == ""
        assert encoder.format_date(None) == ""
