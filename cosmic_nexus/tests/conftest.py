"""
Pytest configuration and fixtures for cosmic_nexus tests.

This module ensures proper test isolation by:
1. Pointing config discovery at empty temporary directories
2. Clearing CN_ environment overrides
3. Resetting global singletons between tests
"""

import os
from unittest.mock import MagicMock

import pytest

from cosmic_nexus.config import NexusConfig
from cosmic_nexus.drivers.base import GraphCanvasDriver


def _reset_all_singletons():
    """Reset module-level singletons."""
    from cosmic_nexus import config as config_module
    from cosmic_nexus.services import graph_projector, insight_service

    config_module.reset_config()
    graph_projector._graph_projector = None
    insight_service._insight_service = None


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    """Keep user/project config files and CN_ variables out of tests."""
    from cosmic_nexus import config as config_module

    monkeypatch.setattr(config_module, "DEFAULT_GLOBAL_CONFIG_DIR", tmp_path / "global")
    monkeypatch.setattr(config_module, "DEFAULT_PROJECT_CONFIG_DIR", tmp_path / "project")
    for key in list(os.environ):
        if key.startswith("CN_"):
            monkeypatch.delenv(key, raising=False)

    _reset_all_singletons()
    yield
    _reset_all_singletons()


@pytest.fixture
def config():
    """Default configuration."""
    return NexusConfig()


@pytest.fixture
def sample_nodes():
    """Three nodes across two known categories and one unknown."""
    return [
        {
            "id": "n1",
            "title": "Stoicism",
            "category": "philosophy",
            "description": "Ancient school of thought",
            "created_at": "2025-12-28T10:00:00Z",
        },
        {"id": "n2", "title": "CBT", "category": "science"},
        {"id": "n3", "title": "Basket Weaving", "category": "underwater_basket_weaving"},
    ]


@pytest.fixture
def sample_connections():
    """n1 -> n2 with strength 4, n2 -> n3 without strength."""
    return [
        {
            "id": "c1",
            "source_node_id": "n1",
            "target_node_id": "n2",
            "relationship_type": "influences",
            "strength": 4,
            "description": "CBT draws on Stoic ideas",
        },
        {"id": "c2", "source_node_id": "n2", "target_node_id": "n3"},
    ]


@pytest.fixture
def mock_driver():
    """Canvas driver double without coordinate mapping."""
    driver = MagicMock(spec=GraphCanvasDriver)
    driver.supports_coordinate_mapping = False
    driver.zoom.return_value = 1.0
    return driver
