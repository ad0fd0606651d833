"""Shared pytest fixtures for widgetdeck tests."""

import itertools

import pytest

from widgetdeck.layout.catalog import WidgetTypeCatalog, register_builtin_widgets
from widgetdeck.layout.defaults import LayoutScope
from widgetdeck.layout.scroll import reset_scroll_arbiter
from widgetdeck.layout.storage import MemoryStore
from widgetdeck.layout.store import LayoutStore


class SequentialIds:
    """Deterministic id factory: docker-1, docker-2, ..."""

    def __init__(self):
        self._counter = itertools.count(1)

    def __call__(self, widget_type: str) -> str:
        return f"{widget_type}-{next(self._counter)}"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point every test at a throwaway config dir and clear tuning env vars."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("WIDGETDECK_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("WIDGETDECK_WHEEL_STEP", raising=False)
    monkeypatch.delenv("WIDGETDECK_LOG_LEVEL", raising=False)
    return config_dir


@pytest.fixture(autouse=True)
def fresh_scroll_arbiter():
    reset_scroll_arbiter()
    yield
    reset_scroll_arbiter()


@pytest.fixture
def catalog():
    """Catalog with only the built-in descriptors (no renderers attached)."""
    catalog = WidgetTypeCatalog()
    register_builtin_widgets(catalog)
    return catalog


@pytest.fixture
def id_factory():
    return SequentialIds()


@pytest.fixture
def kv():
    return MemoryStore()


@pytest.fixture
def make_store(kv, catalog, id_factory):
    """Build and load a LayoutStore for a scope."""

    def _make(scope=LayoutScope.MAIN, backing=None):
        store = LayoutStore(scope, backing if backing is not None else kv, catalog, id_factory=id_factory)
        store.load()
        return store

    return _make


@pytest.fixture
def main_store(make_store):
    return make_store(LayoutScope.MAIN)
