"""Tests for LayoutStore and the pure layout transformations."""

import json
import logging

import pytest

from widgetdeck.exceptions import StorageWriteError
from widgetdeck.layout.defaults import DEFAULT_SEEDS, LayoutScope, seed_surface
from widgetdeck.layout.heights import HeightClass
from widgetdeck.layout.models import LayoutSurface, WidgetInstance
from widgetdeck.layout.storage import MemoryStore
from widgetdeck.layout.store import (
    LayoutStore,
    add_widget,
    open_layout_stores,
    parse_document,
    reorder_widgets,
)


def abcd_document():
    return json.dumps([{"id": i, "type": "docker" if i == "A" else i.lower()} for i in "ABCD"])


class FailingStore(MemoryStore):
    """MemoryStore whose writes always fail."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.attempts = 0

    def set(self, key, value):
        self.attempts += 1
        raise StorageWriteError("Failed to write layout store", key=key)


class ExplodingReadStore(MemoryStore):
    def get(self, key):
        raise OSError("permission denied")


# =============================================================================
# Loading
# =============================================================================


class TestLoad:
    def test_missing_key_uses_seed(self, main_store):
        assert main_store.surface.types() == [
            "system", "projectInfo", "github", "cloudflare", "ports", "sessions",
        ]
        assert main_store.surface.scope_key == "layout:main"

    def test_each_scope_has_own_seed(self, make_store):
        for scope in LayoutScope:
            store = make_store(scope)
            assert tuple(store.surface.types()) == DEFAULT_SEEDS[scope]

    def test_corrupt_document_uses_seed(self, make_store, catalog):
        store = make_store(backing=MemoryStore({"layout:main": "{not json"}))
        assert store.surface == seed_surface(LayoutScope.MAIN, catalog)

    def test_non_list_document_uses_seed(self, make_store, catalog):
        store = make_store(backing=MemoryStore({"layout:main": '"just a string"'}))
        assert store.surface == seed_surface(LayoutScope.MAIN, catalog)

    def test_read_error_uses_seed(self, make_store, catalog):
        store = make_store(backing=ExplodingReadStore())
        assert store.surface == seed_surface(LayoutScope.MAIN, catalog)

    def test_load_does_not_write(self, kv, make_store):
        make_store()
        assert kv.get("layout:main") is None

    def test_empty_list_is_respected(self, make_store):
        store = make_store(backing=MemoryStore({"layout:main": "[]"}))
        assert len(store.surface) == 0

    def test_unknown_type_is_kept(self, make_store):
        document = json.dumps([{"id": "k", "type": "kubernetes", "heightClass": "large"}])
        store = make_store(backing=MemoryStore({"layout:main": document}))
        widget = store.surface.get("k")
        assert widget.type == "kubernetes"
        assert widget.height_class == HeightClass.LARGE

    def test_legacy_object_form(self, make_store):
        document = json.dumps({
            "widgets": [{"id": "d", "type": "docker"}, {"id": "s", "type": "sessions"}],
            "expanded": {"d": False},
            "heights": {"s": "fill"},
        })
        store = make_store(backing=MemoryStore({"layout:main": document}))
        assert store.surface.ids() == ["d", "s"]
        assert store.surface.get("d").expanded is False
        assert store.surface.get("s").height_class == HeightClass.FILL


class TestParseDocument:
    def test_entries_without_type_are_dropped(self, catalog, id_factory):
        raw = json.dumps([{"id": "a"}, "junk", {"id": "d", "type": "docker"}])
        surface = parse_document(raw, "layout:main", catalog, id_factory)
        assert surface.ids() == ["d"]

    def test_missing_and_duplicate_ids_are_regenerated(self, catalog, id_factory):
        raw = json.dumps([
            {"type": "docker"},
            {"id": "x", "type": "ports"},
            {"id": "x", "type": "system"},
        ])
        surface = parse_document(raw, "layout:main", catalog, id_factory)
        assert surface.types() == ["docker", "ports", "system"]
        assert len(set(surface.ids())) == 3
        assert surface.ids()[1] == "x"

    def test_invalid_json(self, catalog):
        assert parse_document("{not json", "layout:main", catalog) is None


# =============================================================================
# Mutations
# =============================================================================


class TestAdd:
    def test_add_appends_with_defaults(self, main_store):
        surface = main_store.add("docker")
        assert len(surface) == 7
        docker = surface.widgets[-1]
        assert docker.type == "docker"
        assert docker.height_class == HeightClass.MEDIUM
        assert docker.expanded is True
        assert docker.id == "docker-1"

    def test_add_duplicate_is_noop(self, main_store):
        first = main_store.add("docker")
        second = main_store.add("docker")
        assert second is first
        assert len(second) == 7
        assert second.ids() == first.ids()

    def test_add_present_seed_type_is_noop(self, main_store):
        before = main_store.surface
        assert main_store.add("system") is before

    def test_add_persists(self, kv, main_store):
        main_store.add("docker")
        document = json.loads(kv.get("layout:main"))
        assert document[-1] == {
            "id": "docker-1",
            "type": "docker",
            "expanded": True,
            "heightClass": "medium",
        }

    def test_add_uses_catalog_default_height(self, make_store):
        store = make_store(backing=MemoryStore({"layout:main": "[]"}))
        assert store.add("projects").widgets[-1].height_class == HeightClass.FILL

    def test_repeatable_type_can_repeat(self, catalog, id_factory):
        from dataclasses import replace

        catalog.register(replace(catalog.descriptor_for("docker"), repeatable=True))
        surface = LayoutSurface("layout:main", ())
        surface = add_widget(surface, "docker", catalog, id_factory)
        surface = add_widget(surface, "docker", catalog, id_factory)
        assert surface.ids() == ["docker-1", "docker-2"]


class TestReorder:
    @pytest.fixture
    def abcd_store(self, make_store):
        return make_store(backing=MemoryStore({"layout:main": abcd_document()}))

    def test_reorder_before_target(self, abcd_store):
        assert abcd_store.reorder("C", "A").ids() == ["C", "A", "B", "D"]

    def test_reorder_forward_uses_post_removal_index(self, abcd_store):
        assert abcd_store.reorder("A", "C").ids() == ["B", "A", "C", "D"]

    def test_reorder_preserves_ids_and_length(self, abcd_store):
        surface = abcd_store.reorder("D", "B")
        assert sorted(surface.ids()) == ["A", "B", "C", "D"]
        assert len(surface) == 4

    def test_reorder_back_restores_neighbors(self, abcd_store):
        abcd_store.reorder("B", "A")
        assert abcd_store.surface.ids() == ["B", "A", "C", "D"]
        assert abcd_store.reorder("A", "B").ids() == ["A", "B", "C", "D"]

    def test_reorder_noops(self, abcd_store):
        before = abcd_store.surface
        assert abcd_store.reorder("A", "A") is before
        assert abcd_store.reorder("Z", "A") is before
        assert abcd_store.reorder("A", "Z") is before

    def test_pure_reorder_leaves_input_alone(self, abcd_store):
        before = abcd_store.surface
        after = reorder_widgets(before, "C", "A")
        assert before.ids() == ["A", "B", "C", "D"]
        assert after.ids() == ["C", "A", "B", "D"]


class TestFieldUpdates:
    def test_set_height_class(self, kv, main_store):
        surface = main_store.set_height_class("system", HeightClass.FULL)
        assert surface.get("system").height_class == HeightClass.FULL
        assert json.loads(kv.get("layout:main"))[0]["heightClass"] == "full"

    def test_set_height_class_accepts_value(self, main_store):
        assert main_store.set_height_class("system", "small").get("system").height_class == HeightClass.SMALL

    def test_set_expanded_and_toggle(self, main_store):
        assert main_store.set_expanded("ports", False).get("ports").expanded is False
        assert main_store.toggle_expanded("ports").get("ports").expanded is True

    def test_rename(self, main_store, catalog):
        surface = main_store.rename("github", "  Repos  ")
        assert surface.get("github").title == "Repos"
        surface = main_store.rename("github", "")
        assert surface.get("github").title is None
        assert surface.get("github").display_title(catalog) == "GitHub"

    def test_remove(self, kv, main_store):
        surface = main_store.remove("cloudflare")
        assert "cloudflare" not in surface.ids()
        assert len(json.loads(kv.get("layout:main"))) == 5


class TestUnknownIdNoops:
    def test_unknown_ids_leave_surface_unchanged(self, kv, main_store):
        before = main_store.surface
        assert main_store.remove("ghost") == before
        assert main_store.set_height_class("ghost", HeightClass.SMALL) == before
        assert main_store.set_expanded("ghost", False) == before
        assert main_store.toggle_expanded("ghost") == before
        assert main_store.rename("ghost", "Boo") == before
        assert kv.get("layout:main") is None

    def test_unknown_id_with_bad_height_is_noop(self, kv, main_store):
        before = main_store.surface
        assert main_store.set_height_class("ghost", "enormous") == before
        assert kv.get("layout:main") is None

    def test_unknown_id_is_logged(self, main_store, caplog):
        with caplog.at_level(logging.DEBUG, logger="widgetdeck.layout.store"):
            main_store.remove("ghost")
        assert "no-op" in caplog.text


# =============================================================================
# Persistence
# =============================================================================


class TestPersistence:
    def test_round_trip(self, kv, make_store):
        store = make_store()
        store.add("docker")
        store.set_height_class("system", HeightClass.SMALL)
        first = kv.get("layout:main")

        reloaded = make_store()
        assert reloaded.surface == store.surface
        reloaded.save()
        assert kv.get("layout:main") == first

    def test_save_of_seed(self, kv, make_store):
        make_store().save()
        saved = kv.get("layout:main")
        make_store().save()
        assert kv.get("layout:main") == saved

    def test_scopes_are_independent(self, kv, make_store):
        main = make_store(LayoutScope.MAIN)
        right = make_store(LayoutScope.RIGHT_RAIL)
        main.add("docker")
        assert "docker" not in right.surface.types()
        assert kv.get("layout:right-rail") is None

    def test_write_failure_keeps_memory_state(self, make_store, caplog):
        failing = FailingStore()
        store = make_store(backing=failing)
        with caplog.at_level(logging.ERROR, logger="widgetdeck.layout.store"):
            surface = store.add("docker")

        assert surface.types()[-1] == "docker"
        assert store.surface is surface
        assert failing.attempts == 1
        assert "Failed to persist layout layout:main" in caplog.text

        # Later mutations keep working from the in-memory state
        assert "ports" not in store.remove("ports").types()
        assert failing.attempts == 2

    def test_reset(self, kv, make_store, catalog):
        store = make_store()
        store.remove("system")
        surface = store.reset()
        assert surface == seed_surface(LayoutScope.MAIN, catalog)
        assert json.loads(kv.get("layout:main"))[0]["type"] == "system"


class TestQueriesAndSubscribers:
    def test_available_types(self, main_store):
        assert main_store.available_types() == ["docker", "projects", "agents"]
        main_store.add("docker")
        assert main_store.available_types() == ["projects", "agents"]
        assert main_store.is_present("docker")

    def test_subscribers_see_commits(self, main_store):
        seen = []
        dispose = main_store.subscribe(seen.append)
        main_store.add("docker")
        main_store.add("docker")
        main_store.remove("ghost")
        assert len(seen) == 1
        assert seen[0].types()[-1] == "docker"

        dispose()
        main_store.remove("docker-1")
        assert len(seen) == 1

    def test_open_layout_stores(self, kv, catalog):
        stores = open_layout_stores(kv, catalog)
        assert set(stores) == set(LayoutScope)
        assert stores[LayoutScope.LEFT_RAIL].surface.types() == ["projects"]
        assert isinstance(stores[LayoutScope.MAIN], LayoutStore)


class TestScopes:
    def test_parse(self):
        assert LayoutScope.parse("main") is LayoutScope.MAIN
        assert LayoutScope.parse("Right-Rail") is LayoutScope.RIGHT_RAIL
        assert LayoutScope.parse("layout:left-rail") is LayoutScope.LEFT_RAIL

    def test_parse_unknown(self):
        from widgetdeck.exceptions import UnknownScopeError

        with pytest.raises(UnknownScopeError) as exc_info:
            LayoutScope.parse("bottom")
        assert exc_info.value.context["scope"] == "bottom"

    def test_seed_ids_are_types(self, catalog):
        surface = seed_surface(LayoutScope.RIGHT_RAIL, catalog)
        assert surface.ids() == surface.types()
        assert all(isinstance(w, WidgetInstance) for w in surface)
