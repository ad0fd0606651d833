"""Tests for WidgetInstance, LayoutSurface and ProjectContext."""

from widgetdeck.layout.heights import HeightClass
from widgetdeck.layout.models import LayoutSurface, ProjectContext, WidgetInstance


def make_surface(*ids):
    return LayoutSurface("layout:main", tuple(WidgetInstance(id=i, type=i) for i in ids))


class TestWidgetInstance:
    def test_to_dict_omits_unset_title(self):
        widget = WidgetInstance(id="docker-1", type="docker")
        assert widget.to_dict() == {
            "id": "docker-1",
            "type": "docker",
            "expanded": True,
            "heightClass": "medium",
        }

    def test_to_dict_includes_title(self):
        widget = WidgetInstance(id="d", type="docker", title="Containers", expanded=False)
        data = widget.to_dict()
        assert data["title"] == "Containers"
        assert data["expanded"] is False

    def test_from_dict_defaults(self, catalog):
        widget = WidgetInstance.from_dict({"id": "s", "type": "sessions"}, catalog)
        assert widget.expanded is True
        assert widget.height_class == HeightClass.LARGE
        assert widget.title is None

    def test_from_dict_invalid_values(self, catalog):
        widget = WidgetInstance.from_dict(
            {"id": "d", "type": "docker", "expanded": "yes", "heightClass": "giant"},
            catalog,
        )
        assert widget.expanded is True
        assert widget.height_class == HeightClass.MEDIUM

    def test_display_title(self, catalog):
        assert WidgetInstance(id="d", type="docker").display_title(catalog) == "Docker"
        assert WidgetInstance(id="d", type="docker", title="Boxes").display_title(catalog) == "Boxes"
        assert WidgetInstance(id="x", type="nope").display_title(catalog) == "Widget"


class TestLayoutSurface:
    def test_lookup(self):
        surface = make_surface("a", "b", "c")
        assert len(surface) == 3
        assert surface.ids() == ["a", "b", "c"]
        assert surface.index_of("b") == 1
        assert surface.index_of("z") == -1
        assert surface.get("c").id == "c"
        assert surface.get("z") is None

    def test_structural_equality(self):
        assert make_surface("a", "b") == make_surface("a", "b")
        assert make_surface("a", "b") != make_surface("b", "a")

    def test_to_document(self):
        document = make_surface("a").to_document()
        assert document == [{"id": "a", "type": "a", "expanded": True, "heightClass": "medium"}]


class TestProjectContext:
    def test_from_path(self, tmp_path):
        project_dir = tmp_path / "myapp"
        project_dir.mkdir()
        project = ProjectContext.from_path(project_dir)
        assert project.name == "myapp"
        assert project.path == project_dir.resolve()
