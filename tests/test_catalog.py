"""Tests for the widget type catalog."""

import logging

import pytest

from widgetdeck.layout.catalog import (
    BUILTIN_WIDGETS,
    UNKNOWN_WIDGET,
    WidgetTypeCatalog,
    WidgetTypeDescriptor,
    widget_catalog,
)
from widgetdeck.layout.heights import HeightClass


class TestDescriptorLookup:
    """Tests for descriptor_for and has."""

    def test_known_type(self, catalog):
        descriptor = catalog.descriptor_for("docker")
        assert descriptor.key == "docker"
        assert descriptor.title == "Docker"

    def test_unknown_type_falls_back(self, catalog):
        descriptor = catalog.descriptor_for("kubernetes")
        assert descriptor is UNKNOWN_WIDGET
        assert descriptor.icon == "📦"

    def test_unknown_type_is_not_registered(self, catalog):
        catalog.descriptor_for("kubernetes")
        assert not catalog.has("kubernetes")
        assert "kubernetes" not in catalog

    def test_builtin_order_preserved(self, catalog):
        assert catalog.list_types() == [d.key for d in BUILTIN_WIDGETS]
        assert len(catalog) == len(BUILTIN_WIDGETS)


class TestBuiltinDescriptors:
    """The compiled-in widget types."""

    def test_project_context_types(self, catalog):
        requiring = {d.key for d in catalog.list_descriptors() if d.requires_project_context}
        assert requiring == {"projectInfo", "github", "cloudflare"}

    def test_default_heights(self, catalog):
        assert catalog.descriptor_for("docker").default_height_class == HeightClass.MEDIUM
        assert catalog.descriptor_for("sessions").default_height_class == HeightClass.LARGE
        assert catalog.descriptor_for("projects").default_height_class == HeightClass.FILL

    def test_none_repeatable(self, catalog):
        assert not any(d.repeatable for d in catalog.list_descriptors())


class TestRegistration:
    """Tests for register, unregister and the renderer decorator."""

    def test_register_and_unregister(self):
        catalog = WidgetTypeCatalog()
        catalog.register(WidgetTypeDescriptor("logs", "📜", "Logs"))
        assert catalog.has("logs")
        assert catalog.unregister("logs") is True
        assert catalog.unregister("logs") is False
        assert catalog.descriptor_for("logs") is UNKNOWN_WIDGET

    def test_overwrite_warns(self, caplog):
        catalog = WidgetTypeCatalog()
        catalog.register(WidgetTypeDescriptor("logs", "📜", "Logs"))
        with caplog.at_level(logging.WARNING, logger="widgetdeck.layout.catalog"):
            catalog.register(WidgetTypeDescriptor("logs", "📜", "Log Tail"))
        assert "Overwriting" in caplog.text
        assert catalog.descriptor_for("logs").title == "Log Tail"

    def test_renderer_decorator_attaches(self):
        catalog = WidgetTypeCatalog()
        catalog.register(WidgetTypeDescriptor("logs", "📜", "Logs"))

        @catalog.renderer("logs")
        def render_logs(expanded, height_class, project):
            return "log lines"

        assert catalog.descriptor_for("logs").renderer is render_logs

    def test_renderer_requires_registration(self):
        catalog = WidgetTypeCatalog()
        with pytest.raises(KeyError):
            catalog.renderer("missing")(lambda *args: None)

    def test_global_catalog_has_builtin_renderers(self):
        # Importing the content module attaches renderers to the global catalog
        import widgetdeck.ui.content  # noqa: F401

        assert widget_catalog.descriptor_for("system").renderer is not None
        assert widget_catalog.descriptor_for("docker").renderer is not None
