"""CLI command groups for widgetdeck."""
