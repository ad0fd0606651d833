"""Textual front end for the widget dashboard."""

from .app import DeckApp
from .dashboard import WidgetDashboard
from .widget_panel import WidgetPanel

__all__ = ["DeckApp", "WidgetDashboard", "WidgetPanel"]
