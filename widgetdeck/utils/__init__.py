"""Utility helpers for widgetdeck."""
