"""
widgetdeck - composable widget dashboard for terminal workspaces
"""

__version__ = "0.3.0"
