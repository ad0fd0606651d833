"""
Add-widget picker modal.
"""

from typing import List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, OptionList, Static
from textual.widgets.option_list import Option

from widgetdeck.layout.add_flow import AddWidgetOption
from widgetdeck.layout.scroll import ScrollArbiter

from .scroll_regions import ArbitratedOptionList

ADD_WIDGET_REGION = "add-widget-list"
EXHAUSTED_MESSAGE = "All widgets have been added"


def option_prompt(option: AddWidgetOption) -> Text:
    descriptor = option.descriptor
    text = Text()
    text.append(f"{descriptor.icon} ", style=descriptor.accent_color)
    text.append(descriptor.title, style="bold")
    if option.requires_project_note:
        text.append(f" {option.requires_project_note}", style="yellow")
    if descriptor.description:
        text.append(f"\n   {descriptor.description}", style="dim")
    return text


class AddWidgetScreen(ModalScreen[Optional[str]]):
    """Lists the widget types a surface can still take.

    Dismisses with the chosen type key, or None on cancel.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    CSS = """
    AddWidgetScreen {
        align: center middle;
    }

    #add-widget-container {
        width: 60;
        max-height: 80%;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1;
    }

    #add-widget-list {
        height: auto;
        max-height: 20;
    }

    #add-widget-empty {
        color: $text-muted;
        text-align: center;
        padding: 1;
    }

    #add-widget-instructions {
        margin-top: 1;
        text-align: center;
        color: $text-muted;
    }
    """

    def __init__(self, options: List[AddWidgetOption], arbiter: Optional[ScrollArbiter] = None):
        super().__init__()
        self.widget_options = list(options)
        self.arbiter = arbiter

    def compose(self) -> ComposeResult:
        with Vertical(id="add-widget-container"):
            yield Label("➕ Add Widget", classes="title")
            if self.widget_options:
                yield ArbitratedOptionList(
                    *[Option(option_prompt(o), id=o.key) for o in self.widget_options],
                    region_id=ADD_WIDGET_REGION,
                    arbiter=self.arbiter,
                    id="add-widget-list",
                )
            else:
                yield Static(EXHAUSTED_MESSAGE, id="add-widget-empty")
            yield Static("↑↓ Navigate | Enter Add | Esc Cancel", id="add-widget-instructions")

    def on_mount(self) -> None:
        if self.widget_options:
            self.query_one("#add-widget-list", OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)
