"""
View Controller: which screen the dream journal shows.

A small state machine with no I/O so it can be driven and tested without
Streamlit. ``detail`` is only reachable with a selected dream; ``back``
from detail returns to the archive, from anything else to home.
"""

from dataclasses import dataclass
from enum import StrEnum


class View(StrEnum):
    home = "home"
    recording = "recording"
    archive = "archive"
    detail = "detail"
    settings = "settings"


@dataclass
class ViewController:
    current: View = View.home
    selected_dream_id: str | None = None

    def open(self, view: View) -> None:
        """Switch to a top-level view (anything but ``detail``)."""
        if view is View.detail:
            raise ValueError("Use show_detail() to open a dream")
        self.current = view
        self.selected_dream_id = None

    def show_detail(self, dream_id: str) -> None:
        if not dream_id:
            raise ValueError("A dream id is required for the detail view")
        self.current = View.detail
        self.selected_dream_id = dream_id

    def back(self) -> None:
        if self.current is View.detail:
            self.current = View.archive
        else:
            self.current = View.home
        self.selected_dream_id = None

    def dream_deleted(self, dream_id: str) -> None:
        """Leave the detail view if it shows a dream that no longer exists."""
        if self.current is View.detail and self.selected_dream_id == dream_id:
            self.back()
