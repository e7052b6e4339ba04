"""Data models for captured snapshots."""

from pydantic import BaseModel, ConfigDict

# Root container class every packaged rule is scoped under
ROOT_CLASS = "broadcast-schedule"


class Snapshot(BaseModel):
    """A frozen, presentation-only rendering of the schedule table."""

    model_config = ConfigDict(frozen=True)

    markup: str  # The filtered <table> fragment
    style_sheet: str

    def to_html(self) -> str:
        """Render the published artifact: style block followed by the root container."""
        return (
            f"<style>{self.style_sheet}</style>\n"
            f'<div class="{ROOT_CLASS}">{self.markup}</div>\n'
        )
