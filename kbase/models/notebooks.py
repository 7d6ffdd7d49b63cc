"""Notebook models: named groups of documents."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class NotebookColor(str, Enum):
    """Colour presets for notebooks."""

    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"
    TEAL = "teal"
    GRAY = "gray"


NOTEBOOK_COLOR_MAP: dict[NotebookColor, str] = {
    NotebookColor.BLUE: "#3b82f6",
    NotebookColor.PURPLE: "#8b5cf6",
    NotebookColor.PINK: "#ec4899",
    NotebookColor.GREEN: "#10b981",
    NotebookColor.ORANGE: "#f97316",
    NotebookColor.RED: "#ef4444",
    NotebookColor.TEAL: "#14b8a6",
    NotebookColor.GRAY: "#6b7280",
}


class NotebookIcon(str, Enum):
    """Material icon names available for notebooks."""

    FOLDER = "folder"
    WORK = "work"
    SCHOOL = "school"
    SCIENCE = "science"
    CODE = "code"
    BOOK = "book"
    LIGHTBULB = "lightbulb"
    STAR = "star"


class Notebook(BaseModel):
    """A named collection of document ids.

    Attributes:
        id: Unique notebook identifier.
        name: Display name.
        description: Optional description.
        color: Colour preset.
        icon: Icon preset.
        document_ids: Ordered, duplicate-free document ids.
        is_default: Default notebooks cannot be deleted.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    id: str
    name: str
    description: str | None = None
    color: NotebookColor = NotebookColor.BLUE
    icon: NotebookIcon = NotebookIcon.FOLDER
    document_ids: list[str] = Field(default_factory=list)
    is_default: bool = False
    created_at: datetime
    updated_at: datetime

    @property
    def hex_color(self) -> str:
        return NOTEBOOK_COLOR_MAP[self.color]


class CreateNotebookParams(BaseModel):
    """Payload for creating a notebook."""

    name: str = Field(..., min_length=1)
    description: str | None = None
    color: NotebookColor | None = None
    icon: NotebookIcon | None = None


class UpdateNotebookParams(BaseModel):
    """Partial update of a notebook."""

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    color: NotebookColor | None = None
    icon: NotebookIcon | None = None
