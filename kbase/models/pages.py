"""Page models: block-based notes arranged in a hierarchy."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class BlockType(str, Enum):
    """Kinds of content block a page can hold."""

    TEXT = "text"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST = "bulleted_list"
    NUMBERED_LIST = "numbered_list"
    TODO = "todo"
    TOGGLE = "toggle"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    DIVIDER = "divider"
    AI_SUMMARY = "ai_summary"


class Block(BaseModel):
    """A single content block.

    Attributes:
        id: Unique block identifier.
        type: Block kind.
        text: Plain text content.
        order: Position within the page, starting at 0.
    """

    id: str
    type: BlockType = BlockType.TEXT
    text: str = ""
    order: int = 0


class BlockContent(BaseModel):
    """Block as sent by clients. Blocks without an id are new."""

    id: str | None = None
    type: BlockType = BlockType.TEXT
    text: str = ""


class Page(BaseModel):
    """A page in the page hierarchy.

    Attributes:
        id: Unique page identifier.
        title: Display title.
        icon: Optional emoji.
        cover: Optional cover (CSS gradient or image URL).
        blocks: Ordered content blocks.
        properties: Free-form page properties (tags, status, ...).
        parent_id: Parent page id, None for root pages.
        has_children: Whether any non-archived page has this one as parent.
        archived: Archived pages are hidden from the tree and search.
        archived_at: When the page was archived.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    id: str
    title: str
    icon: str | None = None
    cover: str | None = None
    blocks: list[Block] = Field(default_factory=list)
    properties: dict[str, Any] = Field(default_factory=dict)
    parent_id: str | None = None
    has_children: bool = False
    archived: bool = False
    archived_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PageTreeNode(Page):
    """A page with its non-archived descendants."""

    children: list["PageTreeNode"] = Field(default_factory=list)
    level: int = 0


class CreatePageRequest(BaseModel):
    """Payload for creating a page. Title defaults to "Untitled"."""

    title: str | None = None
    icon: str | None = None
    cover: str | None = None
    parent_id: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    blocks: list[BlockContent] | None = None


class UpdatePageRequest(BaseModel):
    """Partial update of page attributes."""

    title: str | None = Field(None, min_length=1)
    icon: str | None = None
    cover: str | None = None
    properties: dict[str, Any] | None = None


class MovePageRequest(BaseModel):
    """New parent for a page; None moves it to the root."""

    parent_id: str | None = None


DEFAULT_GRADIENTS = [
    "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    "linear-gradient(135deg, #f093fb 0%, #f5576c 100%)",
    "linear-gradient(135deg, #4facfe 0%, #00f2fe 100%)",
    "linear-gradient(135deg, #43e97b 0%, #38f9d7 100%)",
    "linear-gradient(135deg, #fa709a 0%, #fee140 100%)",
]
