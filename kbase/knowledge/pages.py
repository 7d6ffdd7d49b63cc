"""Page service: a hierarchy of block-based pages.

Pages nest through ``parent_id``. Deleting a page archives it; archived
pages drop out of the tree, the children listing and search, and can be
restored. A parent's ``has_children`` flag follows its non-archived
children. Every mutation is persisted.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from pydantic import TypeAdapter, ValidationError

from kbase.agent.config import get_settings
from kbase.knowledge.seed import generate_id
from kbase.models.pages import (
    DEFAULT_GRADIENTS,
    Block,
    BlockContent,
    BlockType,
    CreatePageRequest,
    Page,
    PageTreeNode,
    UpdatePageRequest,
)
from kbase.storage.store import JSONStore

logger = logging.getLogger(__name__)

PAGES_KEY = "pages"
UNTITLED = "Untitled"

_pages_adapter = TypeAdapter(list[Page])


class PageNotFoundError(Exception):
    """Raised when a page id is unknown."""

    pass


class InvalidMoveError(Exception):
    """Raised when a page cannot be moved under the requested parent."""

    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _blocks(contents: Sequence[BlockContent]) -> list[Block]:
    return [
        Block(id=content.id or generate_id("blk-"), type=content.type, text=content.text, order=order)
        for order, content in enumerate(contents)
    ]


def _default_pages() -> list[Page]:
    now = _now()
    return [
        Page(
            id=generate_id("page-"),
            title="Getting Started",
            icon="🚀",
            cover=DEFAULT_GRADIENTS[0],
            blocks=_blocks(
                [
                    BlockContent(type=BlockType.HEADING_1, text="Welcome to Your Knowledge Base!"),
                    BlockContent(text="A block-based knowledge management space with an AI assistant."),
                    BlockContent(type=BlockType.CALLOUT, text='Try pressing "/" to see all available block types!'),
                ]
            ),
            created_at=datetime(2025, 1, 15, tzinfo=timezone.utc),
            updated_at=now,
        ),
        Page(
            id=generate_id("page-"),
            title="AI Features",
            icon="🤖",
            blocks=_blocks(
                [
                    BlockContent(type=BlockType.HEADING_2, text="AI Chat with Citations"),
                    BlockContent(text="Ask questions about your documents and get answers with citations."),
                ]
            ),
            created_at=datetime(2025, 1, 16, tzinfo=timezone.utc),
            updated_at=now,
        ),
    ]


class PageService:
    """Manages the page hierarchy."""

    def __init__(self, store: JSONStore | None = None) -> None:
        self._store = store or JSONStore(get_settings().data_dir)
        self._pages = self._load()

    def _load(self) -> list[Page]:
        raw = self._store.get(PAGES_KEY)
        if raw is not None:
            try:
                return _pages_adapter.validate_python(raw)
            except ValidationError as e:
                logger.error(f"Failed to parse stored pages, using defaults: {e}")

        pages = _default_pages()
        self._pages = pages
        self._save()
        return pages

    def _save(self) -> None:
        self._store.set(PAGES_KEY, _pages_adapter.dump_python(self._pages, mode="json"))

    @property
    def pages(self) -> list[Page]:
        return list(self._pages)

    @property
    def root_pages(self) -> list[Page]:
        return [page for page in self._pages if page.parent_id is None and not page.archived]

    @property
    def archived_pages(self) -> list[Page]:
        return [page for page in self._pages if page.archived]

    def get_page(self, page_id: str) -> Page | None:
        return next((page for page in self._pages if page.id == page_id), None)

    def require_page(self, page_id: str) -> Page:
        page = self.get_page(page_id)
        if page is None:
            raise PageNotFoundError(f"Page not found: {page_id}")
        return page

    def children(self, page_id: str) -> list[Page]:
        """Non-archived direct children of a page."""
        return [page for page in self._pages if page.parent_id == page_id and not page.archived]

    def _update(self, page_id: str, **changes) -> Page:
        page = self.require_page(page_id)
        updated = page.model_copy(update={**changes, "updated_at": _now()})
        self._pages = [updated if p.id == page_id else p for p in self._pages]
        return updated

    def _refresh_has_children(self, parent_id: str | None) -> None:
        if parent_id is None or self.get_page(parent_id) is None:
            return
        has_children = bool(self.children(parent_id))
        if self.require_page(parent_id).has_children != has_children:
            self._update(parent_id, has_children=has_children)

    def create_page(self, request: CreatePageRequest) -> Page:
        """Create a page, under a parent when one is given.

        Raises:
            PageNotFoundError: If the parent id is unknown.
        """
        if request.parent_id is not None:
            self.require_page(request.parent_id)

        now = _now()
        blocks = request.blocks if request.blocks is not None else [BlockContent()]
        page = Page(
            id=generate_id("page-"),
            title=(request.title or "").strip() or UNTITLED,
            icon=request.icon,
            cover=request.cover,
            blocks=_blocks(blocks),
            properties=request.properties,
            parent_id=request.parent_id,
            created_at=now,
            updated_at=now,
        )

        self._pages = [*self._pages, page]
        self._refresh_has_children(page.parent_id)
        self._save()
        logger.info(f"Created page {page.id}: {page.title}")
        return page

    def update_page(self, page_id: str, request: UpdatePageRequest) -> Page:
        """Apply the provided fields.

        Raises:
            PageNotFoundError: If the id is unknown.
        """
        changes = request.model_dump(exclude_unset=True)
        if changes.get("title", "") is None:
            del changes["title"]
        page = self._update(page_id, **changes)
        self._save()
        return page

    def update_blocks(self, page_id: str, blocks: Sequence[BlockContent]) -> Page:
        """Replace the blocks of a page, renumbering their order."""
        page = self._update(page_id, blocks=_blocks(blocks))
        self._save()
        return page

    def archive_page(self, page_id: str) -> Page:
        """Archive a page. Its children keep their parent id."""
        page = self.require_page(page_id)
        if page.archived:
            return page

        page = self._update(page_id, archived=True, archived_at=_now())
        self._refresh_has_children(page.parent_id)
        self._save()
        logger.info(f"Archived page {page_id}")
        return page

    def restore_page(self, page_id: str) -> Page:
        page = self.require_page(page_id)
        if not page.archived:
            return page

        page = self._update(page_id, archived=False, archived_at=None)
        self._refresh_has_children(page.parent_id)
        self._save()
        logger.info(f"Restored page {page_id}")
        return page

    def move_page(self, page_id: str, parent_id: str | None) -> Page:
        """Move a page under a new parent, or to the root when None.

        Raises:
            PageNotFoundError: If either id is unknown.
            InvalidMoveError: If the parent is archived, the page itself or
                one of its descendants.
        """
        page = self.require_page(page_id)
        if parent_id is not None:
            parent = self.require_page(parent_id)
            if parent.archived:
                raise InvalidMoveError(f"Cannot move a page under archived page {parent_id}")
            if page_id in self._ancestor_ids(parent_id):
                raise InvalidMoveError(f"Cannot move page {page_id} under its own subtree")

        old_parent_id = page.parent_id
        page = self._update(page_id, parent_id=parent_id)
        self._refresh_has_children(old_parent_id)
        self._refresh_has_children(parent_id)
        self._save()
        return page

    def _ancestor_ids(self, page_id: str) -> set[str]:
        """The page id and the ids of all its ancestors."""
        seen: set[str] = set()
        current: str | None = page_id
        while current is not None and current not in seen:
            seen.add(current)
            page = self.get_page(current)
            current = page.parent_id if page else None
        return seen

    def page_tree(self) -> list[PageTreeNode]:
        """Non-archived pages as a forest ordered by creation date.

        Pages whose parent is archived or missing are listed as roots.
        """
        active = [page for page in self._pages if not page.archived]
        nodes = {page.id: PageTreeNode(**page.model_dump()) for page in active}
        children: dict[str, list[PageTreeNode]] = {}
        roots: list[PageTreeNode] = []

        for page in active:
            node = nodes[page.id]
            if page.parent_id in nodes:
                children.setdefault(page.parent_id, []).append(node)
            else:
                roots.append(node)

        def attach(node: PageTreeNode, level: int) -> PageTreeNode:
            kids = sorted(children.get(node.id, []), key=lambda n: n.created_at)
            return node.model_copy(
                update={"level": level, "children": [attach(kid, level + 1) for kid in kids]}
            )

        return [attach(root, 0) for root in sorted(roots, key=lambda n: n.created_at)]

    def search_pages(self, query: str) -> list[Page]:
        """Non-archived pages whose title or block text contains the query."""
        q = query.strip().lower()
        return [
            page
            for page in self._pages
            if not page.archived
            and (q in page.title.lower() or any(q in block.text.lower() for block in page.blocks))
        ]


# Module-level singleton instance
_page_service: PageService | None = None


def get_page_service() -> PageService:
    """Get or create the global page service."""
    global _page_service
    if _page_service is None:
        _page_service = PageService()
    return _page_service
