"""Page endpoints: hierarchy, archive, blocks and search."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from kbase.knowledge.pages import InvalidMoveError, PageNotFoundError, PageService, get_page_service
from kbase.models.pages import (
    BlockContent,
    CreatePageRequest,
    MovePageRequest,
    Page,
    PageTreeNode,
    UpdatePageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pages", tags=["pages"])

Pages = Annotated[PageService, Depends(get_page_service)]


def _not_found(e: PageNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=list[Page])
async def list_pages(pages: Pages) -> list[Page]:
    """Root pages that are not archived."""
    return pages.root_pages


@router.post("", response_model=Page, status_code=status.HTTP_201_CREATED)
async def create_page(request: CreatePageRequest, pages: Pages) -> Page:
    try:
        return pages.create_page(request)
    except PageNotFoundError as e:
        raise _not_found(e) from e


@router.get("/tree", response_model=list[PageTreeNode])
async def page_tree(pages: Pages) -> list[PageTreeNode]:
    return pages.page_tree()


@router.get("/archived", response_model=list[Page])
async def archived_pages(pages: Pages) -> list[Page]:
    return pages.archived_pages


@router.get("/search", response_model=list[Page])
async def search_pages(pages: Pages, q: Annotated[str, Query()] = "") -> list[Page]:
    return pages.search_pages(q)


@router.get("/{page_id}", response_model=Page)
async def get_page(page_id: str, pages: Pages) -> Page:
    try:
        return pages.require_page(page_id)
    except PageNotFoundError as e:
        raise _not_found(e) from e


@router.patch("/{page_id}", response_model=Page)
async def update_page(page_id: str, request: UpdatePageRequest, pages: Pages) -> Page:
    try:
        return pages.update_page(page_id, request)
    except PageNotFoundError as e:
        raise _not_found(e) from e


@router.delete("/{page_id}", response_model=Page)
async def archive_page(page_id: str, pages: Pages) -> Page:
    """Archive a page. Archived pages can be restored."""
    try:
        return pages.archive_page(page_id)
    except PageNotFoundError as e:
        raise _not_found(e) from e


@router.post("/{page_id}/restore", response_model=Page)
async def restore_page(page_id: str, pages: Pages) -> Page:
    try:
        return pages.restore_page(page_id)
    except PageNotFoundError as e:
        raise _not_found(e) from e


@router.post("/{page_id}/move", response_model=Page)
async def move_page(page_id: str, request: MovePageRequest, pages: Pages) -> Page:
    """Move a page under another page, or to the root.

    Raises:
        404: Unknown page or parent.
        409: Parent is archived or inside the page's own subtree.
    """
    try:
        return pages.move_page(page_id, request.parent_id)
    except PageNotFoundError as e:
        raise _not_found(e) from e
    except InvalidMoveError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.get("/{page_id}/children", response_model=list[Page])
async def page_children(page_id: str, pages: Pages) -> list[Page]:
    try:
        pages.require_page(page_id)
    except PageNotFoundError as e:
        raise _not_found(e) from e
    return pages.children(page_id)


@router.put("/{page_id}/blocks", response_model=Page)
async def update_blocks(page_id: str, blocks: list[BlockContent], pages: Pages) -> Page:
    """Replace the blocks of a page."""
    try:
        return pages.update_blocks(page_id, blocks)
    except PageNotFoundError as e:
        raise _not_found(e) from e
