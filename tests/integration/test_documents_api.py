"""Integration tests for document, search and statistics endpoints.

Uses the real FastAPI app with per-test services injected through
dependency overrides.
"""

import pytest_check as check
from httpx import AsyncClient

from kbase.knowledge.service import KnowledgeBaseService
from kbase.models.documents import Document
from kbase.models.queries import InstantSearchResult, SearchResult
from tests.conftest import SEED_DOCUMENTS

NEW_DOCUMENT = {
    "title": "Zebra Striping in PostgreSQL",
    "content": "Zebra striping spreads rows across disks. It is a storage trick.",
    "category": "PostgreSQL",
    "tags": ["storage", "zebra"],
}


async def _create(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/documents", json={**NEW_DOCUMENT, **overrides})
    assert response.status_code == 201
    return response.json()


class TestHealth:
    async def test_health(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestDocumentsEndpoints:
    async def test_list_documents(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/documents")

        assert response.status_code == 200
        assert len(response.json()) == SEED_DOCUMENTS

    async def test_list_filters_by_category_and_query(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/documents", params=[("category", "Rust"), ("category", "Golang"), ("q", "concurren")]
        )

        docs = [Document.model_validate(d) for d in response.json()]
        assert docs
        assert all(doc.category.value in ("Rust", "Golang") for doc in docs)

    async def test_invalid_category_is_rejected(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/documents", params={"category": "COBOL"})

        assert response.status_code == 422

    async def test_create_and_get(self, async_client: AsyncClient) -> None:
        created = await _create(async_client)

        response = await async_client.get(f"/documents/{created['id']}")

        check.equal(response.status_code, 200)
        check.equal(response.json()["title"], NEW_DOCUMENT["title"])
        check.equal(response.json()["size"], len(NEW_DOCUMENT["content"]))

    async def test_create_blank_title_is_rejected(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/documents", json={**NEW_DOCUMENT, "title": "  "})

        assert response.status_code == 422

    async def test_get_unknown_returns_404(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/documents/missing")

        assert response.status_code == 404
        assert "missing" in response.json()["detail"]

    async def test_patch_document(self, async_client: AsyncClient) -> None:
        created = await _create(async_client)

        response = await async_client.patch(
            f"/documents/{created['id']}", json={"status": "archived", "tags": ["cold"]}
        )

        check.equal(response.status_code, 200)
        check.equal(response.json()["status"], "archived")
        check.equal(response.json()["tags"], ["cold"])
        check.equal(response.json()["title"], NEW_DOCUMENT["title"])

    async def test_delete_document(self, async_client: AsyncClient) -> None:
        created = await _create(async_client)

        response = await async_client.delete(f"/documents/{created['id']}")
        check.equal(response.status_code, 204)

        response = await async_client.delete(f"/documents/{created['id']}")
        check.equal(response.status_code, 404)

    async def test_view_pin_and_favorite(self, async_client: AsyncClient) -> None:
        created = await _create(async_client)
        doc_id = created["id"]

        check.equal((await async_client.post(f"/documents/{doc_id}/view")).json()["view_count"], 1)
        check.is_true((await async_client.post(f"/documents/{doc_id}/pin")).json()["is_pinned"])
        check.is_true((await async_client.post(f"/documents/{doc_id}/favorite")).json()["is_favorited"])
        check.equal((await async_client.post("/documents/missing/pin")).status_code, 404)

    async def test_related_documents(
        self, async_client: AsyncClient, knowledge_base: KnowledgeBaseService
    ) -> None:
        doc = knowledge_base.documents[0]

        response = await async_client.get(f"/documents/{doc.id}/related", params={"limit": 3})

        related = response.json()
        check.equal(response.status_code, 200)
        check.less_equal(len(related), 3)
        check.is_not_in(doc.id, [r["id"] for r in related])


class TestSearchEndpoints:
    async def test_search(self, async_client: AsyncClient) -> None:
        await _create(async_client)

        response = await async_client.post("/search", json={"query": "zebra"})

        result = SearchResult.model_validate(response.json())
        check.equal(result.total, 1)
        check.is_not_none(result.documents[0].relevance_score)

    async def test_search_without_results_has_suggestions(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/search", json={"query": "no-such-term-anywhere"})

        result = SearchResult.model_validate(response.json())
        check.equal(result.total, 0)
        check.is_true(result.suggestions)

    async def test_search_validates_page(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/search", json={"query": "go", "page": 0})

        assert response.status_code == 422

    async def test_instant_search_highlights(self, async_client: AsyncClient) -> None:
        await _create(async_client)

        response = await async_client.get("/search/instant", params={"q": " Zebra "})

        result = InstantSearchResult.model_validate(response.json())
        check.equal(result.query, "Zebra")
        check.equal(len(result.hits), 1)
        check.equal(
            result.hits[0].highlighted_title,
            '<mark class="highlight">Zebra</mark> Striping in PostgreSQL',
        )
        check.greater(result.hits[0].score, 0)

    async def test_instant_search_blank_query(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/search/instant", params={"q": "  "})

        assert response.json()["hits"] == []

    async def test_vector_search(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/search/vector", params={"q": "rust", "limit": 4})

        results = response.json()
        check.equal(len(results), 4)
        check.is_true(all(0.5 <= r["similarity"] <= 1.0 for r in results))


class TestStatsEndpoints:
    async def test_stats(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/stats")

        check.equal(response.status_code, 200)
        check.equal(response.json()["total_documents"], SEED_DOCUMENTS)

    async def test_category_stats(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/stats/categories")

        assert len(response.json()) == 8

    async def test_query_stats_count_searches(self, async_client: AsyncClient) -> None:
        before = (await async_client.get("/stats/queries")).json()["total"]
        await async_client.post("/search", json={"query": "rust"})

        after = (await async_client.get("/stats/queries")).json()

        check.equal(after["total"], before + 1)
        check.equal(len(after["trend"]), 7)

    async def test_popular_queries(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/stats/popular-queries", params={"limit": 2})

        assert len(response.json()) <= 2

    async def test_reset(self, async_client: AsyncClient) -> None:
        created = await _create(async_client)

        response = await async_client.post("/stats/reset")

        check.equal(response.status_code, 204)
        check.equal((await async_client.get(f"/documents/{created['id']}")).status_code, 404)
