"""Integration tests for the chat endpoints and SSE streaming.

Tests real streaming behavior with httpx AsyncClient and ASGITransport.
The assistant runs in demo mode, so no API key is needed.
"""

import json

import pytest_check as check
from fastapi import FastAPI
from httpx import AsyncClient

from kbase.agent.chat_agent import DISABLED_MESSAGE, AIService, get_ai_service
from kbase.agent.config import Settings
from kbase.knowledge.notebooks import NotebookService
from kbase.knowledge.service import KnowledgeBaseService
from kbase.models.chat import AIResponse
from kbase.models.schemas import StreamChunk, StreamStatus
from kbase.storage.store import JSONStore


async def _stream(client: AsyncClient, payload: dict) -> list[StreamChunk]:
    chunks: list[StreamChunk] = []
    async with client.stream("POST", "/chat/stream", json=payload) as response:
        assert response.status_code == 200
        async for line in response.aiter_lines():
            if line.startswith("data: "):
                chunks.append(StreamChunk.model_validate_json(line.removeprefix("data: ").strip()))
    return chunks


class TestChatEndpoint:
    async def test_answer_with_citations(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/chat", json={"message": "What is Rust ownership?"})

        answer = AIResponse.model_validate(response.json())
        check.equal(response.status_code, 200)
        check.is_false(answer.is_error)
        check.between_equal(len(answer.citations), 1, 3)
        check.is_true(answer.text.endswith("]"))
        for citation in answer.citations:
            check.greater(citation.relevance_score, 0)
            check.less_equal(citation.relevance_score, 1)
            check.is_true(citation.snippet)

    async def test_context_from_notebook(
        self,
        async_client: AsyncClient,
        notebook_service: NotebookService,
        knowledge_base: KnowledgeBaseService,
    ) -> None:
        notebook_id = notebook_service.notebooks[1].id
        doc = knowledge_base.documents[5]
        notebook_service.add_document_to_notebook(notebook_id, doc.id)

        response = await async_client.post(
            "/chat", json={"message": "Summarize this", "notebook_id": notebook_id}
        )

        citations = response.json()["citations"]
        assert [c["document_id"] for c in citations] == [doc.id]

    async def test_empty_notebook_has_no_citations(
        self, async_client: AsyncClient, notebook_service: NotebookService
    ) -> None:
        notebook_id = notebook_service.notebooks[2].id

        response = await async_client.post(
            "/chat", json={"message": "Anything here?", "notebook_id": notebook_id}
        )

        assert response.json()["citations"] == []

    async def test_unknown_notebook_returns_404(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/chat", json={"message": "Hi", "notebook_id": "missing"})

        assert response.status_code == 404

    async def test_blank_message_is_rejected(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/chat", json={"message": "   "})

        assert response.status_code == 422

    async def test_history_and_clear(self, async_client: AsyncClient) -> None:
        await async_client.post("/chat", json={"message": "How do goroutines work?"})

        history = (await async_client.get("/chat/history")).json()
        check.equal([m["role"] for m in history], ["user", "assistant"])
        check.equal(history[0]["content"], "How do goroutines work?")

        check.equal((await async_client.delete("/chat/history")).status_code, 204)
        check.equal((await async_client.get("/chat/history")).json(), [])


class TestStreamingEndpoint:
    """Integration tests for POST /chat/stream SSE endpoint."""

    async def test_stream_returns_sse_content_type(self, async_client: AsyncClient) -> None:
        """Streaming endpoint returns text/event-stream media type."""
        async with async_client.stream(
            "POST",
            "/chat/stream",
            json={"message": "Say hello"},
        ) as response:
            assert response.status_code == 200
            assert "text/event-stream" in response.headers["content-type"]

    async def test_chunks_are_valid_json(self, async_client: AsyncClient) -> None:
        """Each SSE data chunk contains valid JSON matching StreamChunk schema."""
        async with async_client.stream("POST", "/chat/stream", json={"message": "Hi"}) as response:
            async for line in response.aiter_lines():
                if line.startswith("data: "):
                    data = json.loads(line.removeprefix("data: ").strip())
                    chunk = StreamChunk.model_validate(data)
                    assert isinstance(chunk.content, str)
                    assert isinstance(chunk.done, bool)

    async def test_final_chunk_has_done_true(self, async_client: AsyncClient) -> None:
        """Last chunk has done=true and carries the citations."""
        chunks = await _stream(async_client, {"message": "Explain Rust lifetimes"})

        assert len(chunks) > 2
        final = chunks[-1]
        check.is_true(final.done)
        check.equal(final.status, StreamStatus.COMPLETE)
        check.is_true(final.citations)
        check.is_true(all(not chunk.done for chunk in chunks[:-1]))
        check.equal(chunks[0].status, StreamStatus.SEARCHING)

    async def test_streamed_text_matches_history(self, async_client: AsyncClient) -> None:
        chunks = await _stream(async_client, {"message": "Compare Go and Rust"})

        text = "".join(chunk.content for chunk in chunks)
        history = (await async_client.get("/chat/history")).json()
        check.equal(history[-1]["content"], text)
        check.equal(len(history[-1]["citations"]), len(chunks[-1].citations))

    async def test_disabled_assistant_streams_error(
        self, app: FastAPI, async_client: AsyncClient, settings: Settings, store: JSONStore
    ) -> None:
        disabled = AIService(
            settings=settings.model_copy(update={"demo_mode": False, "llm_api_key": None}),
            store=store,
        )
        app.dependency_overrides[get_ai_service] = lambda: disabled

        chunks = await _stream(async_client, {"message": "Explain Rust lifetimes"})

        check.equal([chunk.status for chunk in chunks], [StreamStatus.SEARCHING, StreamStatus.ERROR])
        check.is_true(chunks[-1].done)
        check.equal(chunks[-1].error, DISABLED_MESSAGE)
        check.equal(chunks[-1].citations, [])


class TestAssistantEndpoints:
    async def test_summary(self, async_client: AsyncClient, knowledge_base: KnowledgeBaseService) -> None:
        doc = knowledge_base.documents[0]

        response = await async_client.post(f"/ai/summary/{doc.id}")

        check.equal(response.status_code, 200)
        check.is_in(doc.title, response.json()["text"])

    async def test_tags(self, async_client: AsyncClient, knowledge_base: KnowledgeBaseService) -> None:
        doc = knowledge_base.documents[0]

        response = await async_client.post(f"/ai/tags/{doc.id}")

        body = response.json()
        check.equal(body["document_id"], doc.id)
        check.between_equal(len(body["tags"]), 3, 5)
        check.is_true(set(body["tags"]).isdisjoint(doc.tags))

    async def test_unknown_document_returns_404(self, async_client: AsyncClient) -> None:
        check.equal((await async_client.post("/ai/summary/missing")).status_code, 404)
        check.equal((await async_client.post("/ai/tags/missing")).status_code, 404)

    async def test_blank_api_key_is_rejected(self, async_client: AsyncClient) -> None:
        response = await async_client.put("/ai/api-key", json={"api_key": "  "})

        assert response.status_code == 400

    async def test_set_api_key(self, async_client: AsyncClient) -> None:
        response = await async_client.put("/ai/api-key", json={"api_key": "sk-demo"})

        check.equal(response.status_code, 200)
        check.is_true(response.json()["enabled"])
