"""Chat and assistant endpoints.

Answers are grounded in context documents picked per request: the
documents of the given notebook, otherwise the best instant-search hits
for the message or for its keywords, otherwise the first documents of
the collection.

Streaming uses Server-Sent Events; each frame is a JSON StreamChunk and
the final frame (done=true) carries the citations.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from kbase.agent.chat_agent import AIService, AIServiceDisabledError, get_ai_service
from kbase.agent.citations import build_citations, question_tokens
from kbase.knowledge.notebooks import NotebookNotFoundError, NotebookService, get_notebook_service
from kbase.knowledge.service import DocumentNotFoundError, KnowledgeBaseService, get_knowledge_base
from kbase.models.chat import AIResponse, ChatMessage, ChatRequest
from kbase.models.documents import Document
from kbase.models.schemas import APIKeyRequest, StreamChunk, StreamStatus, TagSuggestions
from kbase.search.relevance import instant_search

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])
ai_router = APIRouter(prefix="/ai", tags=["ai"])

MAX_CONTEXT_DOCUMENTS = 10

Assistant = Annotated[AIService, Depends(get_ai_service)]
KnowledgeBase = Annotated[KnowledgeBaseService, Depends(get_knowledge_base)]
Notebooks = Annotated[NotebookService, Depends(get_notebook_service)]


def _resolve_context(
    request: ChatRequest,
    kb: KnowledgeBaseService,
    notebooks: NotebookService,
) -> list[Document]:
    if request.notebook_id:
        try:
            return notebooks.documents_in(request.notebook_id, kb)
        except NotebookNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    documents = kb.documents
    hits, _ = instant_search(documents, request.message, MAX_CONTEXT_DOCUMENTS)
    if hits:
        return [doc for doc, _ in hits]

    # rank by the summed instant-search score of each question keyword
    scores: dict[str, int] = {}
    for token in question_tokens(request.message):
        for doc, score in instant_search(documents, token, len(documents)):
            scores[doc.id] = scores.get(doc.id, 0) + score
    if scores:
        ranked = sorted(documents, key=lambda doc: scores.get(doc.id, 0), reverse=True)
        return [doc for doc in ranked[:MAX_CONTEXT_DOCUMENTS] if doc.id in scores]
    return documents[:MAX_CONTEXT_DOCUMENTS]


def _sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


@router.post("", response_model=AIResponse)
async def chat(
    request: ChatRequest,
    assistant: Assistant,
    kb: KnowledgeBase,
    notebooks: Notebooks,
) -> AIResponse:
    """Answer a question with citations from the context documents."""
    context = _resolve_context(request, kb, notebooks)
    logger.info(f"Chat question with {len(context)} context documents")
    return await assistant.ask_question(request.message, context)


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    assistant: Assistant,
    kb: KnowledgeBase,
    notebooks: Notebooks,
) -> StreamingResponse:
    """Stream an answer as Server-Sent Events.

    Frames:
        - status=searching once the context is chosen
        - status=generating for every text chunk
        - status=complete with done=true and the citations
        - status=error with done=true if generation fails or the assistant is disabled
    """
    context = _resolve_context(request, kb, notebooks)
    citations = build_citations(request.message, context)

    async def event_stream() -> AsyncGenerator[str]:
        yield _sse(StreamChunk(content="", done=False, status=StreamStatus.SEARCHING))
        try:
            async for text in assistant.stream_answer(request.message, context, citations):
                yield _sse(StreamChunk(content=text, done=False, status=StreamStatus.GENERATING))
        except AIServiceDisabledError as e:
            logger.warning(f"Streaming answer rejected: {e}")
            yield _sse(StreamChunk(content="", done=True, status=StreamStatus.ERROR, error=str(e)))
            return
        except Exception as e:
            logger.error(f"Streaming answer failed: {e}")
            yield _sse(
                StreamChunk(
                    content="",
                    done=True,
                    status=StreamStatus.ERROR,
                    error="An error occurred while generating the answer",
                )
            )
            return

        yield _sse(
            StreamChunk(
                content="",
                done=True,
                status=StreamStatus.COMPLETE,
                citations=citations,
            )
        )

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/history", response_model=list[ChatMessage])
async def chat_history(assistant: Assistant) -> list[ChatMessage]:
    return assistant.chat_history


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(assistant: Assistant) -> None:
    assistant.clear_chat()


@ai_router.post("/summary/{document_id}", response_model=AIResponse)
async def generate_summary(document_id: str, assistant: Assistant, kb: KnowledgeBase) -> AIResponse:
    try:
        document = kb.require_document(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return await assistant.generate_summary(document)


@ai_router.post("/tags/{document_id}", response_model=TagSuggestions)
async def suggest_tags(document_id: str, assistant: Assistant, kb: KnowledgeBase) -> TagSuggestions:
    """Suggest new tags for a document. Existing tags are never repeated."""
    try:
        document = kb.require_document(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return TagSuggestions(document_id=document_id, tags=await assistant.suggest_tags(document))


@ai_router.put("/api-key")
async def set_api_key(request: APIKeyRequest, assistant: Assistant) -> dict[str, bool]:
    if not assistant.set_api_key(request.api_key):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="API key must not be blank",
        )
    return {"enabled": assistant.is_enabled}
