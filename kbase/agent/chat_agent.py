"""AI assistant service: summaries, Q&A with citations and tag suggestions.

Runs in one of two modes:

1. **Demo mode** (default) - canned, keyword-driven answers. No API key or
   network access needed; an optional artificial delay imitates model latency.
2. **Live mode** - an agno ``Agent`` over ``OpenAIChat``. The cited context
   documents are inlined in the prompt under their citation numbers, so the
   model refers to them with the same [n] markers the answer carries.

Citations are computed locally in both modes, so every answer carries
source references whatever produced the text.
"""

import asyncio
import logging
import random
import re
import time
from collections.abc import AsyncGenerator, Sequence
from datetime import datetime, timezone

from agno.agent import Agent
from agno.models.openai import OpenAIChat

from kbase.agent.citations import append_markers, build_citations
from kbase.agent.config import Settings, get_settings
from kbase.models.chat import AIResponse, ChatMessage, Citation, MessageRole
from kbase.models.documents import Document
from kbase.storage.store import JSONStore

logger = logging.getLogger(__name__)

API_KEY_STORAGE_KEY = "llm_api_key"
MAX_PROMPT_DOCUMENTS = 5
DISABLED_MESSAGE = "AI service is not enabled"

GENERIC_TAGS = [
    "basics",
    "advanced",
    "best practices",
    "tutorial",
    "examples",
    "performance",
    "architecture",
    "hands-on",
    "deep dive",
    "quick start",
]

_TAG_WORD_RE = re.compile(r"[A-Za-z][A-Za-z0-9.+#-]*[A-Za-z0-9+#]|[A-Za-z]")
_TAG_STOPWORDS = frozenset(
    {"a", "an", "and", "for", "from", "guide", "in", "inside", "into", "of", "on", "the", "to", "with", "what", "how"}
)
_CHUNK_RE = re.compile(r"\S+\s*")
_LATIN_WORD_RE = re.compile(r"[a-z]+")


class AIServiceDisabledError(Exception):
    """Raised when live mode has no usable agent."""

    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _has_intent(question: str, words: Sequence[str], phrases: Sequence[str]) -> bool:
    """English keywords match whole words, Chinese phrases match anywhere."""
    tokens = set(_LATIN_WORD_RE.findall(question))
    return any(word in tokens for word in words) or any(phrase in question for phrase in phrases)


class AIService:
    """Assistant with chat history.

    Wraps the demo responder and the agno agent behind one interface:
    - Chat history with per-message citations
    - Processing flag for the UI
    - API key management persisted in the JSON store
    - Streaming generator for the SSE endpoint
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: JSONStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the assistant.

        Args:
            settings: Optional configuration. Loads from environment if not provided.
            store: Storage for the API key. Built from settings if not provided.
            rng: Random source for demo responses.
        """
        self._settings = settings or get_settings()
        self._store = store or JSONStore(self._settings.data_dir)
        self._rng = rng or random.Random()
        self._history: list[ChatMessage] = []
        self._agent: Agent | None = None
        self.is_enabled = False
        self.is_processing = False
        self._initialize_ai()

    # ==================== setup ====================

    @property
    def demo_mode(self) -> bool:
        return self._settings.demo_mode

    def _api_key(self) -> str | None:
        stored = self._store.get_string(API_KEY_STORAGE_KEY)
        if stored:
            return stored
        return self._settings.llm_api_key

    def _initialize_ai(self) -> None:
        if self.demo_mode:
            logger.info("Demo mode: using simulated AI responses")
            self.is_enabled = True
            return

        api_key = self._api_key()
        if not api_key:
            logger.warning("No LLM API key configured, AI features are disabled")
            self._agent = None
            self.is_enabled = False
            return

        try:
            self._agent = self._create_agent(api_key)
            self.is_enabled = True
            logger.info(f"LLM assistant initialized with model {self._settings.llm_model}")
        except Exception as e:
            logger.error(f"Failed to initialize LLM assistant: {e}")
            self._agent = None
            self.is_enabled = False

    def _create_agent(self, api_key: str) -> Agent:
        """Create the agno agent.

        Returns:
            Agent over an OpenAI-compatible chat model.
        """
        model = OpenAIChat(
            id=self._settings.llm_model,
            api_key=api_key,
            base_url=self._settings.llm_base_url,
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_tokens,
        )

        return Agent(
            model=model,
            description="A knowledge base assistant answering from technical documents.",
            instructions=[
                "Answer only from the provided knowledge base documents.",
                "Refer to documents with their [n] markers.",
                "If the documents do not contain the answer, say so honestly.",
                "Be concise yet thorough.",
            ],
            markdown=True,
        )

    def set_api_key(self, api_key: str) -> bool:
        """Persist an API key and re-initialize. Blank keys are ignored.

        Returns:
            Whether the key was accepted.
        """
        if not api_key or not api_key.strip():
            return False

        self._store.set_string(API_KEY_STORAGE_KEY, api_key.strip())
        self._initialize_ai()
        return True

    # ==================== history ====================

    @property
    def chat_history(self) -> list[ChatMessage]:
        return list(self._history)

    def clear_chat(self) -> None:
        self._history = []

    def _add_message(
        self,
        role: MessageRole,
        content: str,
        citations: list[Citation] | None = None,
    ) -> ChatMessage:
        message = ChatMessage(
            id=f"msg-{time.time_ns()}-{self._rng.randrange(1 << 30):x}",
            role=role,
            content=content,
            timestamp=_now(),
            citations=citations or [],
        )
        self._history.append(message)
        return message

    async def _delay(self) -> None:
        if self._settings.demo_latency_ms:
            await asyncio.sleep(self._settings.demo_latency_ms / 1000)

    # ==================== summaries ====================

    async def generate_summary(self, document: Document) -> AIResponse:
        """Summarize a document in one or two sentences."""
        start = time.perf_counter()

        if self.demo_mode:
            await self._delay()
            summaries = [
                f"This article takes a deep look at {document.title}, covering core "
                f"concepts, best practices and real-world use cases.",
                f"{document.title} is an important topic in {document.category.value}; "
                f"this article is a complete technical guide with practical advice.",
                f"A detailed look at how {document.title} works, where to use it and how "
                f"to apply it in real projects.",
                f"{document.title} from the ground up: from basic concepts to advanced "
                f"techniques, helping developers get productive quickly.",
            ]
            return AIResponse(text=self._rng.choice(summaries), latency=self._elapsed(start))

        if self._agent is None:
            return AIResponse(text=DISABLED_MESSAGE, is_error=True)

        prompt = (
            "Write a concise summary (about 50-80 words) of the following technical document.\n\n"
            f"Title: {document.title}\n"
            f"Category: {document.category.value}\n"
            f"Tags: {', '.join(document.tags)}\n"
            f"Content: {document.content}"
        )
        try:
            response = await self._agent.arun(prompt)
            return AIResponse(text=response.content or "", latency=self._elapsed(start))
        except Exception as e:
            logger.error(f"Failed to generate summary for {document.id}: {e}")
            return AIResponse(text="An error occurred while generating the summary", is_error=True)

    # ==================== question answering ====================

    async def ask_question(self, question: str, context: Sequence[Document]) -> AIResponse:
        """Answer a question from context documents.

        The question and the answer are appended to the chat history; the
        answer carries [n] markers matching its citations.

        Args:
            question: User question.
            context: Documents the answer may draw on.

        Returns:
            AIResponse with text, citations and latency.
        """
        start = time.perf_counter()
        self._add_message(MessageRole.USER, question)
        self.is_processing = True

        try:
            citations = build_citations(question, context)

            if self.demo_mode:
                await self._delay()
                text = self._rng.choice(self._mock_responses(question, context))
            elif self._agent is None:
                return AIResponse(text=DISABLED_MESSAGE, is_error=True)
            else:
                response = await self._agent.arun(self._question_prompt(question, context, citations))
                text = response.content or ""

            text = append_markers(text, citations)
            self._add_message(MessageRole.ASSISTANT, text, citations)
            return AIResponse(text=text, citations=citations, latency=self._elapsed(start))

        except Exception as e:
            logger.error(f"Question answering failed: {e}")
            return AIResponse(text="An error occurred while processing the question", is_error=True)
        finally:
            self.is_processing = False

    async def stream_answer(
        self,
        question: str,
        context: Sequence[Document],
        citations: list[Citation] | None = None,
    ) -> AsyncGenerator[str]:
        """Stream an answer chunk by chunk.

        History is updated like ask_question. The citation markers arrive
        as the last chunk.

        Yields:
            Response text chunks as they are produced.

        Raises:
            AIServiceDisabledError: In live mode without a configured agent.
        """
        if not self.demo_mode and self._agent is None:
            raise AIServiceDisabledError(DISABLED_MESSAGE)

        if citations is None:
            citations = build_citations(question, context)

        self._add_message(MessageRole.USER, question)
        self.is_processing = True
        parts: list[str] = []

        try:
            if self.demo_mode:
                await self._delay()
                text = self._rng.choice(self._mock_responses(question, context))
                for chunk in _CHUNK_RE.findall(text):
                    parts.append(chunk)
                    yield chunk
            else:
                response_stream = self._agent.arun(
                    self._question_prompt(question, context, citations),
                    stream=True,
                )
                async for chunk in response_stream:
                    if hasattr(chunk, "content") and chunk.content:
                        parts.append(chunk.content)
                        yield chunk.content

            text = "".join(parts)
            full = append_markers(text, citations)
            markers = full[len(text) :]
            if markers:
                yield markers
            self._add_message(MessageRole.ASSISTANT, full, citations)
        finally:
            self.is_processing = False

    def _question_prompt(
        self,
        question: str,
        context: Sequence[Document],
        citations: Sequence[Citation],
    ) -> str:
        # only cited documents, numbered like their citations
        by_id = {doc.id: doc for doc in context}
        documents = "\n\n".join(
            f"[{citation.index}] {by_id[citation.document_id].title}\n"
            f"{by_id[citation.document_id].content}"
            for citation in citations[:MAX_PROMPT_DOCUMENTS]
        ) or "(no documents)"
        return (
            "You are a knowledge base assistant. Answer the user's question from the "
            "documents below.\n\n"
            f"Knowledge base:\n{documents}\n\n"
            f"Question: {question}\n\n"
            "Refer to documents by their [n] numbers. If the knowledge base has no relevant "
            "information, say so honestly."
        )

    def _mock_responses(self, question: str, context: Sequence[Document]) -> list[str]:
        """Candidate demo answers chosen by the intent of the question."""
        q = question.lower()
        first = context[0] if context else None

        if _has_intent(q, ("what", "explain", "introduce"), ("什麼", "介紹")):
            category = first.category.value if first else "technology"
            return [
                f"According to the knowledge base, this is a {category} topic. It covers "
                f"core concepts, implementation approaches and best practices.",
                "Let me explain: this topic involves several key ideas, including the "
                "underlying principles, advanced applications and practical techniques. "
                "Starting from the basics is recommended.",
            ]

        if _has_intent(q, ("how",), ("如何", "怎麼")):
            return [
                "Here are the steps:\n1. Understand the basic concepts\n2. Read the related "
                "documents\n3. Build a small example\n4. Explore the advanced features",
                "Have a look at the related documents in the knowledge base, especially those "
                "tagged 'tutorial' and 'hands-on'. They provide detailed step-by-step guidance.",
            ]

        if _has_intent(q, ("compare", "difference", "vs", "versus"), ("比較", "差異")):
            return [
                "The main differences lie in their use cases and technical characteristics. "
                "One fits some situations better, while the other performs better elsewhere.",
                "According to the knowledge base, each has its pros and cons. Consider project "
                "requirements, team experience and long-term maintainability when choosing.",
            ]

        title = first.title if first else "the related documents"
        return [
            f"I found useful information in {len(context)} related documents in the knowledge "
            f"base. See \"{title}\" for a more detailed explanation.",
            "Good question! Several documents in the knowledge base cover this topic. Start "
            "with the basic concepts and go deeper step by step.",
            "To sum up: the related documents provide a comprehensive technical guide, "
            "covering theory, implementation examples and advanced techniques.",
        ]

    # ==================== tags ====================

    async def suggest_tags(self, document: Document) -> list[str]:
        """Suggest 3-5 tags, title keywords first, skipping existing tags."""
        if self.demo_mode:
            await self._delay()
            return self._mock_tags(document)

        if self._agent is None:
            return []

        prompt = (
            "Suggest 3-5 tags for the following technical document.\n\n"
            f"Title: {document.title}\n"
            f"Content: {document.content}\n\n"
            "Return only the tags, separated by commas."
        )
        try:
            response = await self._agent.arun(prompt)
        except Exception as e:
            logger.error(f"Failed to suggest tags for {document.id}: {e}")
            return []

        text = response.content or ""
        return [tag.strip() for tag in re.split(r"[,、]", text) if tag.strip()]

    def _mock_tags(self, document: Document) -> list[str]:
        count = self._rng.randint(3, 5)
        taken = {tag.lower() for tag in document.tags}
        tags: list[str] = []

        def add(tag: str) -> None:
            if tag.lower() not in taken and len(tags) < count:
                taken.add(tag.lower())
                tags.append(tag)

        for word in _TAG_WORD_RE.findall(document.title):
            if word.lower() not in _TAG_STOPWORDS and len(word) > 1:
                add(word)
            if len(tags) >= min(3, count):
                break

        pool = list(GENERIC_TAGS)
        self._rng.shuffle(pool)
        for tag in pool:
            add(tag)

        category = document.category.value.lower()
        for tag in (category, "reference", "notes", "further reading"):
            add(tag)

        n = 1
        while len(tags) < 3:
            add(f"{category}-{n}")
            n += 1

        return tags

    @staticmethod
    def _elapsed(start: float) -> int:
        return round((time.perf_counter() - start) * 1000)


# Module-level singleton instance
_ai_service: AIService | None = None


def get_ai_service() -> AIService:
    """Get or create the global AI service.

    Uses singleton pattern so chat history is shared across requests.

    Returns:
        The AIService instance.
    """
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
