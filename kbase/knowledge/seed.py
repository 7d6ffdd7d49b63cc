"""Seed corpus and query log for a fresh knowledge base."""

import logging
import random
import uuid
from datetime import datetime, timedelta, timezone

from kbase.models.documents import Document, DocumentSource, DocumentStatus, TechnologyCategory
from kbase.models.queries import QueryRecord, QueryType

logger = logging.getLogger(__name__)

SEED_START = datetime(2024, 1, 1, tzinfo=timezone.utc)

# (title, tags, content) per category
DOCUMENT_TEMPLATES: dict[TechnologyCategory, list[tuple[str, list[str], str]]] = {
    TechnologyCategory.GOLANG: [
        (
            "Go Basics: Variables and Data Types",
            ["basics", "variables", "types"],
            "Go is a statically typed language. This article covers the basic data types "
            "such as int, string and bool, and how to declare and use variables.",
        ),
        (
            "Goroutines and Concurrent Programming",
            ["concurrency", "goroutine", "advanced"],
            "Goroutines are one of the most powerful features of Go. Learn how to build "
            "efficient concurrent programs with goroutines.",
        ),
        (
            "Go Channels: Communicating Between Goroutines",
            ["channel", "concurrency", "communication"],
            "Channels give goroutines a safe way to communicate. Learn when to use "
            "buffered and unbuffered channels.",
        ),
        (
            "Designing Go Interfaces",
            ["interface", "design patterns", "OOP"],
            "Go interfaces are satisfied implicitly, which keeps code flexible. This "
            "article collects best practices for interface design.",
        ),
        (
            "Error Handling in Go",
            ["error handling", "best practices"],
            "Go uses explicit error values instead of exceptions. Learn how to handle "
            "errors gracefully and wrap them with context.",
        ),
    ],
    TechnologyCategory.RUST: [
        (
            "Understanding Rust Ownership",
            ["ownership", "memory safety", "basics"],
            "Ownership is the core of Rust and guarantees memory safety without a garbage "
            "collector. This article explains ownership, borrowing and lifetimes.",
        ),
        (
            "A Complete Guide to Rust Lifetimes",
            ["lifetimes", "advanced", "borrow checker"],
            "Lifetimes are how the Rust compiler reasons about the validity of references. "
            "Learn to write lifetime annotations correctly.",
        ),
        (
            "Rust Traits: Polymorphism and Abstraction",
            ["trait", "polymorphism", "generics"],
            "Traits resemble interfaces in other languages but are more powerful. See how "
            "traits enable abstraction in Rust code.",
        ),
        (
            "Async/Await in Rust",
            ["async", "asynchronous", "concurrency"],
            "The async/await syntax gives Rust an efficient asynchronous programming model. "
            "This article introduces the Tokio runtime.",
        ),
    ],
    TechnologyCategory.FLUTTER: [
        (
            "Flutter Widget Lifecycle",
            ["widget", "lifecycle", "basics"],
            "Everything in Flutter is a widget. Understanding the lifecycle of StatelessWidget "
            "and StatefulWidget is essential.",
        ),
        (
            "Flutter State Management with Provider",
            ["state management", "provider", "architecture"],
            "Provider is the officially recommended state management approach. Learn how to "
            "build maintainable apps with Provider.",
        ),
        (
            "Flutter Performance Tips",
            ["performance", "optimization", "best practices"],
            "Practical tips for faster Flutter apps, including const constructors and "
            "RepaintBoundary.",
        ),
        (
            "Flutter Routing and Navigation",
            ["routing", "navigation", "navigator"],
            "A tour of Flutter navigation, covering both Navigator 1.0 and Navigator 2.0.",
        ),
    ],
    TechnologyCategory.ANGULAR: [
        (
            "Angular Signals: Reactive State Management",
            ["signals", "v16", "reactive"],
            "Angular Signals, introduced in v16, offer a simpler model for reactive state "
            "management.",
        ),
        (
            "A Complete Guide to Angular Standalone Components",
            ["standalone", "v15", "modules"],
            "Standalone components let you build components without NgModule and simplify "
            "application structure.",
        ),
        (
            "What's New in Angular v20",
            ["v20", "features", "release"],
            "Angular v20 brings better performance, new APIs and an improved developer "
            "experience.",
        ),
        (
            "RxJS Operators in Practice",
            ["rxjs", "operators", "reactive programming"],
            "Mastering RxJS operators is key to Angular development. This article shows the "
            "common operators in real use.",
        ),
        (
            "Angular CDK: The Component Dev Kit",
            ["cdk", "material", "components"],
            "The Angular CDK provides behaviours for high quality components, including drag "
            "and drop and virtual scrolling.",
        ),
    ],
    TechnologyCategory.AI: [
        (
            "Inside the Transformer Architecture",
            ["transformer", "NLP", "deep learning"],
            "The Transformer changed NLP for good. Understand self-attention and positional "
            "encoding.",
        ),
        (
            "Designing a RAG System",
            ["RAG", "LLM", "applications"],
            "Retrieval-augmented generation combines retrieval with a generative model for "
            "more accurate answers. Learn how to build a RAG system.",
        ),
        (
            "Prompt Engineering Best Practices",
            ["prompt", "LLM", "techniques"],
            "Writing effective prompts is the key to using an LLM. This article shares prompt "
            "engineering strategies.",
        ),
        (
            "Choosing a Vector Database",
            ["vector database", "embedding", "RAG"],
            "A comparison of Pinecone, Weaviate and Milvus and the use cases each fits.",
        ),
    ],
    TechnologyCategory.GEMINI: [
        (
            "Gemini API Quick Start",
            ["API", "basics", "getting started"],
            "Google Gemini is a powerful multimodal model. Learn how to use the Gemini API for "
            "text generation and analysis.",
        ),
        (
            "Gemini 1.5 Pro: Long Context",
            ["1.5 pro", "long context", "features"],
            "Gemini 1.5 Pro supports a context window of up to one million tokens, suited to "
            "long documents.",
        ),
        (
            "Gemini Flash: Fast Inference",
            ["flash", "performance", "API"],
            "Gemini Flash is designed for low latency scenarios and offers fast inference.",
        ),
        (
            "Using the Gemini Embedding API",
            ["embedding", "vectorization", "RAG"],
            "Use the Gemini Embedding API to turn text into vectors for semantic search and "
            "similarity matching.",
        ),
    ],
    TechnologyCategory.SYSTEM_DESIGN: [
        (
            "Microservice Design Principles",
            ["microservices", "architecture", "distributed"],
            "Microservices split an application into small independent services. Learn the "
            "design principles and best practices.",
        ),
        (
            "The CAP Theorem and Distributed Systems",
            ["CAP", "distributed", "theory"],
            "The CAP theorem describes three properties of distributed systems: consistency, "
            "availability and partition tolerance.",
        ),
        (
            "API Gateway Design Patterns",
            ["API Gateway", "architecture", "microservices"],
            "An API gateway is the system entry point and handles routing, authentication and "
            "rate limiting.",
        ),
        (
            "A Complete Guide to Caching Strategies",
            ["caching", "performance", "Redis"],
            "A deep dive into caching strategies: cache-aside, write-through and write-behind.",
        ),
        (
            "Comparing Load Balancing Algorithms",
            ["load balancing", "algorithms", "high availability"],
            "Round robin, least connections and IP hash load balancing compared.",
        ),
    ],
    TechnologyCategory.POSTGRES: [
        (
            "PostgreSQL Index Tuning",
            ["indexes", "performance", "optimization"],
            "When to choose B-tree, Hash, GiST or GIN indexes.",
        ),
        (
            "Analyzing PostgreSQL Query Performance",
            ["EXPLAIN", "performance", "query plan"],
            "Use EXPLAIN ANALYZE to read query plans and find performance bottlenecks.",
        ),
        (
            "Working with JSON in PostgreSQL",
            ["JSON", "JSONB", "NoSQL"],
            "The JSONB type lets a relational database handle semi-structured data.",
        ),
        (
            "Vector Search with pgvector",
            ["pgvector", "vector search", "AI"],
            "The pgvector extension adds vector storage and similarity search to PostgreSQL "
            "for AI applications.",
        ),
    ],
}

SOURCE_MAP: dict[TechnologyCategory, list[tuple[DocumentSource, str]]] = {
    TechnologyCategory.GOLANG: [
        (DocumentSource.GITHUB, "https://github.com/golang/go/wiki"),
        (DocumentSource.WEB_ARTICLE, "https://go.dev/blog"),
    ],
    TechnologyCategory.RUST: [
        (DocumentSource.GITHUB, "https://github.com/rust-lang/book"),
        (DocumentSource.WEB_ARTICLE, "https://blog.rust-lang.org"),
    ],
    TechnologyCategory.FLUTTER: [
        (DocumentSource.GITHUB, "https://github.com/flutter/flutter/wiki"),
        (DocumentSource.WEB_ARTICLE, "https://flutter.dev/docs"),
    ],
    TechnologyCategory.ANGULAR: [
        (DocumentSource.GITHUB, "https://github.com/angular/angular"),
        (DocumentSource.WEB_ARTICLE, "https://angular.dev/overview"),
    ],
    TechnologyCategory.AI: [
        (DocumentSource.WEB_ARTICLE, "https://arxiv.org/abs"),
        (DocumentSource.NOTION, "https://notion.so/ai-research"),
    ],
    TechnologyCategory.GEMINI: [
        (DocumentSource.GOOGLE_DOCS, "https://ai.google.dev/gemini-api/docs"),
        (DocumentSource.WEB_ARTICLE, "https://deepmind.google/technologies/gemini"),
    ],
    TechnologyCategory.SYSTEM_DESIGN: [
        (DocumentSource.NOTION, "https://notion.so/system-design"),
        (DocumentSource.WEB_ARTICLE, "https://systemdesign.one"),
    ],
    TechnologyCategory.POSTGRES: [
        (DocumentSource.GITHUB, "https://github.com/postgres/postgres"),
        (DocumentSource.WEB_ARTICLE, "https://postgresql.org/docs"),
    ],
}

SEED_QUERIES = [
    "Golang concurrency",
    "Rust ownership",
    "Flutter state management",
    "Angular Signals",
    "Transformer architecture",
    "Gemini API",
    "microservice design",
    "PostgreSQL optimization",
    "how to use channels",
    "RAG system",
]


def generate_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def make_summary(content: str) -> str:
    return content[:100] + "..."


def _random_date(rng: random.Random, start: datetime, end: datetime) -> datetime:
    return start + (end - start) * rng.random()


def _slug(title: str) -> str:
    return "-".join(title.lower().split())


def generate_documents(count: int = 300, rng: random.Random | None = None) -> list[Document]:
    """Generate a seed corpus by cycling through the category templates.

    Args:
        count: Number of documents to generate.
        rng: Random source, for reproducible corpora.

    Returns:
        Documents in template order (category by category, repeated).
    """
    rng = rng or random.Random()
    now = datetime.now(timezone.utc)
    templates = [
        (category, template)
        for category, entries in DOCUMENT_TEMPLATES.items()
        for template in entries
    ]

    documents: list[Document] = []
    for i in range(count):
        category, (title, tags, content) = templates[i % len(templates)]
        created_at = _random_date(rng, SEED_START, now)
        updated_at = _random_date(rng, created_at, now)
        source, url = rng.choice(SOURCE_MAP[category])

        documents.append(
            Document(
                id=generate_id("doc-"),
                title=title,
                content=content,
                summary=make_summary(content),
                category=category,
                tags=list(tags),
                embedding_id=generate_id("emb-"),
                status=DocumentStatus.ACTIVE,
                created_at=created_at,
                updated_at=updated_at,
                source=source,
                source_url=f"{url}/{_slug(title)}",
                view_count=rng.randrange(1000),
                size=len(content),
                language="en" if rng.random() > 0.7 else "zh-TW",
            )
        )

    logger.info(f"Generated {len(documents)} seed documents")
    return documents


def generate_query_records(count: int = 100, rng: random.Random | None = None) -> list[QueryRecord]:
    """Generate a plausible search history."""
    rng = rng or random.Random()
    now = datetime.now(timezone.utc)

    records = []
    for _ in range(count):
        result_count = rng.randrange(20)
        records.append(
            QueryRecord(
                id=generate_id("q-"),
                query=rng.choice(SEED_QUERIES),
                type=QueryType.SEMANTIC if rng.random() > 0.5 else QueryType.KEYWORD,
                timestamp=_random_date(rng, now - timedelta(days=30), now),
                result_count=result_count,
                latency=float(rng.randrange(50, 550)),
                has_results=result_count > 0,
            )
        )
    records.sort(key=lambda r: r.timestamp, reverse=True)
    return records
