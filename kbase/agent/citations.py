"""Source citations for assistant answers.

Ranks the context documents against the question with fixed weights
(title hit 3, tag hit 2, content hit 1, category hit 1 per question
token), keeps the best few, and quotes the sentence around the first
match as the snippet.
"""

import re
from collections.abc import Sequence

from kbase.models.chat import Citation
from kbase.models.documents import Document

MAX_CITATIONS = 3
MAX_SNIPPET_LENGTH = 120

_TOKEN_RE = re.compile(r"\w+")
_SENTENCE_END_RE = re.compile(r"[.!?。！？\n]")

STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "can", "do", "does", "for", "from",
        "how", "i", "in", "is", "it", "me", "my", "of", "on", "or", "the", "to", "use",
        "what", "when", "which", "who", "why", "with", "you", "your",
    }
)  # fmt: skip


def question_tokens(question: str) -> list[str]:
    """Distinct lower-cased question words, stopwords and 1-char words removed."""
    seen: dict[str, None] = {}
    for token in _TOKEN_RE.findall(question.lower()):
        if len(token) > 1 and token not in STOPWORDS:
            seen.setdefault(token, None)
    return list(seen)


def score_document(doc: Document, tokens: Sequence[str]) -> int:
    title = doc.title.lower()
    content = doc.content.lower()
    tags = [tag.lower() for tag in doc.tags]
    category = doc.category.value.lower()

    score = 0
    for token in tokens:
        if token in title:
            score += 3
        if any(token in tag for tag in tags):
            score += 2
        if token in content:
            score += 1
        if token in category:
            score += 1
    return score


def extract_snippet(content: str, tokens: Sequence[str]) -> tuple[str, int, int]:
    """Quote the sentence containing the first matched token.

    Returns:
        (snippet, start, end) with content[start:end] == snippet. Falls back
        to the head of the content when no token occurs in it.
    """
    lowered = content.lower()
    positions = [pos for pos in (lowered.find(t) for t in tokens) if pos >= 0]

    if not positions:
        start, end = 0, min(len(content), MAX_SNIPPET_LENGTH)
    else:
        hit = min(positions)
        start = 0
        for match in _SENTENCE_END_RE.finditer(content, 0, hit):
            start = match.end()
        next_end = _SENTENCE_END_RE.search(content, hit)
        end = next_end.end() if next_end else len(content)
        if end - start > MAX_SNIPPET_LENGTH:
            start = max(start, hit - MAX_SNIPPET_LENGTH // 3)
            end = min(len(content), start + MAX_SNIPPET_LENGTH)

    while start < end and content[start].isspace():
        start += 1
    while end > start and content[end - 1].isspace():
        end -= 1
    return content[start:end], start, end


def build_citations(
    question: str,
    context: Sequence[Document],
    limit: int = MAX_CITATIONS,
) -> list[Citation]:
    """Cite the context documents that best match the question.

    At least one citation is produced whenever context is non-empty. The
    best document gets relevance 1.0; the others scale down towards 0.5.

    Args:
        question: User question.
        context: Candidate documents, in preference order.
        limit: Maximum number of citations.

    Returns:
        Citations numbered from 1.
    """
    if not context:
        return []

    tokens = question_tokens(question)
    scored = [(score_document(doc, tokens), doc) for doc in context]
    ranked = sorted((item for item in scored if item[0] > 0), key=lambda item: item[0], reverse=True)
    if not ranked:
        ranked = [scored[0]]
    ranked = ranked[:limit]

    max_score = ranked[0][0]
    citations = []
    for index, (score, doc) in enumerate(ranked, start=1):
        relevance = min(1.0, 0.5 + score / (2 * max_score)) if max_score else 0.5
        snippet, start, end = extract_snippet(doc.content, tokens)
        if not snippet:
            snippet, start, end = doc.summary or doc.title, None, None

        citations.append(
            Citation(
                index=index,
                document_id=doc.id,
                document_title=doc.title,
                snippet=snippet,
                start_position=start,
                end_position=end,
                relevance_score=round(relevance, 4),
                category=doc.category.value,
                tags=list(doc.tags),
            )
        )
    return citations


def append_markers(text: str, citations: Sequence[Citation]) -> str:
    """Append [1][2]... markers for the given citations to an answer."""
    if not citations:
        return text
    return f"{text} " + "".join(f"[{c.index}]" for c in citations)
