"""Keyword-driven chatbot over users, document metadata and document text.

Search is a case-insensitive substring match, not semantic retrieval.
Document results always pass through the same read predicate as the
document listing, so the chatbot never reveals a document the user
could not open.
"""

import logging
import re
from dataclasses import dataclass, field

import httpx
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from docvault.config import Settings
from docvault.core.exceptions import (
    ChatbotError,
    LLMConnectionError,
    LLMTimeoutError,
    ValidationError,
)
from docvault.db.models import Document, User
from docvault.db.repositories import DocumentRepository, UserRepository
from docvault.services.chatbot_knowledge import (
    DEFAULT_ROLE_DESCRIPTION,
    DOCUMENTS_PROMPT,
    GENERAL_PROMPT,
    PEOPLE_PROMPT,
    ROLE_DESCRIPTIONS,
    help_answer,
)
from docvault.services.query_composer import QueryComposer

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset(
    {
        "who", "is", "what", "where", "when", "how", "the", "a", "an", "and", "or",
        "but", "in", "on", "at", "to", "for", "of", "with", "by", "about", "tell",
        "me", "can", "you", "please", "find", "show", "get",
    }
)  # fmt: skip
MAX_KEYWORDS = 8
USER_RESULT_LIMIT = 10
DOCUMENT_RESULT_LIMIT = 10

AVAILABLE_MODELS = {
    "llama3.2": "Llama 3.2",
    "qwen3": "Qwen 3",
    "gemma2": "Gemma 2",
}

_NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+\b")
_NON_WORD = re.compile(r"[^\w\s]")


def extract_keywords(query: str) -> list[str]:
    """Pull search keywords from a free-text question.

    Capitalized words (likely names) that are not stop words come first,
    followed by lower-cased words longer than two characters that are not
    stop words. Duplicates are dropped case-insensitively and at most
    eight keywords are kept.
    """
    names = [name for name in _NAME_PATTERN.findall(query) if name.lower() not in STOP_WORDS]
    words = [
        word
        for word in _NON_WORD.sub(" ", query.lower()).split()
        if len(word) > 2 and word not in STOP_WORDS
    ]

    keywords: list[str] = []
    seen: set[str] = set()
    for word in names + words:
        key = word.lower()
        if key in seen:
            continue
        seen.add(key)
        keywords.append(word)
        if len(keywords) == MAX_KEYWORDS:
            break
    return keywords


def make_snippet(content: str, keywords: list[str], radius: int = 100) -> str:
    """Excerpt ``radius`` characters around the first keyword match.

    Falls back to the start of the content when no keyword matches.
    """
    if not content:
        return ""
    lowered = content.lower()
    positions = [
        (pos, len(kw)) for kw in keywords if (pos := lowered.find(kw.lower())) >= 0
    ]
    if not positions:
        excerpt = content[: radius * 2]
        return excerpt + ("..." if len(content) > len(excerpt) else "")

    pos, length = min(positions)
    start = max(0, pos - radius)
    end = min(len(content), pos + length + radius)
    snippet = content[start:end].strip()
    if start > 0:
        snippet = "..." + snippet
    if end < len(content):
        snippet += "..."
    return snippet


@dataclass
class ContentHit:
    document: Document
    snippet: str


@dataclass
class SearchResults:
    keywords: list[str]
    users: list[User] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    content_hits: list[ContentHit] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.users or self.documents or self.content_hits)


@dataclass
class ChatbotAnswer:
    response: str
    model: str
    used_llm: bool
    results: SearchResults


class ChatbotService:
    """Answers questions from access-filtered search results."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.users = UserRepository(db)
        self.documents = DocumentRepository(db)
        self.composer = QueryComposer(db)

    @staticmethod
    def list_models() -> list[dict]:
        return [{"id": key, "name": name, "provider": "ollama"} for key, name in AVAILABLE_MODELS.items()]

    # --- Search ---

    def search(self, user: User, query: str) -> SearchResults:
        """Search people, document names and document text for the query keywords."""
        keywords = extract_keywords(query)
        results = SearchResults(keywords=keywords)
        if not keywords:
            return results

        results.users = self.users.search(keywords, limit=USER_RESULT_LIMIT)

        readable = self.composer.readable_documents_clause(user)
        access = [] if readable is None else [readable]
        terms = [f"%{kw.lower()}%" for kw in keywords]

        metadata_match = or_(
            *[func.lower(Document.original_name).like(t) for t in terms],
            *[func.lower(Document.mime_type).like(t) for t in terms],
        )
        results.documents = self.documents.query(
            *access,
            metadata_match,
            order_by=Document.created_at.desc(),
            limit=DOCUMENT_RESULT_LIMIT,
        )

        content_match = or_(*[func.lower(Document.content).like(t) for t in terms])
        hits = self.documents.query(
            *access,
            content_match,
            order_by=Document.created_at.desc(),
            limit=self.settings.chatbot_max_results,
        )
        results.content_hits = [
            ContentHit(doc, make_snippet(doc.content, keywords, self.settings.chatbot_snippet_radius))
            for doc in hits
        ]

        logger.info(
            "chatbot_search",
            extra={
                "user_id": user.id,
                "keywords": keywords,
                "users": len(results.users),
                "documents": len(results.documents),
                "content_hits": len(results.content_hits),
            },
        )
        return results

    # --- Answering ---

    async def answer(self, user: User, message: str, model: str | None = None) -> ChatbotAnswer:
        """Answer a question, using the LLM when enabled and falling back otherwise."""
        message = (message or "").strip()
        if not message:
            raise ValidationError("Message is required")
        model = model or self.settings.chat_model
        if model not in AVAILABLE_MODELS:
            raise ValidationError(
                f"Model not allowed: {model}", context={"allowed": list(AVAILABLE_MODELS)}
            )

        results = self.search(user, message)
        messages = self._build_messages(message, results)

        if self.settings.chatbot_llm_enabled:
            try:
                text = await self._complete(messages, model)
            except ChatbotError as e:
                logger.warning("chatbot_llm_failed", extra={"model": model, "error": str(e)})
            else:
                if results.content_hits:
                    text += self._related_documents(results.content_hits)
                return ChatbotAnswer(text, model, used_llm=True, results=results)

        return ChatbotAnswer(self._fallback(message, results), model, used_llm=False, results=results)

    def _build_messages(self, message: str, results: SearchResults) -> list[dict]:
        if results.is_empty:
            return [
                {"role": "system", "content": GENERAL_PROMPT},
                {"role": "user", "content": message},
            ]

        lines: list[str] = []
        if results.users:
            lines.append("Users found:")
            for u in results.users:
                dept = u.department.display_name if u.department else "Unknown"
                lines.append(f"- {u.name}: {u.role} in {dept} department ({u.email})")
        if results.documents:
            lines.append("Documents found:")
            for doc in results.documents:
                created = doc.created_at.date().isoformat() if doc.created_at else "unknown"
                lines.append(f"- {doc.original_name} ({doc.mime_type}) - Created: {created}")
        if results.content_hits:
            lines.append("Document content found:")
            for hit in results.content_hits:
                lines.append(f"- {hit.document.original_name}: {hit.snippet}")

        prompt = PEOPLE_PROMPT if results.users else DOCUMENTS_PROMPT
        context = "\n".join(lines)
        return [
            {"role": "system", "content": prompt},
            {"role": "user", "content": f"Question: {message}\n\nDatabase information:\n{context}"},
        ]

    async def _complete(self, messages: list[dict], model: str) -> str:
        """Call Ollama's chat endpoint.

        Raises:
            LLMConnectionError: Ollama unreachable or returned an error
            LLMTimeoutError: No response within ``chatbot_timeout_seconds``
        """
        payload = {
            "model": model,
            "messages": messages,
            "stream": False,
            "options": {
                "num_predict": self.settings.chatbot_max_tokens,
                "temperature": self.settings.chatbot_temperature,
            },
        }
        try:
            async with httpx.AsyncClient(timeout=self.settings.chatbot_timeout_seconds) as client:
                response = await client.post(f"{self.settings.ollama_base_url}/api/chat", json=payload)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(f"Ollama timed out after {self.settings.chatbot_timeout_seconds}s") from e
        except httpx.HTTPError as e:
            raise LLMConnectionError(f"Ollama request failed: {e}") from e

        content = response.json().get("message", {}).get("content", "").strip()
        if not content:
            raise LLMConnectionError("Ollama returned an empty response")
        return content

    def _download_url(self, document_id: str) -> str:
        return f"{self.settings.public_base_url.rstrip('/')}/api/documents/{document_id}/download"

    def _related_documents(self, hits: list[ContentHit]) -> str:
        lines = ["", "", "**Related documents:**"]
        for index, hit in enumerate(hits, 1):
            lines.append(f"{index}. [{hit.document.original_name}]({self._download_url(hit.document.id)})")
        return "\n".join(lines)

    def _fallback(self, message: str, results: SearchResults) -> str:
        """Deterministic answer built from the search results or the help topics."""
        if results.users:
            person = results.users[0]
            dept = person.department.display_name if person.department else "system"
            role_text = ROLE_DESCRIPTIONS.get(person.role, DEFAULT_ROLE_DESCRIPTION)
            return (
                f"{person.name} is a {person.role} in the {dept} department. "
                f"{role_text} You can reach them at {person.email}."
            )

        if results.content_hits:
            lines = ["I found relevant documents:", ""]
            for index, hit in enumerate(results.content_hits, 1):
                lines.append(f"{index}. **{hit.document.original_name}**")
                lines.append(f"Content: {hit.snippet}")
                lines.append(f"[Download document]({self._download_url(hit.document.id)})")
                lines.append("")
            return "\n".join(lines).rstrip()

        if results.documents:
            kinds = sorted({doc.mime_type.split("/")[-1] for doc in results.documents})
            recent = ", ".join(doc.original_name for doc in results.documents[:3])
            return (
                f"I found {len(results.documents)} document(s) related to your query. "
                f"These include {', '.join(kinds)} files. Recent documents: {recent}."
            )

        return help_answer(message)
