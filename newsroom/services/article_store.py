"""Article document storage.

``ArticleStore`` is the persistence contract the engine depends on. Documents
are plain dicts keyed by ``id``; fields holding None are treated as absent.
``InMemoryArticleStore`` backs tests and local development, and
``newsroom.services.mongo_store.MongoArticleStore`` backs deployments.

Filters are MongoDB-style: dotted paths, equality, list membership, and
``{"$exists": bool}``.
"""

import asyncio
import copy
import logging
import uuid
from typing import Any

from newsroom.services.errors import DuplicateSlugLanguage

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Filter = dict[str, Any]

DEFAULT_SORT = ("created_at", -1)


class ArticleStore:
    """Async persistence contract for article documents."""

    async def find_by_id(self, article_id: str) -> Document | None:
        raise NotImplementedError

    async def find_one(self, filter: Filter) -> Document | None:
        raise NotImplementedError

    async def find(
        self,
        filter: Filter,
        sort: tuple[str, int] = DEFAULT_SORT,
        skip: int = 0,
        limit: int = 0,
    ) -> list[Document]:
        """Return matching documents, sorted, with skip/limit (0 = no limit)."""
        raise NotImplementedError

    async def count(self, filter: Filter) -> int:
        raise NotImplementedError

    async def insert(self, doc: Document) -> Document:
        """Insert a new document. Raises DuplicateSlugLanguage on collision."""
        raise NotImplementedError

    async def replace(self, doc: Document) -> Document:
        """Replace the stored document with the same id."""
        raise NotImplementedError

    async def upsert(
        self, filter: Filter, fields: Document, on_insert: Document
    ) -> Document:
        """Atomically update the document matching *filter*, or insert one.

        *fields* are set on the match (or the new document); *on_insert*
        fields are only written when a document is created. Returns the
        document as stored after the write.
        """
        raise NotImplementedError

    async def delete(self, article_id: str) -> Document | None:
        """Delete by id, returning the removed document if there was one."""
        raise NotImplementedError

    async def ensure_indexes(self) -> None:
        """Create indexes the engine relies on. No-op where not applicable."""

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        """Release any held connections."""


def _resolve(doc: Document, path: str) -> Any:
    """Walk a dotted *path* through nested dicts, returning None if absent."""
    value: Any = doc
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def matches(doc: Document, filter: Filter) -> bool:
    """Return True when *doc* satisfies every condition in *filter*."""
    for path, cond in filter.items():
        value = _resolve(doc, path)
        if isinstance(cond, dict) and "$exists" in cond:
            if (value is not None) != bool(cond["$exists"]):
                return False
        elif isinstance(value, list) and not isinstance(cond, list):
            if cond not in value:
                return False
        elif value != cond:
            return False
    return True


def _duplicate(doc: Document) -> DuplicateSlugLanguage:
    return DuplicateSlugLanguage(doc.get("slug", ""), doc.get("language", ""))


class InMemoryArticleStore(ArticleStore):
    """Dict-backed store with the same semantics as the MongoDB store.

    A single lock serialises writes so that ``upsert`` and the
    ``(slug, language)`` uniqueness check are atomic.
    """

    def __init__(self) -> None:
        self._docs: dict[str, Document] = {}
        self._lock = asyncio.Lock()

    def _conflict(self, doc: Document) -> Document | None:
        """Return another document sharing doc's (slug, language), if any."""
        for other in self._docs.values():
            if (
                other["id"] != doc.get("id")
                and other.get("slug") == doc.get("slug")
                and other.get("language") == doc.get("language")
            ):
                return other
        return None

    async def find_by_id(self, article_id: str) -> Document | None:
        doc = self._docs.get(article_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_one(self, filter: Filter) -> Document | None:
        for doc in self._docs.values():
            if matches(doc, filter):
                return copy.deepcopy(doc)
        return None

    async def find(
        self,
        filter: Filter,
        sort: tuple[str, int] = DEFAULT_SORT,
        skip: int = 0,
        limit: int = 0,
    ) -> list[Document]:
        key, direction = sort
        found = [doc for doc in self._docs.values() if matches(doc, filter)]
        # Documents missing the sort key go last in either direction
        present = [d for d in found if _resolve(d, key) is not None]
        missing = [d for d in found if _resolve(d, key) is None]
        present.sort(key=lambda d: _resolve(d, key), reverse=direction < 0)
        ordered = present + missing
        if skip > 0:
            ordered = ordered[skip:]
        if limit > 0:
            ordered = ordered[:limit]
        return [copy.deepcopy(d) for d in ordered]

    async def count(self, filter: Filter) -> int:
        return sum(1 for doc in self._docs.values() if matches(doc, filter))

    async def insert(self, doc: Document) -> Document:
        async with self._lock:
            doc = copy.deepcopy(doc)
            doc.setdefault("id", uuid.uuid4().hex)
            if self._conflict(doc) is not None:
                raise _duplicate(doc)
            self._docs[doc["id"]] = doc
            return copy.deepcopy(doc)

    async def replace(self, doc: Document) -> Document:
        async with self._lock:
            if doc["id"] not in self._docs:
                raise KeyError(doc["id"])
            if self._conflict(doc) is not None:
                raise _duplicate(doc)
            self._docs[doc["id"]] = copy.deepcopy(doc)
            return copy.deepcopy(doc)

    async def upsert(
        self, filter: Filter, fields: Document, on_insert: Document
    ) -> Document:
        async with self._lock:
            for doc in self._docs.values():
                if matches(doc, filter):
                    doc.update(copy.deepcopy(fields))
                    return copy.deepcopy(doc)

            doc = {**copy.deepcopy(on_insert), **filter, **copy.deepcopy(fields)}
            doc.setdefault("id", uuid.uuid4().hex)
            self._docs[doc["id"]] = doc
            logger.debug("Upsert inserted %s for %s", doc["id"], filter)
            return copy.deepcopy(doc)

    async def delete(self, article_id: str) -> Document | None:
        async with self._lock:
            return self._docs.pop(article_id, None)
