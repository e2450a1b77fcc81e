"""MongoDB-backed article store (pymongo async API)."""

import logging
from typing import Any

import pymongo
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from newsroom.services.article_store import (
    DEFAULT_SORT,
    ArticleStore,
    Document,
    Filter,
)
from newsroom.services.errors import DuplicateSlugLanguage

logger = logging.getLogger(__name__)

# (keys, options), created on startup when missing
INDEX_SPECS: list[tuple[list[tuple[str, int]], dict[str, Any]]] = [
    ([("slug", 1), ("language", 1)], {"unique": True}),
    ([("language", 1), ("status", 1)], {}),
    ([("language", 1), ("is_featured", 1)], {}),
    ([("language", 1), ("is_latest", 1), ("created_at", -1)], {}),
    ([("categories", 1), ("language", 1)], {}),
    ([("series.id", 1), ("language", 1)], {}),
    ([("translations.article_id", 1)], {}),
    ([("slug", 1), ("dual_language.en.status", 1)], {}),
    ([("slug", 1), ("dual_language.ar.status", 1)], {}),
    ([("dual_language_author.en", 1)], {}),
    ([("dual_language_author.ar", 1)], {}),
    ([("dual_language_title.en", 1)], {}),
    ([("dual_language_title.ar", 1)], {}),
]


def _prune(value: Any) -> Any:
    """Drop None values recursively so absent fields stay absent in BSON."""
    if isinstance(value, dict):
        return {k: _prune(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_prune(v) for v in value]
    return value


def _to_mongo(doc: Document) -> Document:
    doc = _prune(doc)
    if "id" in doc:
        doc["_id"] = doc.pop("id")
    return doc


def _from_mongo(doc: Document | None) -> Document | None:
    if doc is None:
        return None
    doc["id"] = str(doc.pop("_id"))
    return doc


def _to_mongo_filter(filter: Filter) -> Filter:
    return {("_id" if k == "id" else k): v for k, v in filter.items()}


class MongoArticleStore(ArticleStore):
    """Article store on a MongoDB collection.

    ``(slug, language)`` uniqueness is enforced by a unique index, which also
    makes ``upsert`` safe under concurrent callers.
    """

    def __init__(self, uri: str, database: str, collection: str) -> None:
        self._client: AsyncMongoClient = AsyncMongoClient(uri, tz_aware=True)
        self._collection = self._client[database][collection]

    async def find_by_id(self, article_id: str) -> Document | None:
        return _from_mongo(await self._collection.find_one({"_id": article_id}))

    async def find_one(self, filter: Filter) -> Document | None:
        doc = await self._collection.find_one(_to_mongo_filter(filter))
        return _from_mongo(doc)

    async def find(
        self,
        filter: Filter,
        sort: tuple[str, int] = DEFAULT_SORT,
        skip: int = 0,
        limit: int = 0,
    ) -> list[Document]:
        key, direction = sort
        cursor = self._collection.find(_to_mongo_filter(filter)).sort(
            key, pymongo.DESCENDING if direction < 0 else pymongo.ASCENDING
        )
        if skip > 0:
            cursor = cursor.skip(skip)
        if limit > 0:
            cursor = cursor.limit(limit)
        return [_from_mongo(doc) async for doc in cursor]

    async def count(self, filter: Filter) -> int:
        return await self._collection.count_documents(_to_mongo_filter(filter))

    async def insert(self, doc: Document) -> Document:
        mongo_doc = _to_mongo(doc)
        try:
            await self._collection.insert_one(mongo_doc)
        except DuplicateKeyError:
            raise DuplicateSlugLanguage(doc.get("slug", ""), doc.get("language", ""))
        return _from_mongo(mongo_doc)

    async def replace(self, doc: Document) -> Document:
        mongo_doc = _to_mongo(doc)
        try:
            result = await self._collection.replace_one(
                {"_id": mongo_doc["_id"]}, mongo_doc
            )
        except DuplicateKeyError:
            raise DuplicateSlugLanguage(doc.get("slug", ""), doc.get("language", ""))
        if result.matched_count == 0:
            raise KeyError(doc["id"])
        return _from_mongo(mongo_doc)

    async def upsert(
        self, filter: Filter, fields: Document, on_insert: Document
    ) -> Document:
        to_set = _to_mongo({k: v for k, v in fields.items() if v is not None})
        to_unset = {k: "" for k, v in fields.items() if v is None}
        update: dict[str, Any] = {
            "$set": to_set,
            "$setOnInsert": _to_mongo(on_insert),
        }
        if to_unset:
            update["$unset"] = to_unset
        try:
            doc = await self._find_one_and_upsert(filter, update)
        except DuplicateKeyError:
            # A concurrent upsert inserted first; this attempt now matches it.
            doc = await self._find_one_and_upsert(filter, update)
        return _from_mongo(doc)

    async def _find_one_and_upsert(
        self, filter: Filter, update: dict[str, Any]
    ) -> Document:
        return await self._collection.find_one_and_update(
            _to_mongo_filter(filter),
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, article_id: str) -> Document | None:
        doc = await self._collection.find_one_and_delete({"_id": article_id})
        return _from_mongo(doc)

    async def ensure_indexes(self) -> None:
        existing = {
            tuple(dict(idx["key"]).items())
            async for idx in await self._collection.list_indexes()
        }
        created = 0
        for keys, options in INDEX_SPECS:
            if tuple(keys) not in existing:
                await self._collection.create_index(keys, **options)
                created += 1
        if created:
            logger.info("Created %d article indexes", created)

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False

    async def close(self) -> None:
        await self._client.close()
