"""
Composable query steps used to assemble relational views.

Each view is built as filter -> join -> reshape -> project -> sort using
the named steps below instead of opaque aggregation literals. Joins
return lookup maps keyed by ``_id``; ordering is applied explicitly with
``order_by_reference`` so a view never depends on the order the store
happens to return joined documents in.
"""
from typing import Any, Iterable, Optional, Sequence

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection

from app.database.ids import stringify_id

OWNER_PUBLIC_FIELDS = ("_id", "handle", "full_name", "avatar")


def _projection(fields: Optional[Sequence[str]]) -> Optional[dict]:
    if not fields:
        return None
    return {field: 1 for field in fields}


async def match_one(
    collection: AsyncIOMotorCollection,
    criteria: dict,
    fields: Optional[Sequence[str]] = None,
) -> Optional[dict]:
    """Filter step returning the single matching document, or None."""
    return await collection.find_one(criteria, _projection(fields))


async def match_many(
    collection: AsyncIOMotorCollection,
    criteria: dict,
    sort: Optional[list[tuple[str, int]]] = None,
    fields: Optional[Sequence[str]] = None,
    skip: int = 0,
    limit: int = 0,
) -> list[dict]:
    """Filter step returning all matching documents, optionally sorted and paged."""
    cursor = collection.find(criteria, _projection(fields))
    if sort:
        cursor = cursor.sort(sort)
    if skip:
        cursor = cursor.skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    return await cursor.to_list(length=None)


async def join_by_ids(
    collection: AsyncIOMotorCollection,
    ids: Iterable[ObjectId],
    fields: Optional[Sequence[str]] = None,
) -> dict[ObjectId, dict]:
    """
    Join step: fetch every document whose ``_id`` is in ``ids``.

    Returns a lookup map; the store's result order is deliberately discarded.
    """
    unique_ids = list(dict.fromkeys(i for i in ids if i is not None))
    if not unique_ids:
        return {}
    docs = await match_many(collection, {"_id": {"$in": unique_ids}}, fields=fields)
    return {doc["_id"]: doc for doc in docs}


def order_by_reference(
    reference_ids: Sequence[ObjectId],
    docs_by_id: dict[ObjectId, dict],
) -> list[dict]:
    """
    Reorder joined documents to follow ``reference_ids``.

    References with no joined document (e.g. a deleted video) are dropped.
    """
    return [docs_by_id[ref] for ref in reference_ids if ref in docs_by_id]


def project(doc: Optional[dict], fields: Sequence[str]) -> Optional[dict]:
    """Keep only ``fields``, exposing ``_id`` as ``id`` and ObjectIds as strings."""
    if doc is None:
        return None
    projected: dict[str, Any] = {}
    for field in fields:
        if field not in doc:
            continue
        key = "id" if field == "_id" else field
        value = doc[field]
        if isinstance(value, list):
            value = [stringify_id(v) for v in value]
        projected[key] = stringify_id(value)
    return projected


async def embed_owners(
    users: AsyncIOMotorCollection,
    docs: list[dict],
    field: str = "owner",
    owner_fields: Sequence[str] = OWNER_PUBLIC_FIELDS,
) -> list[dict]:
    """
    Join each document's ``field`` reference against users and replace it
    with the public owner projection (None when the owner no longer exists).
    """
    owners = await join_by_ids(
        users,
        (doc.get(field) for doc in docs),
        fields=owner_fields,
    )
    return [
        {**doc, field: project(owners.get(doc.get(field)), owner_fields)}
        for doc in docs
    ]


async def count_related(collection: AsyncIOMotorCollection, criteria: dict) -> int:
    """Compute-size step: number of related documents (0 when none)."""
    return await collection.count_documents(criteria)
