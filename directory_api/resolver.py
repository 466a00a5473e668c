"""
Identifier resolution.

Turns a URL segment into the one entity it names. Four strategies run in a
fixed order, cheapest and most specific first, and the first hit wins:

1. explicit slug: documents whose stored `slug` equals the identifier
2. generated slug: every candidate's slug (stored or generated) compared
3. raw id: a document fetched by the identifier itself
4. composite id: "<docId>-<index>" naming an entry nested in a document

Each strategy walks the profile's collections in declared order. A store
failure only costs the collection it happened in.
"""

import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, Optional, Tuple

from .db_connection import Document, DocumentStore, StoreError
from .extract_entries import (
    Candidate,
    candidate_at,
    document_candidate,
    slug_candidates,
    split_composite_id,
)
from .field_aliases import DEFAULT_TABLE, ResolutionTable
from .logging_config import get_logger
from .profiles import EntityProfile
from .reconcile_record import CanonicalRecord, build_record, candidate_slug

logger = get_logger(__name__)


class Strategy(str, Enum):
    EXPLICIT_SLUG = "explicit_slug"
    GENERATED_SLUG = "generated_slug"
    RAW_ID = "raw_id"
    COMPOSITE_ID = "composite_id"


@dataclass(frozen=True)
class Resolution:
    candidate: Candidate
    strategy: Strategy


class SlugIndex:
    """Slug to first candidate in scan order, for one collection at one revision."""

    def __init__(self, revision: int, entries: Dict[str, Candidate]):
        self.revision = revision
        self._entries = entries

    @classmethod
    def build(cls,
              documents: Iterable[Document],
              profile: EntityProfile,
              table: ResolutionTable,
              revision: int) -> "SlugIndex":
        entries: Dict[str, Candidate] = {}
        for document in documents:
            for candidate in slug_candidates(document, table, nested=profile.nested):
                slug = candidate_slug(candidate, profile, table)
                #duplicate generated slugs: the earlier candidate keeps it
                if slug and slug not in entries:
                    entries[slug] = candidate
        return cls(revision, entries)

    def lookup(self, slug: str) -> Optional[Candidate]:
        return self._entries.get(slug)

    def __len__(self) -> int:
        return len(self._entries)


IndexKey = Tuple[str, str, str, bool, str]


class SlugIndexCache:
    """
    Slug indexes shared between resolvers, rebuilt when a collection changes.

    Entries are keyed by store identity, collection, entity kind, nesting and
    alias table version, and tagged with the store revision they were built from.
    At most `max_entries` indexes are kept; the least recently used goes first.
    """

    def __init__(self, max_entries: int = 64):
        self.max_entries = max_entries
        self._indexes: "OrderedDict[IndexKey, SlugIndex]" = OrderedDict()

    def get(self, key: IndexKey, revision: int) -> Optional[SlugIndex]:
        index = self._indexes.get(key)
        if index is None or index.revision != revision:
            return None
        self._indexes.move_to_end(key)
        return index

    def put(self, key: IndexKey, index: SlugIndex) -> None:
        self._indexes[key] = index
        self._indexes.move_to_end(key)
        while len(self._indexes) > self.max_entries:
            evicted, _ = self._indexes.popitem(last=False)
            logger.debug(f"Evicted slug index for {evicted[0]}/{evicted[1]}")

    def clear(self) -> None:
        self._indexes.clear()

    def __contains__(self, key: IndexKey) -> bool:
        return key in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)


Lookup = Callable[[str], Awaitable[Optional[Candidate]]]


class Resolver:
    """
    Resolves identifiers for one entity profile against a document store.

    Args:
        store: Document store to read from
        profile: Entity kind, its collections and route
        table: Alias table used for extraction and reconciliation
        use_slug_index: Serve strategy 2 from a cached index instead of
            scanning every collection on every miss
        index_cache: Cache to share indexes across resolvers; a private one
            is created when omitted
    """

    def __init__(self,
                 store: DocumentStore,
                 profile: EntityProfile,
                 table: ResolutionTable = DEFAULT_TABLE,
                 use_slug_index: bool = True,
                 index_cache: Optional[SlugIndexCache] = None):
        self.store = store
        self.profile = profile
        self.table = table
        self.use_slug_index = use_slug_index
        self.index_cache = index_cache if index_cache is not None else SlugIndexCache()

    async def resolve(self, identifier: str) -> Optional[CanonicalRecord]:
        resolution = await self.locate(identifier)
        if resolution is None:
            return None
        return build_record(resolution.candidate, self.profile, self.table)

    async def locate(self, identifier: str) -> Optional[Resolution]:
        if not identifier or not identifier.strip():
            return None

        strategies: Tuple[Tuple[Strategy, Lookup, bool], ...] = (
            (Strategy.EXPLICIT_SLUG, lambda c: self._by_explicit_slug(c, identifier), True),
            #scans are expensive: stop at the first collection that answers
            (Strategy.GENERATED_SLUG, lambda c: self._by_generated_slug(c, identifier), False),
            (Strategy.RAW_ID, lambda c: self._by_raw_id(c, identifier), True),
            (Strategy.COMPOSITE_ID, lambda c: self._by_composite_id(c, identifier), True),
        )

        for strategy, lookup, concurrent in strategies:
            candidate = await self._first_hit(strategy, lookup, concurrent)
            if candidate is not None:
                logger.debug(
                    f"Resolved {self.profile.key} '{identifier}' via {strategy.value} "
                    f"to {candidate.source_collection}/{candidate.candidate_id}"
                )
                return Resolution(candidate, strategy)

        logger.info(f"No {self.profile.key} found for '{identifier}'")
        return None

    async def _first_hit(self, strategy: Strategy, lookup: Lookup, concurrent: bool) -> Optional[Candidate]:
        collections = self.profile.collections

        if concurrent:
            #reads run together but the declared collection order still decides
            results = await asyncio.gather(*(lookup(c) for c in collections), return_exceptions=True)
        else:
            results = []
            for collection in collections:
                try:
                    result = await lookup(collection)
                except StoreError as e:
                    result = e
                results.append(result)
                if result is not None and not isinstance(result, BaseException):
                    break

        for collection, result in zip(collections, results):
            if isinstance(result, StoreError):
                logger.warning(f"{strategy.value} lookup failed in '{collection}', continuing: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            if result is not None:
                return result

        return None

    async def _by_explicit_slug(self, collection: str, identifier: str) -> Optional[Candidate]:
        documents = await self.store.query_equal(collection, "slug", identifier, limit=1)
        return document_candidate(documents[0]) if documents else None

    async def _by_generated_slug(self, collection: str, identifier: str) -> Optional[Candidate]:
        if self.use_slug_index:
            index = await self._slug_index(collection)
            return index.lookup(identifier)

        for document in await self.store.scan(collection):
            for candidate in slug_candidates(document, self.table, nested=self.profile.nested):
                if candidate_slug(candidate, self.profile, self.table) == identifier:
                    return candidate
        return None

    async def _slug_index(self, collection: str) -> SlugIndex:
        key: IndexKey = (
            self.store.identity,
            collection,
            self.profile.kind,
            self.profile.nested,
            self.table.version,
        )
        #read the revision before scanning so a concurrent write can only make the index look stale
        revision = await self.store.revision(collection)

        index = self.index_cache.get(key, revision)
        if index is None:
            documents = await self.store.scan(collection)
            index = SlugIndex.build(documents, self.profile, self.table, revision)
            self.index_cache.put(key, index)
            logger.debug(f"Built slug index for '{collection}' at revision {revision}: {len(index)} slugs")
        return index

    async def _by_raw_id(self, collection: str, identifier: str) -> Optional[Candidate]:
        document = await self.store.get(collection, identifier)
        return document_candidate(document) if document is not None else None

    async def _by_composite_id(self, collection: str, identifier: str) -> Optional[Candidate]:
        parts = split_composite_id(identifier)
        if parts is None:
            return None

        base_id, index = parts
        document = await self.store.get(collection, base_id)
        if document is None:
            return None

        candidate = candidate_at(document, index, self.table, nested=self.profile.nested)
        if candidate is None:
            #out of range: the id may have carried its own "-<digits>" suffix
            logger.debug(f"Entry {index} not in {collection}/{base_id}, using the document itself")
            return document_candidate(document)
        return candidate
