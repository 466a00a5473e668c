import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from .db_connection import Document
from .field_aliases import DEFAULT_TABLE, ResolutionTable


@dataclass(frozen=True)
class Candidate:
    """One addressable entity: a whole document, or one entry nested inside it."""

    source_collection: str
    source_id: str
    attributes: Mapping[str, Any]
    parent: Mapping[str, Any]
    index: Optional[int] = None
    source_key: Optional[str] = None

    @property
    def nested(self) -> bool:
        return self.index is not None

    @property
    def candidate_id(self) -> str:
        #composite ids are what listing pages link to for nested entries
        if self.index is None:
            return self.source_id
        return f"{self.source_id}-{self.index}"


def document_candidate(document: Document) -> Candidate:
    return Candidate(
        source_collection=document.collection,
        source_id=document.id,
        attributes=document.data,
        parent=document.data,
    )


def extract_candidates(document: Document,
                       table: ResolutionTable = DEFAULT_TABLE,
                       nested: bool = True) -> List[Candidate]:
    """
    Enumerate every candidate a document represents.

    Object elements of the table's nested array attributes are flattened in
    attribute order, then array order; the position in that flattened
    sequence is the candidate index. A document with no such entries (or a
    profile that disables nesting) yields itself as the only candidate.
    """
    candidates: List[Candidate] = []

    if nested:
        for key in table.nested_array_keys:
            values = document.data.get(key)
            if not isinstance(values, list):
                continue

            for entry in values:
                if not isinstance(entry, Mapping):
                    continue
                candidates.append(Candidate(
                    source_collection=document.collection,
                    source_id=document.id,
                    attributes=entry,
                    parent=document.data,
                    index=len(candidates),
                    source_key=key,
                ))

    if not candidates:
        candidates.append(document_candidate(document))

    return candidates


def slug_candidates(document: Document,
                    table: ResolutionTable = DEFAULT_TABLE,
                    nested: bool = True) -> List[Candidate]:
    """
    Candidates reachable by slug: the nested entries, then the document itself.

    The document keeps no composite index, and an entry that shares its slug
    still wins. Raw id lookups return whole documents, so their slug must
    resolve too.
    """
    candidates = extract_candidates(document, table, nested=nested)
    if candidates[0].nested:
        candidates.append(document_candidate(document))
    return candidates


def candidate_at(document: Document,
                 index: int,
                 table: ResolutionTable = DEFAULT_TABLE,
                 nested: bool = True) -> Optional[Candidate]:
    if index < 0:
        return None

    candidates = extract_candidates(document, table, nested=nested)
    if index >= len(candidates) or not candidates[index].nested:
        return None
    return candidates[index]


_COMPOSITE_ID = re.compile(r"^(.+)-([0-9]+)$")


def split_composite_id(identifier: str) -> Optional[Tuple[str, int]]:
    """Split "<docId>-<index>" into its parts; None when there is no numeric suffix."""
    match = _COMPOSITE_ID.match(identifier)
    if match is None:
        return None
    return match.group(1), int(match.group(2))
