from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .extract_entries import Candidate
from .field_aliases import DEFAULT_TABLE, ResolutionTable
from .profiles import EntityProfile
from .reconcile_fields import (
    as_text,
    coerce_rating,
    combine_approvals,
    combine_streams,
    first_website,
    normalise_country,
    resolve_field,
)
from .slugs import entity_slug, explicit_slug


@dataclass(frozen=True)
class CanonicalRecord:
    """Flattened, reconciled view of one resolved candidate. Never persisted."""

    id: str
    source_id: str
    source_collection: str
    kind: str
    slug: str
    index: Optional[int] = None
    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None
    approvals: Tuple[str, ...] = ()
    streams: Tuple[str, ...] = ()
    website: Optional[str] = None
    rating: Optional[float] = None
    fees: Any = None
    total_courses: Any = None
    image: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)


def merged_attributes(candidate: Candidate) -> Dict[str, Any]:
    #entry values win over the document they are nested in
    if not candidate.nested:
        return dict(candidate.attributes)
    merged = dict(candidate.parent)
    merged.update(candidate.attributes)
    return merged


def candidate_name(candidate: Candidate,
                   profile: EntityProfile,
                   table: ResolutionTable = DEFAULT_TABLE) -> Optional[str]:
    keys = profile.name_keys or table.keys_for("name")
    name = resolve_field(candidate.attributes, None, keys)
    if name is None and profile.nested:
        #nested entries without a name inherit the owning institute's
        name = resolve_field(candidate.parent, None, table.keys_for("parent_name"))
    return as_text(name)


def _location(candidate: Candidate, attribute: str, table: ResolutionTable) -> Optional[str]:
    return as_text(resolve_field(candidate.attributes, candidate.parent, table.keys_for(attribute)))


def candidate_slug(candidate: Candidate,
                   profile: EntityProfile,
                   table: ResolutionTable = DEFAULT_TABLE) -> str:
    """Explicit slug of the candidate itself, else the slug generated for its kind."""
    stored = explicit_slug(candidate.attributes)
    if stored:
        return stored

    bag = merged_attributes(candidate)
    bag.pop("slug", None)
    bag["id"] = candidate.candidate_id

    if profile.kind == "college":
        bag["name"] = candidate_name(candidate, profile, table)
        bag["city"] = _location(candidate, "city", table)
        bag["state"] = _location(candidate, "state", table)

    return entity_slug(profile.kind, bag)


def build_record(candidate: Candidate,
                 profile: EntityProfile,
                 table: ResolutionTable = DEFAULT_TABLE) -> CanonicalRecord:
    entry, parent = candidate.attributes, candidate.parent

    country = as_text(resolve_field(entry, parent, table.keys_for("country")))
    if profile.location_defaults or country:
        country = normalise_country(country, table)

    return CanonicalRecord(
        id=candidate.candidate_id,
        source_id=candidate.source_id,
        source_collection=candidate.source_collection,
        kind=profile.kind,
        slug=candidate_slug(candidate, profile, table),
        index=candidate.index,
        name=candidate_name(candidate, profile, table),
        city=_location(candidate, "city", table),
        state=_location(candidate, "state", table),
        country=country,
        address=_location(candidate, "address", table),
        approvals=tuple(combine_approvals(entry, parent, table)),
        streams=tuple(combine_streams(entry, parent, table)),
        website=first_website(resolve_field(entry, parent, table.keys_for("website"))),
        rating=coerce_rating(resolve_field(entry, parent, table.keys_for("rating"))),
        fees=resolve_field(entry, parent, table.keys_for("fees")),
        total_courses=resolve_field(entry, parent, table.keys_for("total_courses")),
        image=as_text(resolve_field(entry, parent, table.keys_for("image"))),
        attributes=merged_attributes(candidate),
    )
