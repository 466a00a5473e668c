from dataclasses import asdict
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .canonical import RedirectDecision
from .reconcile_record import CanonicalRecord


class RecordModel(BaseModel):
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
    approvals: List[str] = []
    streams: List[str] = []
    website: Optional[str] = None
    rating: Optional[float] = None
    fees: Any = None
    total_courses: Any = None
    image: Optional[str] = None
    attributes: Dict[str, Any] = {}

    @classmethod
    def from_record(cls, record: CanonicalRecord) -> "RecordModel":
        return cls(**asdict(record))


class RedirectModel(BaseModel):
    required: bool
    location: Optional[str] = None
    absolute_location: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def from_decision(cls, decision: RedirectDecision, base_url: str) -> "RedirectModel":
        if not decision.required:
            return cls(required=False)
        return cls(
            required=True,
            location=decision.location,
            absolute_location=f"{base_url}{decision.location}",
            reason=decision.reason.value if decision.reason else None,
        )


class DetailResponse(BaseModel):
    record: RecordModel
    redirect: RedirectModel


class ProfileModel(BaseModel):
    key: str
    kind: str
    route: str
    collections: List[str]
