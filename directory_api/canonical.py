import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import DEFAULT_RAW_ID_PATTERN
from .extract_entries import split_composite_id
from .profiles import EntityProfile
from .reconcile_record import CanonicalRecord


class RedirectReason(str, Enum):
    RAW_ID = "raw_id"
    NON_CANONICAL = "non_canonical"


@dataclass(frozen=True)
class RedirectDecision:
    required: bool
    location: Optional[str] = None
    reason: Optional[RedirectReason] = None


RENDER = RedirectDecision(required=False)


def looks_like_raw_id(identifier: str, pattern: str = DEFAULT_RAW_ID_PATTERN) -> bool:
    if re.match(pattern, identifier):
        return True

    #composite ids of nested entries count when their base is a raw id
    parts = split_composite_id(identifier)
    return parts is not None and re.match(pattern, parts[0]) is not None


def decide_redirect(requested: str,
                    record: CanonicalRecord,
                    profile: EntityProfile,
                    raw_id_pattern: str = DEFAULT_RAW_ID_PATTERN) -> RedirectDecision:
    """
    Decide whether the requested URL must be rewritten to the canonical slug.

    The target comes from the record already resolved for `requested`, so
    following the redirect resolves straight to the same record and never
    redirects again.
    """
    canonical = record.slug
    if not canonical or requested == canonical:
        return RENDER

    reason = RedirectReason.RAW_ID if looks_like_raw_id(requested, raw_id_pattern) else RedirectReason.NON_CANONICAL
    return RedirectDecision(required=True, location=profile.path_for(canonical), reason=reason)
