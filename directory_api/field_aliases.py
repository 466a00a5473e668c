from dataclasses import dataclass, field
from typing import Dict, Tuple

#bump when any alias list below changes
TABLE_VERSION = "2025.12.1"

#array attributes that may hold college-like entries, checked in this order
NESTED_ARRAY_KEYS: Tuple[str, ...] = (
    "topColleges",
    "relatedColleges",
    "colleges",
    "collegeList",
    "popularColleges",
    "featuredColleges",
    "campuses",
    "locations",
    "centers",
    "centres",
)

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    # identity
    "name": ("name", "collegeName", "college", "institute", "university", "title"),
    "parent_name": (
        "instituteName",
        "universityName",
        "collegeName",
        "courseProvider",
        "courseName",
    ),

    # location
    "city": ("city", "cityName"),
    "state": ("state", "stateName", "province"),
    "country": ("country", "countryName", "nation"),
    "address": ("address", "addressLine", "streetAddress", "fullAddress", "location"),

    # details
    "rating": ("rating", "overallRating", "score"),
    "total_courses": ("totalCourses", "noOfCourses", "coursesCount", "programCount", "count"),
    "fees": (
        "totalFees",
        "fee",
        "fees",
        "package",
        "avgFee",
        "averageFee",
        "tuition",
        "courseFee",
    ),
    "website": ("website", "url", "link", "applyUrl"),
    "image": ("image", "logo", "banner", "thumbnail"),
}

APPROVAL_KEYS: Tuple[str, ...] = ("approvals", "approval")
ENTRY_STREAM_KEYS: Tuple[str, ...] = ("streams", "courses", "disciplines", "specialisations")
PARENT_STREAM_KEYS: Tuple[str, ...] = ("streams", "courses")

COUNTRY_ALIASES: Dict[str, str] = {
    "in": "India",
    "ind": "India",
    "indian": "India",
}


@dataclass(frozen=True)
class ResolutionTable:
    """Alternate field names consulted by the extractor and the reconciler.

    Documents in the store never agreed on a schema, so every attribute the
    canonical record exposes is looked up through an ordered alias list.
    Tests build their own tables to exercise new aliases directly.
    """

    version: str = TABLE_VERSION
    nested_array_keys: Tuple[str, ...] = NESTED_ARRAY_KEYS
    field_aliases: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(FIELD_ALIASES))
    approval_keys: Tuple[str, ...] = APPROVAL_KEYS
    entry_stream_keys: Tuple[str, ...] = ENTRY_STREAM_KEYS
    parent_stream_keys: Tuple[str, ...] = PARENT_STREAM_KEYS
    country_aliases: Dict[str, str] = field(default_factory=lambda: dict(COUNTRY_ALIASES))
    default_country: str = "India"

    def keys_for(self, attribute: str) -> Tuple[str, ...]:
        return self.field_aliases.get(attribute, (attribute,))


DEFAULT_TABLE = ResolutionTable()
