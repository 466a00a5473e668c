from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class EntityProfile:
    """Where an entity kind lives and how its detail route is addressed."""

    key: str
    kind: str
    route_prefix: str
    collections: Tuple[str, ...]
    #empty: resolve names through the alias table
    name_keys: Tuple[str, ...]
    nested: bool = False
    location_defaults: bool = False

    def path_for(self, slug: str) -> str:
        return f"{self.route_prefix}/{slug}"


#collection order matters: the first collection to answer wins
PROFILES: Dict[str, EntityProfile] = {
    "college": EntityProfile(
        key="college",
        kind="college",
        route_prefix="/colleges",
        collections=("colleges", "courses"),
        name_keys=(),
        nested=True,
        location_defaults=True,
    ),
    "course-college": EntityProfile(
        key="course-college",
        kind="college",
        route_prefix="/course/college",
        collections=("colleges", "courses"),
        name_keys=(),
        nested=True,
        location_defaults=True,
    ),
    "course": EntityProfile(
        key="course",
        kind="course",
        route_prefix="/course",
        collections=("courses",),
        name_keys=("courseName", "name", "title"),
    ),
    "exam": EntityProfile(
        key="exam",
        kind="exam",
        route_prefix="/exam",
        collections=("exams", "keamExams"),
        name_keys=("name", "examName", "title", "shortName"),
    ),
    "job": EntityProfile(
        key="job",
        kind="job",
        route_prefix="/job",
        collections=("jobs", "job"),
        name_keys=("title", "name", "position"),
    ),
    "scholarship": EntityProfile(
        key="scholarship",
        kind="scholarship",
        route_prefix="/scholarship",
        collections=("scholarships", "scholarship"),
        name_keys=("title", "name"),
    ),
    "article": EntityProfile(
        key="article",
        kind="article",
        route_prefix="/articles",
        collections=("articles",),
        name_keys=("title", "name", "heading"),
    ),
    "news": EntityProfile(
        key="news",
        kind="news",
        route_prefix="/news",
        collections=("news",),
        name_keys=("title", "name", "heading"),
    ),
}


def get_profile(key: str) -> EntityProfile:
    try:
        return PROFILES[key]
    except KeyError:
        raise ValueError(f"Unknown entity profile: {key!r}") from None


def all_profiles() -> List[EntityProfile]:
    return list(PROFILES.values())
