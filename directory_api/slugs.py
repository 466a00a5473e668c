import re
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

COLLEGE_NAME_KEYS = ("name", "collegeName", "instituteName", "universityName")
LOCATION_KEYS = ("city", "state")


def slugify(value: Any) -> str:
    if value is None:
        return ""

    return _NON_ALNUM.sub("-", str(value).strip().lower()).strip("-")


def first_text(attributes: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    """First scalar value under `keys` that is non-blank once stringified."""
    for key in keys:
        value = attributes.get(key)
        if value is None or isinstance(value, (Mapping, list, tuple)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def explicit_slug(attributes: Mapping[str, Any]) -> str:
    value = attributes.get("slug")
    return value.strip() if isinstance(value, str) else ""


def generate_slug(attributes: Mapping[str, Any],
                  name_keys: Sequence[str] = COLLEGE_NAME_KEYS,
                  location_keys: Sequence[str] = LOCATION_KEYS) -> str:
    """
    Derive a URL-safe slug from an entity's name and location.

    The name is mandatory input. The first location attribute present is
    appended so that two campuses sharing a name get different slugs, unless
    the name already ends with that location ("IIT Delhi" + "Delhi").
    Without a name the slugified id is used; with neither the result is "".

    Example:
        >>> generate_slug({"name": "Delta Institute", "city": "Pune"})
        'delta-institute-pune'
    """
    name_slug = slugify(first_text(attributes, name_keys))
    if not name_slug:
        return slugify(attributes.get("id"))

    for key in location_keys:
        location_slug = slugify(first_text(attributes, (key,)))
        if not location_slug:
            continue
        if name_slug == location_slug or name_slug.endswith(f"-{location_slug}"):
            return name_slug
        return f"{name_slug}-{location_slug}"

    return name_slug


def _titled_slug(*keys: str) -> Callable[[Mapping[str, Any]], str]:
    def generator(attributes: Mapping[str, Any]) -> str:
        return slugify(first_text(attributes, keys))
    return generator


def _posting_slug(suffix: str) -> Callable[[Mapping[str, Any]], str]:
    #jobs and internships: "<title> <company>", or "<company> job" when untitled
    def generator(attributes: Mapping[str, Any]) -> str:
        title = first_text(attributes, ("title", "name", "position"))
        company = first_text(attributes, ("company",))
        if title and company:
            return slugify(f"{title} {company}")
        if title:
            return slugify(title)
        if company:
            return slugify(f"{company} {suffix}")
        return ""
    return generator


SLUG_GENERATORS: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "college": generate_slug,
    "course": _titled_slug("courseName", "name", "title"),
    "exam": _titled_slug("name", "examName", "title", "shortName"),
    "scholarship": _titled_slug("title", "name"),
    "article": _titled_slug("title", "name", "heading"),
    "news": _titled_slug("title", "name", "heading"),
    "job": _posting_slug("job"),
    "internship": _posting_slug("internship"),
}


def entity_slug(kind: str, attributes: Mapping[str, Any]) -> str:
    """Canonical slug: the stored `slug` when set, else one generated for `kind`."""
    stored = explicit_slug(attributes)
    if stored:
        return stored

    generator = SLUG_GENERATORS.get(kind, generate_slug)
    return generator(attributes) or slugify(attributes.get("id"))
