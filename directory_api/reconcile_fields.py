import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .field_aliases import DEFAULT_TABLE, ResolutionTable

_LIST_SEPARATORS = re.compile(r"[,/|]")


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _sub_object(attributes: Optional[Mapping[str, Any]], key: str) -> Optional[Mapping[str, Any]]:
    if attributes is None:
        return None
    value = attributes.get(key)
    return value if isinstance(value, Mapping) else None


def resolve_field(entry: Optional[Mapping[str, Any]],
                  parent: Optional[Mapping[str, Any]],
                  keys: Sequence[str]) -> Any:
    """
    Resolve one attribute through an ordered list of alternate names.

    For every key, in order: the entry, the parent document, the entry's
    `location`, the parent's `location`, the entry's `address`, the parent's
    `address`. The first value that is neither None nor a blank string wins.

    Args:
        entry: Attributes of the candidate itself
        parent: Attributes of the document the candidate was read from
        keys: Alternate field names, most preferred first

    Returns:
        The resolved value, or None when no layer holds one
    """
    layers = (
        entry,
        parent,
        _sub_object(entry, "location"),
        _sub_object(parent, "location"),
        _sub_object(entry, "address"),
        _sub_object(parent, "address"),
    )

    for key in keys:
        for layer in layers:
            if layer is None:
                continue
            value = layer.get(key)
            if _present(value):
                return value

    return None


def gather_strings(value: Any) -> List[str]:
    """Flatten scalars, delimited strings, lists and mappings into trimmed strings."""
    if value is None:
        return []

    if isinstance(value, str):
        return [part.strip() for part in _LIST_SEPARATORS.split(value) if part.strip()]

    if isinstance(value, bool):
        return ["true"] if value else []

    if isinstance(value, (int, float)):
        return [str(value)]

    if isinstance(value, Mapping):
        return [s for item in value.values() for s in gather_strings(item)]

    if isinstance(value, (list, tuple)):
        return [s for item in value for s in gather_strings(item)]

    return []


def _unique(values: Iterable[str]) -> List[str]:
    #dict keeps first-seen order
    return list(dict.fromkeys(v for v in values if v))


def _values_under(attributes: Optional[Mapping[str, Any]], keys: Sequence[str]) -> List[Any]:
    if attributes is None:
        return []
    return [attributes.get(key) for key in keys]


def combine_approvals(entry: Optional[Mapping[str, Any]],
                      parent: Optional[Mapping[str, Any]],
                      table: ResolutionTable = DEFAULT_TABLE) -> List[str]:
    collected: List[str] = []
    raw = _values_under(entry, table.approval_keys) + _values_under(parent, table.approval_keys)

    for item in raw:
        if not item:
            continue
        if isinstance(item, list):
            #list elements are whole approval names, scalars may be delimited
            for value in item:
                if isinstance(value, (Mapping, list)):
                    collected.extend(gather_strings(value))
                elif value is not None:
                    collected.append(str(value).strip())
        else:
            collected.extend(gather_strings(item))

    return _unique(collected)


def combine_streams(entry: Optional[Mapping[str, Any]],
                    parent: Optional[Mapping[str, Any]],
                    table: ResolutionTable = DEFAULT_TABLE) -> List[str]:
    collected: List[str] = []
    raw = _values_under(entry, table.entry_stream_keys) + _values_under(parent, table.parent_stream_keys)

    for item in raw:
        collected.extend(gather_strings(item))

    return _unique(collected)


def as_text(value: Any) -> Optional[str]:
    #structured addresses collapse to a comma separated line
    if value is None:
        return None
    if isinstance(value, (Mapping, list, tuple)):
        text = ", ".join(gather_strings(value))
    else:
        text = str(value).strip()
    return text or None


def normalise_country(value: Any, table: ResolutionTable = DEFAULT_TABLE) -> str:
    text = as_text(value)
    if not text:
        return table.default_country
    return table.country_aliases.get(text.lower(), text)


def coerce_rating(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        rating = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return rating if math.isfinite(rating) else None


def first_website(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        for item in value:
            text = as_text(item)
            if text:
                return text
        return None
    return as_text(value)
