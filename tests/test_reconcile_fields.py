from directory_api.reconcile_fields import (
    coerce_rating,
    combine_approvals,
    combine_streams,
    first_website,
    gather_strings,
    normalise_country,
    resolve_field,
)


#resolve_field
def test_entry_value_beats_parent_value():
    assert resolve_field({"city": "Pune"}, {"city": "Mumbai"}, ["city"]) == "Pune"


def test_parent_value_used_when_entry_missing():
    assert resolve_field({"name": "Delta"}, {"city": "Mumbai"}, ["city"]) == "Mumbai"


def test_blank_strings_and_none_are_skipped():
    assert resolve_field({"city": ""}, {"city": "Mumbai"}, ["city"]) == "Mumbai"
    assert resolve_field({"city": "   "}, {"city": None}, ["city"]) is None


def test_falsy_non_strings_are_values():
    assert resolve_field({"rating": 0}, {"rating": 4}, ["rating"]) == 0


def test_keys_tried_in_order_across_all_layers():
    entry = {"cityName": "Entry City"}
    parent = {"city": "Parent City"}
    assert resolve_field(entry, parent, ["city", "cityName"]) == "Parent City"


def test_flat_fields_beat_nested_location():
    entry = {"location": {"city": "Nested"}}
    parent = {"city": "Flat"}
    assert resolve_field(entry, parent, ["city"]) == "Flat"


def test_location_then_address_sub_objects():
    assert resolve_field({"location": {"city": "Pune"}}, {}, ["city"]) == "Pune"
    assert resolve_field({}, {"location": {"state": "Goa"}}, ["state"]) == "Goa"
    assert resolve_field({"address": {"city": "Nagpur"}}, {"location": {"city": "Pune"}}, ["city"]) == "Pune"
    assert resolve_field({"address": {"city": "Nagpur"}}, None, ["city"]) == "Nagpur"


def test_scalar_location_is_not_searched():
    assert resolve_field({"location": "Pune"}, None, ["city"]) is None


def test_missing_everywhere():
    assert resolve_field(None, None, ["city"]) is None
    assert resolve_field({}, {}, []) is None


#gather_strings
def test_gather_strings_flattens_and_splits():
    assert gather_strings("UGC, AICTE / NBA | NAAC") == ["UGC", "AICTE", "NBA", "NAAC"]
    assert gather_strings({"a": "x|y", "b": [1, None, ""]}) == ["x", "y", "1"]
    assert gather_strings(None) == []
    assert gather_strings(False) == []


#combinators
def test_combine_approvals_union_in_first_seen_order():
    entry = {"approvals": ["UGC", "AICTE"]}
    parent = {"approval": "AICTE, NAAC", "approvals": ["UGC"]}
    assert combine_approvals(entry, parent) == ["UGC", "AICTE", "NAAC"]


def test_combine_approvals_keeps_list_items_whole():
    assert combine_approvals({"approvals": ["AICTE/NBA"]}, {}) == ["AICTE/NBA"]


def test_combine_approvals_empty():
    assert combine_approvals({}, None) == []


def test_combine_streams_union_in_first_seen_order():
    entry = {"streams": ["Engineering"], "courses": "MBA / Engineering", "disciplines": ["Law"]}
    parent = {"courses": ["MBA", "Design"], "specialisations": ["Ignored on parent"]}
    assert combine_streams(entry, parent) == ["Engineering", "MBA", "Law", "Design"]


def test_combinators_never_duplicate():
    entry = {"streams": ["Arts", "Arts"], "approvals": ["UGC", "UGC"]}
    approvals = combine_approvals(entry, entry)
    streams = combine_streams(entry, entry)
    assert approvals == ["UGC"]
    assert streams == ["Arts"]


#value helpers
def test_normalise_country():
    assert normalise_country("IND") == "India"
    assert normalise_country(" in ") == "India"
    assert normalise_country(None) == "India"
    assert normalise_country("Nepal") == "Nepal"


def test_coerce_rating():
    assert coerce_rating("4.5") == 4.5
    assert coerce_rating(4) == 4.0
    assert coerce_rating("n/a") is None
    assert coerce_rating(True) is None
    assert coerce_rating(None) is None


def test_first_website():
    assert first_website([" ", "https://delta.edu"]) == "https://delta.edu"
    assert first_website(" https://delta.edu ") == "https://delta.edu"
    assert first_website([]) is None
