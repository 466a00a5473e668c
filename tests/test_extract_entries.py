from directory_api.db_connection import Document
from directory_api.extract_entries import candidate_at, extract_candidates, slug_candidates, split_composite_id
from directory_api.field_aliases import ResolutionTable


def course_doc() -> Document:
    return Document("courses", "mba01", {
        "courseName": "MBA",
        "topColleges": [
            {"name": "Omega School"},
            "not an entry",
            {"name": "Sigma College"},
        ],
        "campuses": [{"name": "Kappa Campus"}],
    })


def test_plain_document_is_its_own_candidate():
    doc = Document("colleges", "abc123", {"name": "Delta Institute"})
    candidates = extract_candidates(doc)

    assert len(candidates) == 1
    assert not candidates[0].nested
    assert candidates[0].candidate_id == "abc123"
    assert candidates[0].attributes is doc.data


def test_nested_entries_flattened_in_order():
    candidates = extract_candidates(course_doc())

    assert [c.attributes["name"] for c in candidates] == ["Omega School", "Sigma College", "Kappa Campus"]
    assert [c.index for c in candidates] == [0, 1, 2]
    assert [c.source_key for c in candidates] == ["topColleges", "topColleges", "campuses"]
    assert [c.candidate_id for c in candidates] == ["mba01-0", "mba01-1", "mba01-2"]
    assert all(c.source_id == "mba01" and c.source_collection == "courses" for c in candidates)
    assert all(c.parent["courseName"] == "MBA" for c in candidates)


def test_table_order_beats_document_key_order():
    doc = Document("courses", "c1", {
        "campuses": [{"name": "Second"}],
        "topColleges": [{"name": "First"}],
    })
    assert [c.attributes["name"] for c in extract_candidates(doc)] == ["First", "Second"]


def test_arrays_without_objects_are_not_entries():
    doc = Document("courses", "c1", {"name": "BBA", "colleges": ["a", "b"], "locations": "Pune"})
    candidates = extract_candidates(doc)

    assert len(candidates) == 1
    assert not candidates[0].nested


def test_nesting_can_be_disabled():
    candidates = extract_candidates(course_doc(), nested=False)
    assert len(candidates) == 1
    assert candidates[0].candidate_id == "mba01"


def test_custom_table_controls_array_keys():
    table = ResolutionTable(nested_array_keys=("branches",))
    doc = Document("colleges", "x1", {
        "branches": [{"name": "North"}],
        "topColleges": [{"name": "Ignored"}],
    })
    assert [c.attributes["name"] for c in extract_candidates(doc, table)] == ["North"]


def test_candidate_at():
    doc = course_doc()
    assert candidate_at(doc, 1).attributes["name"] == "Sigma College"
    assert candidate_at(doc, 3) is None
    assert candidate_at(doc, -1) is None

    plain = Document("colleges", "abc123", {"name": "Delta Institute"})
    assert candidate_at(plain, 0) is None


def test_split_composite_id():
    assert split_composite_id("mba01-2") == ("mba01", 2)
    assert split_composite_id("a-b-10") == ("a-b", 10)
    assert split_composite_id("mba01") is None
    assert split_composite_id("mba01-") is None
    assert split_composite_id("-3") is None
    assert split_composite_id("delta-institute") is None


def test_slug_candidates_end_with_the_document():
    candidates = slug_candidates(course_doc())

    assert [c.candidate_id for c in candidates] == ["mba01-0", "mba01-1", "mba01-2", "mba01"]
    assert not candidates[-1].nested
    assert candidates[-1].attributes["courseName"] == "MBA"


def test_slug_candidates_of_plain_document():
    doc = Document("colleges", "abc123", {"name": "Delta Institute"})
    assert [c.candidate_id for c in slug_candidates(doc)] == ["abc123"]
    assert [c.candidate_id for c in slug_candidates(course_doc(), nested=False)] == ["mba01"]
