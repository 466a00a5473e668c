import pytest

from scripts.load_documents import documents_from_export


def test_list_export():
    export = {"colleges": [{"id": "abc123", "name": "Delta Institute"}, {"id": 7, "name": "Kappa"}]}
    assert documents_from_export(export) == {
        "colleges": [("abc123", {"name": "Delta Institute"}), ("7", {"name": "Kappa"})],
    }


def test_keyed_export():
    export = {"exams": {"e1": {"examName": "KEAM"}}}
    assert documents_from_export(export) == {"exams": [("e1", {"examName": "KEAM"})]}


def test_bad_exports():
    with pytest.raises(ValueError):
        documents_from_export({"colleges": [{"name": "No Id"}]})
    with pytest.raises(ValueError):
        documents_from_export({"colleges": "not documents"})
