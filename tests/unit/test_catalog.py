"""
test_catalog.py
---------------
Unit tests for the bundled question catalog.
"""
import pytest

from cyclejournal.utils.confparse import (
    CatalogDecodeError,
    load_question_catalog,
    parse_question_catalog,
)


def catalog_records(count):
    return {
        "questions": [
            {"id": i, "text": f"Question {i}", "category": "test"}
            for i in range(1, count + 1)
        ]
    }


class TestBundledCatalog:
    def test_thirty_questions(self, catalog):
        assert len(catalog) == 30
        assert [question.id for question in catalog] == list(range(1, 31))

    def test_questions_have_text(self, catalog):
        assert all(question.text.strip() for question in catalog)


class TestParseQuestionCatalog:
    """Test catalog validation."""

    def test_sorted_by_id(self):
        raw = catalog_records(30)
        raw["questions"].reverse()
        questions = parse_question_catalog(raw)
        assert questions[0].id == 1
        assert questions[-1].id == 30

    def test_category_is_optional(self):
        raw = catalog_records(30)
        del raw["questions"][0]["category"]
        assert parse_question_catalog(raw)[0].category == ""

    def test_missing_question(self):
        with pytest.raises(CatalogDecodeError):
            parse_question_catalog(catalog_records(29))

    def test_duplicate_question(self):
        raw = catalog_records(30)
        raw["questions"][1]["id"] = 1
        with pytest.raises(CatalogDecodeError):
            parse_question_catalog(raw)

    def test_no_question_list(self):
        with pytest.raises(CatalogDecodeError):
            parse_question_catalog({"questions": "none"})

    def test_record_without_text(self):
        raw = catalog_records(30)
        del raw["questions"][4]["text"]
        with pytest.raises(KeyError):
            parse_question_catalog(raw)


class TestLoadQuestionCatalog:
    """Test fallback when the catalog file can not be used."""

    def test_missing_file_falls_back_to_last_good_catalog(self, catalog, tmp_path):
        fallback = load_question_catalog(str(tmp_path / "missing.toml"))
        assert fallback == catalog

    def test_broken_file_falls_back_to_last_good_catalog(self, catalog, tmp_path):
        broken = tmp_path / "questions.toml"
        broken.write_text("[[questions]]\nid = 1\ntext = ")
        assert load_question_catalog(str(broken)) == catalog

    def test_incomplete_file_falls_back_to_last_good_catalog(self, catalog, tmp_path):
        incomplete = tmp_path / "questions.toml"
        incomplete.write_text('[[questions]]\nid = 1\ntext = "Only one"\n')
        assert load_question_catalog(str(incomplete)) == catalog
