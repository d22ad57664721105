"""Tests for StructureRepository."""
import pytest

from outline_api.repositories.structure import StructureRepository


def _sql(cur):
    return " ".join(cur.execute.call_args[0][0].split())


def _params(cur):
    return cur.execute.call_args[0][1]


class TestColumns:

    def test_list_columns(self, cur):
        cur.fetchall.return_value = [{"id": "col-1"}]

        result = StructureRepository.list_columns(cur, "p-1")

        assert result == [{"id": "col-1"}]
        assert "FROM passage_column WHERE passage_id = %s" in _sql(cur)
        assert _params(cur) == ("p-1",)

    def test_create_column_generates_id(self, cur):
        cur.fetchone.return_value = {"id": "generated"}

        result = StructureRepository.create_column(cur, "p-1", "JN-003-017-001")

        assert result["id"] == "generated"
        assert "INSERT INTO passage_column" in _sql(cur)
        new_id, passage_id, word_id = _params(cur)
        assert len(new_id) == 36
        assert (passage_id, word_id) == ("p-1", "JN-003-017-001")

    def test_get_column_owner_id(self, cur):
        cur.fetchone.return_value = {"column_id": "col-1", "passage_id": "p-1", "user_id": 3}

        result = StructureRepository.get_column_owner_id(cur, "col-1")

        assert result["user_id"] == 3
        assert "JOIN study s ON s.id = p.study_id" in _sql(cur)


class TestSections:

    def test_create_section_with_color(self, cur):
        cur.fetchone.return_value = {"id": "sec-1", "color": "pink"}

        StructureRepository.create_section(cur, "col-1", "JN-003-017-001", "pink")

        assert _params(cur)[1:] == ("col-1", "JN-003-017-001", "pink")

    def test_transfer_sections(self, cur):
        cur.rowcount = 2

        moved = StructureRepository.transfer_sections(cur, ["sec-2", "sec-3"], "col-2")

        assert moved == 2
        assert "SET passage_column_id = %s" in _sql(cur)
        assert "WHERE id = ANY(%s)" in _sql(cur)
        assert _params(cur) == ("col-2", ["sec-2", "sec-3"])

    def test_transfer_nothing_skips_query(self, cur):
        assert StructureRepository.transfer_sections(cur, [], "col-2") == 0
        cur.execute.assert_not_called()

    def test_update_column_color(self, cur):
        cur.rowcount = 3

        updated = StructureRepository.update_column_color(cur, "col-1", "green")

        assert updated == 3
        assert "UPDATE passage_section SET color = %s" in _sql(cur)
        assert _params(cur) == ("green", "col-1")


class TestSegments:

    def test_list_segments(self, cur):
        cur.fetchall.return_value = []

        assert StructureRepository.list_segments(cur, "sec-1") == []
        assert "WHERE passage_section_id = %s" in _sql(cur)

    def test_transfer_segments(self, cur):
        cur.rowcount = 1

        assert StructureRepository.transfer_segments(cur, ("seg-9",), "sec-2") == 1
        assert _params(cur) == ("sec-2", ["seg-9"])

    def test_update_segment_field(self, cur):
        cur.rowcount = 1

        assert StructureRepository.update_segment_field(cur, "seg-1", "heading_two", "Title") is True
        assert "SET heading_two = %s" in _sql(cur)
        assert _params(cur) == ("Title", "seg-1")

    def test_update_segment_field_missing_row(self, cur):
        cur.rowcount = 0

        assert StructureRepository.update_segment_field(cur, "seg-1", "note", None) is False

    def test_update_segment_field_rejects_unknown_column(self, cur):
        with pytest.raises(ValueError):
            StructureRepository.update_segment_field(cur, "seg-1", "starting_word_id", "x")

        cur.execute.assert_not_called()

    def test_get_segment_owner_id(self, cur):
        cur.fetchone.return_value = None

        assert StructureRepository.get_segment_owner_id(cur, "seg-1") is None
        assert "JOIN passage_section sec ON sec.id = seg.passage_section_id" in _sql(cur)
