"""Shared fixtures for structure service tests.

``FakeOutlineStore`` keeps studies, passages and the three outline tiers in
dicts and answers the same calls as ``StructureRepository`` and
``PassageRepository``. The cursor argument is ignored.
"""
import copy
import itertools
from contextlib import contextmanager
from unittest.mock import patch

import pytest

from outline_api.config import Settings
from outline_api.services.bible_metadata import BibleMetadata
from outline_api.services.structure_service import StructureService

OWNER_ID = 7
OTHER_USER_ID = 99


class FakeOutlineStore:
    def __init__(self):
        self.studies = {}
        self.passages = {}
        self.columns = {}
        self.sections = {}
        self.segments = {}
        self.commits = 0
        self.rollbacks = 0
        self._ids = itertools.count(1)

    def _new_id(self, prefix):
        return f"{prefix}-{next(self._ids)}"

    @staticmethod
    def _ordered(rows):
        return sorted((dict(row) for row in rows), key=lambda row: row["starting_word_id"])

    # Unit of work

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy((self.studies, self.passages, self.columns, self.sections, self.segments))
        try:
            yield object()
        except Exception:
            self.studies, self.passages, self.columns, self.sections, self.segments = snapshot
            self.rollbacks += 1
            raise
        self.commits += 1

    # Studies / passages

    def get_study(self, cur, study_id):
        row = self.studies.get(study_id)
        return dict(row) if row else None

    def create_study(self, cur, title, subtitle, user_id):
        study = {"id": self._new_id("study"), "title": title, "subtitle": subtitle, "user_id": user_id}
        self.studies[study["id"]] = study
        return dict(study)

    def update_study(self, cur, study_id, title, subtitle):
        self.studies[study_id].update(title=title, subtitle=subtitle)
        return dict(self.studies[study_id])

    def list_passages(self, cur, study_id):
        rows = [p for p in self.passages.values() if p["study_id"] == study_id]
        return [dict(p) for p in sorted(rows, key=lambda p: p["display_order"])]

    def get_passage_owner_id(self, cur, passage_id, for_update=False):
        passage = self.passages.get(passage_id)
        if not passage:
            return None
        return self.studies[passage["study_id"]]["user_id"]

    def next_display_order(self, cur, study_id):
        orders = [p["display_order"] for p in self.passages.values() if p["study_id"] == study_id]
        return max(orders) + 1 if orders else 0

    def create_passage(self, cur, **fields):
        passage = {"id": self._new_id("passage"), **fields}
        self.passages[passage["id"]] = passage
        return dict(passage)

    def list_passages_without_structure(self, cur):
        used = {c["passage_id"] for c in self.columns.values()}
        return [dict(p) for p in self.passages.values() if p["id"] not in used]

    # Columns

    def list_columns(self, cur, passage_id):
        return self._ordered(c for c in self.columns.values() if c["passage_id"] == passage_id)

    def get_column(self, cur, column_id):
        row = self.columns.get(column_id)
        return dict(row) if row else None

    def create_column(self, cur, passage_id, starting_word_id):
        column = {"id": self._new_id("col"), "passage_id": passage_id, "starting_word_id": starting_word_id}
        self.columns[column["id"]] = column
        return dict(column)

    def get_column_owner_id(self, cur, column_id):
        column = self.columns.get(column_id)
        if not column:
            return None
        return {
            "column_id": column_id,
            "passage_id": column["passage_id"],
            "user_id": self.get_passage_owner_id(cur, column["passage_id"]),
        }

    # Sections

    def list_sections(self, cur, column_id):
        return self._ordered(s for s in self.sections.values() if s["passage_column_id"] == column_id)

    def get_section(self, cur, section_id):
        row = self.sections.get(section_id)
        return dict(row) if row else None

    def create_section(self, cur, column_id, starting_word_id, color):
        section = {
            "id": self._new_id("sec"),
            "passage_column_id": column_id,
            "starting_word_id": starting_word_id,
            "color": color,
        }
        self.sections[section["id"]] = section
        return dict(section)

    def transfer_sections(self, cur, section_ids, new_column_id):
        for section_id in section_ids:
            self.sections[section_id]["passage_column_id"] = new_column_id
        return len(section_ids)

    def update_column_color(self, cur, column_id, color):
        updated = 0
        for section in self.sections.values():
            if section["passage_column_id"] == column_id:
                section["color"] = color
                updated += 1
        return updated

    # Segments

    def list_segments(self, cur, section_id):
        return self._ordered(s for s in self.segments.values() if s["passage_section_id"] == section_id)

    def get_segment(self, cur, segment_id):
        row = self.segments.get(segment_id)
        return dict(row) if row else None

    def create_segment(self, cur, section_id, starting_word_id):
        segment = {
            "id": self._new_id("seg"),
            "passage_section_id": section_id,
            "starting_word_id": starting_word_id,
            "heading_one": None,
            "heading_two": None,
            "heading_three": None,
            "note": None,
            "commentary": None,
        }
        self.segments[segment["id"]] = segment
        return dict(segment)

    def transfer_segments(self, cur, segment_ids, new_section_id):
        for segment_id in segment_ids:
            self.segments[segment_id]["passage_section_id"] = new_section_id
        return len(segment_ids)

    def update_segment_field(self, cur, segment_id, field, value):
        self.segments[segment_id][field] = value
        return True

    def get_segment_owner_id(self, cur, segment_id):
        segment = self.segments.get(segment_id)
        if not segment:
            return None
        section = self.sections[segment["passage_section_id"]]
        column = self.columns[section["passage_column_id"]]
        return {
            "segment_id": segment_id,
            "passage_id": column["passage_id"],
            "user_id": self.get_passage_owner_id(cur, column["passage_id"]),
        }

    # Seeding

    def seed_passage(self, first_word_id, user_id=OWNER_ID, color="blue"):
        """Create a study + passage with the default single column/section/segment."""
        study_id = self._new_id("study")
        self.studies[study_id] = {"id": study_id, "title": "Study", "user_id": user_id}
        passage = self.create_passage(
            None,
            study_id=study_id,
            testament="NT",
            book_id="john",
            book_name="John",
            from_chapter=3,
            to_chapter=3,
            from_verse=16,
            to_verse=21,
            display_order=0,
        )
        column = self.create_column(None, passage["id"], first_word_id)
        section = self.create_section(None, column["id"], first_word_id, color)
        segment = self.create_segment(None, section["id"], first_word_id)
        return {"passage": passage, "column": column, "section": section, "segment": segment}


@pytest.fixture
def fake_store():
    store = FakeOutlineStore()
    with patch("outline_api.services.structure_service.StructureRepository", store), \
            patch("outline_api.services.structure_service.PassageRepository", store), \
            patch("outline_api.services.structure_loader.StructureRepository", store), \
            patch("outline_api.services.structure_service.transaction", store.transaction):
        yield store


@pytest.fixture
def bible_metadata():
    return BibleMetadata(
        [
            {
                "_id": "NT",
                "bookData": [
                    {"_id": "john", "title": "John", "abbreviation": "JN", "chapterCount": 21},
                ],
            },
            {
                "_id": "OT",
                "bookData": [
                    {"_id": "genesis", "title": "Genesis", "abbreviation": "GEN", "chapterCount": 50},
                ],
            },
        ]
    )


@pytest.fixture
def service(bible_metadata):
    return StructureService(bible_metadata, settings=Settings())
