"""Pydantic models for request/response schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from outline_api.models.structure import PassageColumn, SectionColor


class ColumnInsertRequest(BaseModel):
    """Request model for splitting a column at a word."""
    passage_id: str = Field(..., min_length=1)
    column_id: str = Field(..., min_length=1, description="Column currently holding the word")
    section_id: str = Field(..., min_length=1, description="Section currently holding the word")
    segment_id: str = Field(..., min_length=1, description="Segment currently holding the word")
    insertion_word_id: str = Field(..., min_length=1, description="Word id where the new column starts")


class SectionInsertRequest(ColumnInsertRequest):
    """Request model for splitting a section at a word."""


class SegmentInsertRequest(BaseModel):
    """Request model for splitting a segment at a word."""
    passage_id: str = Field(..., min_length=1)
    section_id: str = Field(..., min_length=1)
    insertion_word_id: str = Field(..., min_length=1)


class InsertResponse(BaseModel):
    """Response for a successful insertion."""
    success: bool = True
    id: str = Field(..., description="Id of the newly created entity")


class SuccessResponse(BaseModel):
    success: bool = True


class ColumnColorUpdate(BaseModel):
    """Request model for recoloring every section of a column."""
    color: str = Field(..., description="One of: " + ", ".join(SectionColor.values()))


class ColumnColorResponse(BaseModel):
    success: bool = True
    updated_sections: int


class SegmentHeadingUpdate(BaseModel):
    """Request model for setting one of a segment's three headings."""
    segment_id: str = Field(..., min_length=1)
    heading_type: str = Field(..., description="one, two or three")
    heading_text: Optional[str] = None


class SegmentNoteUpdate(BaseModel):
    """Request model for a segment's short note."""
    segment_id: str = Field(..., min_length=1)
    note_text: Optional[str] = None


class SegmentCommentaryUpdate(BaseModel):
    """Request model for a segment's long-form commentary."""
    commentary: Optional[str] = None


class PassageStructureResponse(BaseModel):
    """Nested outline of one passage."""
    passage_id: str
    columns: List[PassageColumn]


class PassageCreate(BaseModel):
    """Request model for adding a passage to a study."""
    testament: str = Field(..., pattern="^(OT|NT)$")
    book_id: str = Field(..., min_length=1)
    from_chapter: int = Field(..., ge=1)
    to_chapter: int = Field(..., ge=1)
    from_verse: int = Field(..., ge=1)
    to_verse: int = Field(..., ge=1)


class PassageItem(BaseModel):
    """Passage row with its outline."""
    id: str
    study_id: str
    testament: str
    book_id: str
    book_name: str
    from_chapter: int
    to_chapter: int
    from_verse: int
    to_verse: int
    display_order: int = 0
    created_at: Optional[datetime] = None
    structure: Optional[PassageStructureResponse] = None


class StudyItem(BaseModel):
    id: str
    title: str
    subtitle: Optional[str] = None
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudyCreate(BaseModel):
    """Request model for a new study and its passages."""
    title: str = Field(..., min_length=1)
    subtitle: Optional[str] = None
    passages: List[PassageCreate] = Field(..., min_length=1)


class StudyUpdate(BaseModel):
    title: str = Field(..., min_length=1)
    subtitle: Optional[str] = None


class StudyStructureResponse(BaseModel):
    """A study with every passage's outline."""
    study: StudyItem
    passages: List[PassageItem]


class HealthCheck(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    version: str = "1.0.0"
