"""Typed records for the column / section / segment outline tree."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SectionColor(str, Enum):
    """Palette available to sections."""
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    AQUA = "aqua"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"

    @classmethod
    def values(cls) -> List[str]:
        return [color.value for color in cls]


class HeadingType(str, Enum):
    """Which of the three segment headings to update."""
    ONE = "one"
    TWO = "two"
    THREE = "three"

    @property
    def column_name(self) -> str:
        return f"heading_{self.value}"


class PassageSegment(BaseModel):
    """Leaf of the outline: a run of words carrying headings and notes."""
    id: str
    passage_section_id: str
    starting_word_id: str
    heading_one: Optional[str] = None
    heading_two: Optional[str] = None
    heading_three: Optional[str] = None
    note: Optional[str] = None
    commentary: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PassageSection(BaseModel):
    """Colour-coded run of segments inside a column."""
    id: str
    passage_column_id: str
    starting_word_id: str
    color: SectionColor = SectionColor.BLUE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    segments: List[PassageSegment] = Field(default_factory=list)


class PassageColumn(BaseModel):
    """Top level parallel track of a passage."""
    id: str
    passage_id: str
    starting_word_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    sections: List[PassageSection] = Field(default_factory=list)


def column_from_row(row: Dict[str, Any]) -> PassageColumn:
    return PassageColumn(**{key: row[key] for key in PassageColumn.model_fields if key in row})


def section_from_row(row: Dict[str, Any]) -> PassageSection:
    return PassageSection(**{key: row[key] for key in PassageSection.model_fields if key in row})


def segment_from_row(row: Dict[str, Any]) -> PassageSegment:
    return PassageSegment(**{key: row[key] for key in PassageSegment.model_fields if key in row})
