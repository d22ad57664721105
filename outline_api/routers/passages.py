"""Routes for editing passage outlines (columns, sections, segments)."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Path

from outline_api.auth import get_current_user_dependency
from outline_api.models.schemas import (
    ColumnColorResponse,
    ColumnColorUpdate,
    ColumnInsertRequest,
    InsertResponse,
    PassageStructureResponse,
    SectionInsertRequest,
    SegmentCommentaryUpdate,
    SegmentHeadingUpdate,
    SegmentInsertRequest,
    SegmentNoteUpdate,
    SuccessResponse,
)
from outline_api.models.structure import PassageSegment
from outline_api.services.structure_loader import StructureLoader, get_structure_loader
from outline_api.services.structure_service import StructureService, get_structure_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["passages"])


def _internal_error(action: str, error: Exception) -> HTTPException:
    logger.error(f"{action} error: {error}")
    return HTTPException(status_code=500, detail="Internal server error")


@router.get("/passages/{passage_id}/structure", response_model=PassageStructureResponse)
async def get_passage_structure(
    passage_id: str = Path(..., min_length=1),
    current_user=Depends(get_current_user_dependency),
    loader: StructureLoader = Depends(get_structure_loader),
):
    columns = loader.load_passage_structure(passage_id=passage_id, user_id=current_user["id"])
    return {"passage_id": passage_id, "columns": columns}


@router.post("/passages/columns/insert", response_model=InsertResponse)
async def insert_column(
    payload: ColumnInsertRequest,
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    """Insert a new column at the specified word id."""
    try:
        new_id = service.insert_column(user_id=current_user["id"], **payload.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Insert column", e)
    return {"success": True, "id": new_id}


@router.post("/passages/sections/insert", response_model=InsertResponse)
async def insert_section(
    payload: SectionInsertRequest,
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    """Insert a new section at the specified word id."""
    try:
        new_id = service.insert_section(user_id=current_user["id"], **payload.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Insert section", e)
    return {"success": True, "id": new_id}


@router.post("/passages/segments/insert", response_model=InsertResponse)
async def insert_segment(
    payload: SegmentInsertRequest,
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    """Insert a new segment at the specified word id."""
    try:
        new_id = service.insert_segment(user_id=current_user["id"], **payload.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Insert segment", e)
    return {"success": True, "id": new_id}


@router.patch("/passages/columns/{column_id}", response_model=ColumnColorResponse)
async def update_column_color(
    payload: ColumnColorUpdate,
    column_id: str = Path(..., min_length=1),
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    """Update all sections in a column to a new color."""
    try:
        updated = service.set_column_color(
            column_id=column_id, color=payload.color, user_id=current_user["id"]
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Update column sections color", e)
    return {"success": True, "updated_sections": updated}


@router.post("/passages/segments/heading", response_model=SuccessResponse)
async def update_segment_heading(
    payload: SegmentHeadingUpdate,
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    try:
        service.update_segment_heading(user_id=current_user["id"], **payload.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Update segment heading", e)
    return {"success": True}


@router.post("/passages/segments/note", response_model=SuccessResponse)
async def update_segment_note(
    payload: SegmentNoteUpdate,
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    try:
        service.update_segment_note(user_id=current_user["id"], **payload.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Update segment note", e)
    return {"success": True}


@router.get("/segments/{segment_id}", response_model=PassageSegment)
async def get_segment(
    segment_id: str = Path(..., min_length=1),
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    try:
        return service.get_segment(segment_id=segment_id, user_id=current_user["id"])
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Get segment", e)


@router.patch("/segments/{segment_id}", response_model=SuccessResponse)
async def update_segment_commentary(
    payload: SegmentCommentaryUpdate,
    segment_id: str = Path(..., min_length=1),
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    try:
        service.update_segment_commentary(
            segment_id=segment_id, commentary=payload.commentary, user_id=current_user["id"]
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Update segment commentary", e)
    return {"success": True}
