"""Routes for creating and loading studies and adding passages to them."""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Path

from outline_api.auth import get_current_user_dependency
from outline_api.models.schemas import (
    PassageCreate,
    PassageItem,
    StudyCreate,
    StudyItem,
    StudyStructureResponse,
    StudyUpdate,
)
from outline_api.services.structure_loader import StructureLoader, get_structure_loader
from outline_api.services.structure_service import StructureService, get_structure_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/studies", tags=["studies"])


def _passage_with_structure(created: Dict[str, Any]) -> Dict[str, Any]:
    """Nest a freshly bootstrapped column/section/segment under its passage."""
    passage = created["passage"]
    structure = created["structure"]
    return {
        **passage,
        "structure": {
            "passage_id": passage["id"],
            "columns": [
                {
                    **structure["column"],
                    "sections": [{**structure["section"], "segments": [structure["segment"]]}],
                }
            ],
        },
    }


@router.post("", response_model=StudyStructureResponse, status_code=201)
async def create_study(
    payload: StudyCreate,
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    """Create a study and its passages, each with a default outline."""
    try:
        created = service.create_study(
            title=payload.title,
            subtitle=payload.subtitle,
            passages=[passage.model_dump() for passage in payload.passages],
            user_id=current_user["id"],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Create study error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {
        "study": created["study"],
        "passages": [_passage_with_structure(item) for item in created["passages"]],
    }


@router.get("/{study_id}", response_model=StudyStructureResponse)
async def get_study(
    study_id: str = Path(..., min_length=1),
    current_user=Depends(get_current_user_dependency),
    loader: StructureLoader = Depends(get_structure_loader),
):
    return loader.load_study_structure(study_id=study_id, user_id=current_user["id"])


@router.patch("/{study_id}", response_model=StudyItem)
async def update_study(
    payload: StudyUpdate,
    study_id: str = Path(..., min_length=1),
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    try:
        return service.update_study(
            study_id=study_id,
            title=payload.title,
            subtitle=payload.subtitle,
            user_id=current_user["id"],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Update study error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{study_id}/passages", response_model=PassageItem, status_code=201)
async def create_passage(
    payload: PassageCreate,
    study_id: str = Path(..., min_length=1),
    current_user=Depends(get_current_user_dependency),
    service: StructureService = Depends(get_structure_service),
):
    try:
        created = service.create_passage(study_id=study_id, user_id=current_user["id"], **payload.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Create passage error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return _passage_with_structure(created)
