import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from resume_builder.database import get_db
from resume_builder.dependencies import get_current_user
from resume_builder.models.section import Section
from resume_builder.models.user import User
from resume_builder.schemas.resume import SectionResponse, SectionUpdate
from resume_builder.repos.section_repo import (
    delete as delete_section,
    get_for_user,
    update as update_section,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sections", tags=["sections"])


def _get_owned_section(db: Session, section_id: str, user: User) -> Section:
    section = get_for_user(db, section_id, user.id)
    if not section:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    return section


@router.get("/{section_id}", response_model=SectionResponse)
def get_section(
    section_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _get_owned_section(db, section_id, user)


@router.put("/{section_id}", response_model=SectionResponse)
def update_section_detail(
    section_id: str,
    data: SectionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    section = _get_owned_section(db, section_id, user)
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated = update_section(db, section, **updates)
        logger.info("Section updated user=%s section=%s fields=%s", user.id, section_id, sorted(updates))
        return updated
    except Exception as e:
        logger.exception("Failed updating section=%s for user=%s: %s", section_id, user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update section") from e


@router.delete("/{section_id}")
def delete_section_detail(
    section_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    section = _get_owned_section(db, section_id, user)
    try:
        delete_section(db, section)
        logger.info("Section deleted user=%s section=%s", user.id, section_id)
        return {"success": True}
    except Exception as e:
        logger.exception("Failed deleting section=%s for user=%s: %s", section_id, user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete section") from e
