import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from resume_builder.database import get_db
from resume_builder.repos.resume_repo import get_public_by_slug, increment_view_count
from resume_builder.services.resume_renderer import render_html

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/public", tags=["public"])


@router.get("/resumes/{slug}", response_class=HTMLResponse)
def view_public_resume(slug: str, db: Session = Depends(get_db)):
    """Shared link view. No auth; private resumes are indistinguishable from missing ones."""
    resume = get_public_by_slug(db, slug)
    if not resume:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    try:
        increment_view_count(db, resume)
    except Exception as e:
        # View counting is best-effort.
        logger.warning("View count update failed for resume=%s: %s", resume.id, e)
        db.rollback()
    return HTMLResponse(render_html(resume))
