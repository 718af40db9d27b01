import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from resume_builder.config import settings
from resume_builder.database import get_db
from resume_builder.dependencies import get_current_user
from resume_builder.models.resume import Resume
from resume_builder.models.user import User
from resume_builder.schemas.resume import (
    ExportFormat,
    ExportOptions,
    ResumeCreate,
    ResumeResponse,
    ResumeSummary,
    ResumeUpdate,
    SectionCreate,
    SectionReorder,
    SectionResponse,
)
from resume_builder.repos.resume_repo import (
    create_with_defaults,
    delete as delete_resume,
    duplicate as duplicate_resume,
    get_by_id as get_resume,
    list_by_user,
    update as update_resume,
)
from resume_builder.repos.section_repo import (
    create as create_section,
    list_for_resume,
    next_position,
    reorder as reorder_sections,
)
from resume_builder.services.resume_renderer import (
    ExportError,
    render_html,
    render_json,
    render_pdf,
    render_text,
)
from resume_builder.services.section_catalog import default_content_for_type, default_title
from resume_builder.services.section_ordering import SectionIndexError
from resume_builder.services.template_registry import is_known_template

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/resumes", tags=["resumes"])
DEFAULT_RESUME_TITLE = "Untitled Resume"


def _get_owned_resume(db: Session, resume_id: str, user: User) -> Resume:
    resume = get_resume(db, resume_id, user.id)
    if not resume:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    return resume


def _require_known_template(template_id: str) -> None:
    if not is_known_template(template_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown template '{template_id}'")


@router.get("", response_model=list[ResumeSummary])
def list_resumes(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return list_by_user(db, user.id)


@router.post("", response_model=ResumeResponse)
def create_resume(
    data: ResumeCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    title = (data.title or "").strip() or DEFAULT_RESUME_TITLE
    template = data.template or settings.default_template
    _require_known_template(template)
    try:
        resume = create_with_defaults(db, user.id, title, template)
        logger.info("Resume created for user=%s resume=%s", user.id, resume.id)
        return resume
    except Exception as e:
        logger.exception("Failed creating resume for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create resume") from e


@router.get("/{resume_id}", response_model=ResumeResponse)
def get_resume_detail(
    resume_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _get_owned_resume(db, resume_id, user)


@router.put("/{resume_id}", response_model=ResumeResponse)
def update_resume_detail(
    resume_id: str,
    data: ResumeUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    resume = _get_owned_resume(db, resume_id, user)
    if data.template is not None:
        _require_known_template(data.template)
    try:
        updated = update_resume(db, resume, **data.model_dump(exclude_unset=True, exclude_none=True))
        logger.info("Resume updated user=%s resume=%s", user.id, resume_id)
        return updated
    except Exception as e:
        logger.exception("Failed updating resume=%s for user=%s: %s", resume_id, user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update resume") from e


@router.delete("/{resume_id}")
def delete_resume_detail(
    resume_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    resume = _get_owned_resume(db, resume_id, user)
    try:
        delete_resume(db, resume)
        logger.info("Resume deleted user=%s resume=%s", user.id, resume_id)
        return {"success": True}
    except Exception as e:
        logger.exception("Failed deleting resume=%s for user=%s: %s", resume_id, user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete resume") from e


@router.post("/{resume_id}/duplicate", response_model=ResumeResponse)
def duplicate_resume_detail(
    resume_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    original = _get_owned_resume(db, resume_id, user)
    try:
        copy = duplicate_resume(db, original, user.id)
        logger.info("Resume duplicated user=%s source=%s copy=%s", user.id, resume_id, copy.id)
        return copy
    except Exception as e:
        logger.exception("Failed duplicating resume=%s for user=%s: %s", resume_id, user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to duplicate resume") from e


@router.post("/{resume_id}/sections", response_model=SectionResponse)
def add_section(
    resume_id: str,
    data: SectionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    resume = _get_owned_resume(db, resume_id, user)
    existing = list_for_resume(db, resume.id)
    if len(existing) >= settings.max_sections_per_resume:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A resume can have at most {settings.max_sections_per_resume} sections",
        )
    section_type = data.type.strip()
    try:
        section = create_section(
            db,
            resume,
            type=section_type,
            title=(data.title or "").strip() or default_title(section_type),
            content=data.content if data.content is not None else default_content_for_type(section_type),
            position=data.position if data.position is not None else next_position(existing),
            is_visible=data.is_visible if data.is_visible is not None else True,
        )
        logger.info("Section added user=%s resume=%s type=%s", user.id, resume_id, section_type)
        return section
    except Exception as e:
        logger.exception("Failed adding section to resume=%s for user=%s: %s", resume_id, user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add section") from e


@router.post("/{resume_id}/sections/reorder", response_model=list[SectionResponse])
def reorder_resume_sections(
    resume_id: str,
    data: SectionReorder,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    resume = _get_owned_resume(db, resume_id, user)
    try:
        sections = reorder_sections(db, resume, data.from_index, data.to_index)
        logger.info(
            "Sections reordered user=%s resume=%s from=%d to=%d",
            user.id, resume_id, data.from_index, data.to_index,
        )
        return sections
    except SectionIndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except Exception as e:
        logger.exception("Failed reordering sections of resume=%s for user=%s: %s", resume_id, user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to reorder sections") from e


@router.get("/{resume_id}/preview", response_class=HTMLResponse)
def preview_resume(
    resume_id: str,
    template: str | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Render the resume as HTML. `template` previews another layout without saving it."""
    resume = _get_owned_resume(db, resume_id, user)
    if template is not None:
        _require_known_template(template)
    return HTMLResponse(render_html(resume, template_id=template))


@router.get("/{resume_id}/export")
def export_resume(
    resume_id: str,
    format: ExportFormat = ExportFormat.pdf,
    template: str | None = None,
    include_contact: bool = True,
    font_size: int = Query(11, ge=8, le=16),
    color: str = Query("#4f46e5", pattern=r"^#[0-9a-fA-F]{6}$"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    resume = _get_owned_resume(db, resume_id, user)
    if template is not None:
        _require_known_template(template)
    options = ExportOptions(include_contact=include_contact, font_size=font_size, color=color)
    filename = f"{resume.slug or 'resume'}.{format.value}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    logger.info("Export requested user=%s resume=%s format=%s", user.id, resume_id, format.value)

    if format == ExportFormat.json:
        return JSONResponse(content=render_json(resume), headers=headers)
    if format == ExportFormat.txt:
        return PlainTextResponse(render_text(resume, options), headers=headers)
    if format == ExportFormat.html:
        return HTMLResponse(render_html(resume, template_id=template, options=options), headers=headers)
    try:
        pdf = render_pdf(resume, options)
    except ExportError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="PDF export is unavailable") from e
    return Response(content=pdf, media_type="application/pdf", headers=headers)
