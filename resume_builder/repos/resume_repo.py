import copy
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from resume_builder.models.resume import Resume
from resume_builder.models.section import Section
from resume_builder.core.security import generate_id, generate_short_token
from resume_builder.services.formatting import slugify
from resume_builder.services.section_catalog import DEFAULT_RESUME_SECTIONS, default_content_for_type
from resume_builder.services.section_ordering import sort_sections


def build_slug(title: str) -> str:
    return f"{slugify(title) or 'resume'}-{generate_short_token()}"


def list_by_user(db: Session, user_id: str) -> list[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.user_id == user_id)
        .order_by(Resume.updated_at.desc())
        .all()
    )


def count_by_user(db: Session, user_id: str) -> int:
    return db.query(Resume).filter(Resume.user_id == user_id).count()


def get_by_id(db: Session, resume_id: str, user_id: str) -> Resume | None:
    """Owner-scoped lookup: a resume belonging to someone else is reported as missing."""
    return (
        db.query(Resume)
        .filter(Resume.id == resume_id, Resume.user_id == user_id)
        .first()
    )


def get_public_by_slug(db: Session, slug: str) -> Resume | None:
    return (
        db.query(Resume)
        .filter(Resume.slug == slug, Resume.is_public == True)  # noqa: E712
        .first()
    )


def create_with_defaults(db: Session, user_id: str, title: str, template: str) -> Resume:
    resume = Resume(
        id=generate_id(),
        user_id=user_id,
        title=title,
        slug=build_slug(title),
        template=template,
        is_public=False,
        view_count=0,
    )
    for position, (section_type, section_title) in enumerate(DEFAULT_RESUME_SECTIONS, start=1):
        resume.sections.append(
            Section(
                id=generate_id(),
                type=section_type,
                title=section_title,
                content=default_content_for_type(section_type),
                position=position,
                is_visible=True,
            )
        )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


def update(
    db: Session,
    resume: Resume,
    *,
    title: str | None = None,
    template: str | None = None,
    is_public: bool | None = None,
) -> Resume:
    if title is not None:
        resume.title = title
    if template is not None:
        resume.template = template
    if is_public is not None:
        resume.is_public = is_public
    resume.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(resume)
    return resume


def touch(db: Session, resume: Resume) -> None:
    resume.updated_at = datetime.now(timezone.utc)
    db.commit()


def delete(db: Session, resume: Resume) -> None:
    db.delete(resume)
    db.commit()


def duplicate(db: Session, resume: Resume, user_id: str) -> Resume:
    """Deep-copy a resume and its sections under fresh ids. The copy starts private."""
    copy_resume = Resume(
        id=generate_id(),
        user_id=user_id,
        title=f"{resume.title} (Copy)",
        slug=f"{resume.slug}-copy-{generate_short_token()}",
        template=resume.template,
        is_public=False,
        view_count=0,
    )
    for section in sort_sections(resume.sections):
        copied = Section(
            id=generate_id(),
            type=section.type,
            title=section.title,
            content=copy.deepcopy(section.content) if section.content is not None else {},
            position=section.position,
            is_visible=section.is_visible,
        )
        # Sections sharing a position are ordered by created_at, so carry it over.
        if section.created_at is not None:
            copied.created_at = section.created_at
        copy_resume.sections.append(copied)
    db.add(copy_resume)
    db.commit()
    db.refresh(copy_resume)
    return copy_resume


def increment_view_count(db: Session, resume: Resume) -> Resume:
    resume.view_count = (resume.view_count or 0) + 1
    db.commit()
    db.refresh(resume)
    return resume
