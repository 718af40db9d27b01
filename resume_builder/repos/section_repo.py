from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from resume_builder.models.resume import Resume
from resume_builder.models.section import Section
from resume_builder.core.security import generate_id
from resume_builder.services.section_ordering import move_item, renumber

UPDATABLE_FIELDS = ("type", "title", "content", "position", "is_visible")


def get_for_user(db: Session, section_id: str, user_id: str) -> Section | None:
    """Section lookup scoped through its resume's owner."""
    return (
        db.query(Section)
        .join(Resume, Section.resume_id == Resume.id)
        .filter(Section.id == section_id, Resume.user_id == user_id)
        .first()
    )


def list_for_resume(db: Session, resume_id: str) -> list[Section]:
    return (
        db.query(Section)
        .filter(Section.resume_id == resume_id)
        .order_by(Section.position.asc(), Section.created_at.asc())
        .all()
    )


def next_position(sections: list[Section]) -> int:
    if not sections:
        return 0
    return max(s.position or 0 for s in sections) + 1


def create(
    db: Session,
    resume: Resume,
    *,
    type: str,
    title: str,
    content: dict[str, Any],
    position: int,
    is_visible: bool = True,
) -> Section:
    section = Section(
        id=generate_id(),
        resume_id=resume.id,
        type=type,
        title=title,
        content=content,
        position=position,
        is_visible=is_visible,
    )
    db.add(section)
    resume.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(section)
    return section


def update(db: Session, section: Section, **fields: Any) -> Section:
    for name, value in fields.items():
        if name not in UPDATABLE_FIELDS:
            raise ValueError(f"Section field '{name}' cannot be updated")
        setattr(section, name, value)
    parent = getattr(section, "resume", None)
    if parent is not None:
        parent.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(section)
    return section


def delete(db: Session, section: Section) -> None:
    db.delete(section)
    db.commit()


def reorder(db: Session, resume: Resume, from_index: int, to_index: int) -> list[Section]:
    """Splice one section to a new index, then renumber positions 0..n-1."""
    sections = move_item(list_for_resume(db, resume.id), from_index, to_index)
    for section, position in renumber(sections):
        section.position = position
    resume.updated_at = datetime.now(timezone.utc)
    db.commit()
    return sections
