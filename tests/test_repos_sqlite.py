from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import resume_builder.repos.resume_repo as rrepo
import resume_builder.repos.section_repo as srepo
import resume_builder.repos.user_repo as urepo
from resume_builder.database import Base
from resume_builder.models import Resume, Section, User
from resume_builder.services.section_ordering import SectionIndexError, sort_sections


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def _user(db, email="owner@example.com"):
    user = User(id=email, email=email, name="Owner", password_hash="x", is_active=True)
    db.add(user)
    db.commit()
    return user


def test_create_with_defaults_persists_sections(db):
    user = _user(db)
    resume = rrepo.create_with_defaults(db, user.id, "Data Engineer", "modern")
    assert resume.slug.startswith("data-engineer-")
    sections = srepo.list_for_resume(db, resume.id)
    assert [(s.type, s.position) for s in sections] == [
        ("profile", 1),
        ("experience", 2),
        ("education", 3),
        ("skills", 4),
    ]
    assert rrepo.count_by_user(db, user.id) == 1


def test_ownership_scoped_lookups(db):
    owner = _user(db)
    other = _user(db, "other@example.com")
    resume = rrepo.create_with_defaults(db, owner.id, "CV", "modern")
    section_id = resume.sections[0].id

    assert rrepo.get_by_id(db, resume.id, owner.id) is not None
    assert rrepo.get_by_id(db, resume.id, other.id) is None
    assert srepo.get_for_user(db, section_id, owner.id) is not None
    assert srepo.get_for_user(db, section_id, other.id) is None


def test_add_and_reorder_sections(db):
    user = _user(db)
    resume = rrepo.create_with_defaults(db, user.id, "CV", "modern")
    existing = srepo.list_for_resume(db, resume.id)
    added = srepo.create(
        db,
        resume,
        type="projects",
        title="Projects",
        content={"items": []},
        position=srepo.next_position(existing),
    )
    assert added.position == 5

    ordered = srepo.reorder(db, resume, 4, 0)
    assert [s.type for s in ordered] == ["projects", "profile", "experience", "education", "skills"]
    reloaded = srepo.list_for_resume(db, resume.id)
    assert [(s.type, s.position) for s in reloaded] == [
        ("projects", 0),
        ("profile", 1),
        ("experience", 2),
        ("education", 3),
        ("skills", 4),
    ]

    with pytest.raises(SectionIndexError):
        srepo.reorder(db, resume, 0, 5)


def test_duplicate_is_independent_copy(db):
    user = _user(db)
    original = rrepo.create_with_defaults(db, user.id, "CV", "creative")
    profile = original.sections[0]
    srepo.update(db, profile, content={"fullName": "Ada", "email": "ada@example.com"})
    rrepo.update(db, original, is_public=True)

    copy = rrepo.duplicate(db, original, user.id)
    assert copy.id != original.id
    assert copy.is_public is False
    assert copy.slug.startswith(f"{original.slug}-copy-")
    assert len(copy.sections) == 4
    assert {s.id for s in copy.sections}.isdisjoint({s.id for s in original.sections})

    copy_profile = next(s for s in copy.sections if s.type == "profile")
    assert copy_profile.content == {"fullName": "Ada", "email": "ada@example.com"}
    srepo.update(db, copy_profile, content={"fullName": "Changed"})
    db.refresh(profile)
    assert profile.content["fullName"] == "Ada"


def test_duplicate_keeps_creation_order_for_tied_positions(db):
    user = _user(db)
    resume = rrepo.create_with_defaults(db, user.id, "CV", "modern")
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    # Inserted out of creation order, both at the same position.
    for section_id, title, minutes in (("late", "Second", 5), ("early", "First", 0)):
        db.add(
            Section(
                id=section_id,
                resume_id=resume.id,
                type="awards",
                title=title,
                content={},
                position=9,
                created_at=base + timedelta(minutes=minutes),
            )
        )
    db.commit()
    db.refresh(resume)

    copy = rrepo.duplicate(db, resume, user.id)
    original_titles = [s.title for s in sort_sections(resume.sections)]
    copied_titles = [s.title for s in sort_sections(copy.sections)]
    assert original_titles[-2:] == ["First", "Second"]
    assert copied_titles == original_titles
    copied_first = next(s for s in copy.sections if s.title == "First")
    assert copied_first.created_at.replace(tzinfo=None) == base.replace(tzinfo=None)


def test_delete_resume_cascades_sections(db):
    user = _user(db)
    resume = rrepo.create_with_defaults(db, user.id, "CV", "modern")
    resume_id = resume.id
    rrepo.delete(db, resume)
    assert db.query(Resume).filter(Resume.id == resume_id).first() is None
    assert db.query(Section).filter(Section.resume_id == resume_id).count() == 0


def test_delete_user_cascades_everything(db):
    user = _user(db)
    rrepo.create_with_defaults(db, user.id, "One", "modern")
    rrepo.create_with_defaults(db, user.id, "Two", "minimal")
    assert urepo.delete_user(db, user.id) is True
    assert db.query(Resume).count() == 0
    assert db.query(Section).count() == 0


def test_public_lookup_and_view_count(db):
    user = _user(db)
    resume = rrepo.create_with_defaults(db, user.id, "CV", "modern")
    assert rrepo.get_public_by_slug(db, resume.slug) is None

    rrepo.update(db, resume, is_public=True)
    shared = rrepo.get_public_by_slug(db, resume.slug)
    assert shared is not None
    rrepo.increment_view_count(db, shared)
    rrepo.increment_view_count(db, shared)
    assert shared.view_count == 2
