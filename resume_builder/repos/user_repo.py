from sqlalchemy.orm import Session

from resume_builder.models.user import User
from resume_builder.core.security import hash_password, generate_id


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create(db: Session, email: str, password: str, name: str | None = None) -> User:
    user = User(
        id=generate_id(),
        email=email,
        name=name,
        password_hash=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update(
    db: Session,
    user_id: str,
    *,
    email: str | None = None,
    name: str | None = None,
    password_hash: str | None = None,
    is_active: bool | None = None,
) -> User | None:
    user = get_by_id(db, user_id)
    if not user:
        return None
    if email is not None:
        user.email = email
    if name is not None:
        user.name = name
    if password_hash is not None:
        user.password_hash = password_hash
    if is_active is not None:
        user.is_active = is_active
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> bool:
    """Delete user and all related data (resumes, sections via cascade). Returns True if deleted."""
    user = get_by_id(db, user_id)
    if not user:
        return False
    db.delete(user)
    db.commit()
    return True
