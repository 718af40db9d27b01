from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


def _strip_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Title must not be blank")
    return v


class ResumeCreate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    template: str | None = None


class ResumeUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    template: str | None = None
    is_public: bool | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str | None:
        return _strip_title(v)


class SectionCreate(BaseModel):
    type: str = Field(min_length=1, max_length=50)
    title: str | None = None
    content: dict[str, Any] | None = None
    position: int | None = None
    is_visible: bool | None = None


class SectionUpdate(BaseModel):
    type: str | None = Field(default=None, min_length=1, max_length=50)
    title: str | None = None
    content: dict[str, Any] | None = None
    position: int | None = None
    is_visible: bool | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str | None:
        return _strip_title(v)


class SectionReorder(BaseModel):
    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


class SectionResponse(BaseModel):
    id: str
    resume_id: str
    type: str
    title: str
    content: dict[str, Any]
    position: int
    is_visible: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ResumeSummary(BaseModel):
    id: str
    title: str
    slug: str
    template: str
    is_public: bool
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ResumeResponse(BaseModel):
    id: str
    user_id: str
    title: str
    slug: str
    template: str
    is_public: bool
    view_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    sections: list[SectionResponse] = []

    class Config:
        from_attributes = True


class ExportFormat(str, Enum):
    json = "json"
    txt = "txt"
    html = "html"
    pdf = "pdf"


class ExportOptions(BaseModel):
    include_contact: bool = True
    font_size: int = Field(default=11, ge=8, le=16)
    color: str = Field(default="#4f46e5", pattern=r"^#[0-9a-fA-F]{6}$")
