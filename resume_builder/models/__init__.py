from resume_builder.models.user import User
from resume_builder.models.resume import Resume
from resume_builder.models.section import Section

__all__ = [
    "User",
    "Resume",
    "Section",
]
