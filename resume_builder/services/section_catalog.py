"""Known section types, their sidebar groups, and the blank content each starts with."""

import time
from typing import Any

from resume_builder.services.formatting import capitalize_first

SECTION_TYPES: list[dict[str, str]] = [
    {"id": "profile", "name": "Profile", "group": "basic", "description": "Personal information and summary"},
    {"id": "experience", "name": "Work Experience", "group": "work", "description": "Your work history"},
    {"id": "education", "name": "Education", "group": "education", "description": "Your educational background"},
    {"id": "skills", "name": "Skills", "group": "skills", "description": "Your skills and expertise"},
    {"id": "projects", "name": "Projects", "group": "other", "description": "Notable projects"},
    {"id": "certifications", "name": "Certifications", "group": "other", "description": "Professional certifications"},
    {"id": "languages", "name": "Languages", "group": "other", "description": "Language proficiencies"},
    {"id": "publications", "name": "Publications", "group": "other", "description": "Published works"},
    {"id": "volunteer", "name": "Volunteer Work", "group": "other", "description": "Volunteer experience"},
]

SECTION_GROUPS = ("basic", "work", "education", "skills", "other")

# Types the templates lay out explicitly; everything else renders as a generic block.
CORE_SECTION_TYPES = ("profile", "experience", "education", "skills", "projects")

# (type, title) for sections every new resume starts with, in position order.
DEFAULT_RESUME_SECTIONS = [
    ("profile", "Personal Information"),
    ("experience", "Work Experience"),
    ("education", "Education"),
    ("skills", "Skills"),
]

_ITEM_PREFIXES = {
    "experience": "exp",
    "education": "edu",
    "skills": "skill",
    "projects": "proj",
}


def _item_id(section_type: str) -> str:
    return f"{_ITEM_PREFIXES[section_type]}-{int(time.time() * 1000)}"


def default_title(section_type: str) -> str:
    return capitalize_first(section_type)


def default_content_for_type(section_type: str) -> dict[str, Any]:
    if section_type == "profile":
        return {
            "fullName": "",
            "email": "",
            "phone": "",
            "location": "",
            "website": "",
            "summary": "",
        }
    if section_type == "experience":
        return {
            "items": [
                {
                    "id": _item_id(section_type),
                    "jobTitle": "",
                    "employer": "",
                    "location": "",
                    "startDate": "",
                    "endDate": "",
                    "current": False,
                    "description": "",
                }
            ]
        }
    if section_type == "education":
        return {
            "items": [
                {
                    "id": _item_id(section_type),
                    "degree": "",
                    "school": "",
                    "location": "",
                    "startDate": "",
                    "endDate": "",
                    "current": False,
                    "description": "",
                }
            ]
        }
    if section_type == "skills":
        return {"items": [{"id": _item_id(section_type), "name": "", "level": 3}]}
    if section_type == "projects":
        return {"items": [{"id": _item_id(section_type), "name": "", "description": "", "url": ""}]}
    return {}


def grouped_section_types() -> dict[str, list[dict[str, str]]]:
    groups: dict[str, list[dict[str, str]]] = {group: [] for group in SECTION_GROUPS}
    for entry in SECTION_TYPES:
        groups[entry["group"]].append(entry)
    return groups
