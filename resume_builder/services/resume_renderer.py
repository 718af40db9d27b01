"""
Turn a resume and its sections into presentable output.

Every template receives the same context from build_render_context(): visible
sections in position order, grouped by type, with dates already formatted.
"""

import json
import logging
from typing import Any

from resume_builder.schemas.resume import ExportOptions, ResumeResponse
from resume_builder.services.formatting import format_date, format_date_range, safe_link, strip_scheme
from resume_builder.services.latex_render_service import render_latex_to_pdf_bytes
from resume_builder.services.section_catalog import CORE_SECTION_TYPES
from resume_builder.services.section_ordering import sort_sections
from resume_builder.services.template_registry import (
    get_template_info,
    resolve_template_id,
    template_registry,
)

logger = logging.getLogger(__name__)


class ExportError(RuntimeError):
    """Raised when a resume cannot be rendered into the requested format."""


def _get(obj: Any, name: str, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _content(section: Any) -> Any:
    content = _get(section, "content")
    return content if content is not None else {}


def _items(section: Any) -> list[dict[str, Any]]:
    content = _content(section)
    if not isinstance(content, dict):
        return []
    items = content.get("items")
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _text(value: Any) -> str:
    """Content is free-form JSON, so scalars of any type are shown as text."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [text for text in (_text(v) for v in value) if text]


def group_sections_by_type(sections) -> dict[str, list[Any]]:
    """Visible sections in render order, bucketed by type. Bucket order follows first appearance."""
    grouped: dict[str, list[Any]] = {}
    for section in sort_sections(sections):
        if _get(section, "is_visible", True) is False:
            continue
        grouped.setdefault(_get(section, "type") or "section", []).append(section)
    return grouped


def _profile_context(grouped: dict[str, list[Any]], include_contact: bool) -> dict[str, Any]:
    profile_sections = grouped.get("profile") or []
    profile = _content(profile_sections[0]) if profile_sections else {}
    if not isinstance(profile, dict):
        profile = {}
    website = _text(profile.get("website"))
    contact = {
        "email": _text(profile.get("email")),
        "phone": _text(profile.get("phone")),
        "location": _text(profile.get("location")),
        "website": safe_link(website),
        "website_label": strip_scheme(website),
    }
    if not include_contact:
        contact = {key: "" for key in contact}
    return {
        "name": _text(profile.get("fullName")) or "Your Name",
        "headline": _text(profile.get("title")),
        "summary": _text(profile.get("summary")),
        **contact,
    }


def _date_range(item: dict[str, Any], current: bool) -> str:
    return format_date_range(_text(item.get("startDate")), _text(item.get("endDate")), current)


def _experience_item(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "job_title": _text(item.get("jobTitle")) or "Job Title",
        "employer": _text(item.get("employer")),
        "location": _text(item.get("location")),
        "date_range": _date_range(item, bool(item.get("current"))),
        "description": _text(item.get("description")),
        "highlights": _text_list(item.get("highlights")),
    }


def _education_item(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "degree": _text(item.get("degree")),
        "school": _text(item.get("school")),
        "location": _text(item.get("location")),
        "date_range": _date_range(item, bool(item.get("current"))),
        "gpa": _text(item.get("gpa")),
        "description": _text(item.get("description")),
    }


def _project_item(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": _text(item.get("name")) or "Project Name",
        "url": safe_link(_text(item.get("url"))),
        "technologies": _text_list(item.get("technologies")),
        "date_range": _date_range(item, False) if _text(item.get("startDate")) else "",
        "description": _text(item.get("description")),
    }


def group_skills(items: list[dict[str, Any]]) -> list[tuple[str, list[str]]]:
    """Skill names bucketed by category (missing -> 'Other'), categories in first-seen order."""
    categories: dict[str, list[str]] = {}
    for skill in items:
        name = _text(skill.get("name"))
        if not name:
            continue
        categories.setdefault(_text(skill.get("category")) or "Other", []).append(name)
    return list(categories.items())


def _generic_item(item: dict[str, Any]) -> dict[str, Any]:
    subtitle_keys = ("issuer", "organization", "publisher", "proficiency")
    date_text = _text(item.get("date"))
    return {
        "name": _text(item.get("name")) or _text(item.get("title")) or "Item",
        "date": format_date(date_text) if date_text else "",
        "subtitle": next((_text(item.get(k)) for k in subtitle_keys if _text(item.get(k))), ""),
        "description": _text(item.get("description")),
    }


def _generic_section(section: Any) -> dict[str, Any]:
    content = _content(section)
    block = {"title": _get(section, "title") or "Section", "items": None, "text": ""}
    if isinstance(content, dict) and isinstance(content.get("items"), list):
        block["items"] = [_generic_item(item) for item in _items(section)]
    elif isinstance(content, str):
        block["text"] = content
    elif content:
        block["text"] = json.dumps(content, indent=2, ensure_ascii=False)
    return block


def build_render_context(resume: Any, include_contact: bool = True) -> dict[str, Any]:
    grouped = group_sections_by_type(_get(resume, "sections") or [])

    def blocks(section_type: str, default_title: str, item_fn) -> list[dict[str, Any]]:
        return [
            {
                "title": _get(section, "title") or default_title,
                "items": [item_fn(item) for item in _items(section)],
            }
            for section in grouped.get(section_type, [])
        ]

    skills = [
        {"title": _get(section, "title") or "Skills", "categories": group_skills(_items(section))}
        for section in grouped.get("skills", [])
    ]
    # Only the first section of each non-core type is shown.
    other_sections = [
        _generic_section(sections[0])
        for section_type, sections in grouped.items()
        if section_type not in CORE_SECTION_TYPES
    ]

    return {
        "title": _get(resume, "title") or "",
        "profile": _profile_context(grouped, include_contact),
        "experience": blocks("experience", "Professional Experience", _experience_item),
        "education": blocks("education", "Education", _education_item),
        "projects": blocks("projects", "Projects", _project_item),
        "skills": skills,
        "other_sections": other_sections,
    }


def render_html(resume: Any, template_id: str | None = None, options: ExportOptions | None = None) -> str:
    options = options or ExportOptions()
    template_id = resolve_template_id(template_id or _get(resume, "template"))
    context = build_render_context(resume, include_contact=options.include_contact)
    template = template_registry.get_html_template(template_id)
    return template.render(
        r=context,
        template=get_template_info(template_id),
        options=options,
    )


def render_text(resume: Any, options: ExportOptions | None = None) -> str:
    options = options or ExportOptions()
    ctx = build_render_context(resume, include_contact=options.include_contact)
    profile = ctx["profile"]
    lines: list[str] = [profile["name"]]
    if profile["headline"]:
        lines.append(profile["headline"])
    contact = [profile[k] for k in ("email", "phone", "location", "website_label") if profile[k]]
    if contact:
        lines.append(" | ".join(contact))
    if profile["summary"]:
        lines.extend(["", profile["summary"]])

    def heading(title: str) -> None:
        lines.extend(["", title.upper(), "-" * len(title)])

    for block in ctx["experience"]:
        heading(block["title"])
        for item in block["items"]:
            where = ", ".join(p for p in (item["employer"], item["location"]) if p)
            lines.append(f"{item['job_title']}" + (f" - {where}" if where else ""))
            lines.append(item["date_range"])
            if item["description"]:
                lines.append(item["description"])
            lines.extend(f"  * {h}" for h in item["highlights"])
    for block in ctx["projects"]:
        heading(block["title"])
        for item in block["items"]:
            lines.append(item["name"] + (f" ({item['url']})" if item["url"] else ""))
            if item["technologies"]:
                lines.append(", ".join(item["technologies"]))
            if item["date_range"]:
                lines.append(item["date_range"])
            if item["description"]:
                lines.append(item["description"])
    for block in ctx["skills"]:
        heading(block["title"])
        for category, names in block["categories"]:
            lines.append(f"{category}: {', '.join(names)}")
    for block in ctx["education"]:
        heading(block["title"])
        for item in block["items"]:
            lines.append(" - ".join(p for p in (item["degree"], item["school"]) if p))
            lines.append(item["date_range"])
            if item["gpa"]:
                lines.append(f"GPA: {item['gpa']}")
    for block in ctx["other_sections"]:
        heading(block["title"])
        if block["items"] is not None:
            for item in block["items"]:
                lines.append(item["name"] + (f" ({item['date']})" if item["date"] else ""))
                if item["subtitle"]:
                    lines.append(item["subtitle"])
                if item["description"]:
                    lines.append(item["description"])
        elif block["text"]:
            lines.append(block["text"])
    return "\n".join(lines).strip() + "\n"


def render_json(resume: Any) -> dict[str, Any]:
    data = ResumeResponse.model_validate(resume).model_dump(mode="json")
    data["sections"] = sorted(data["sections"], key=lambda s: (s["position"], s["created_at"] or ""))
    return data


def render_latex(resume: Any, options: ExportOptions | None = None) -> str:
    options = options or ExportOptions()
    context = build_render_context(resume, include_contact=options.include_contact)
    return template_registry.get_latex_template().render(
        r=context,
        options=options,
        accent=options.color.lstrip("#").upper(),
    )


def render_pdf(resume: Any, options: ExportOptions | None = None) -> bytes:
    latex = render_latex(resume, options)
    try:
        return render_latex_to_pdf_bytes(latex)
    except RuntimeError as e:
        logger.warning("PDF export failed for resume=%s: %s", _get(resume, "id"), e)
        raise ExportError(str(e)) from e
