from fastapi import APIRouter, HTTPException, status

from resume_builder.schemas.catalog import SectionTypeInfo, TemplateInfo
from resume_builder.services.section_catalog import SECTION_TYPES
from resume_builder.services.template_registry import TEMPLATES, TemplateNotFoundError, get_template_info

router = APIRouter(tags=["catalog"])


@router.get("/templates", response_model=list[TemplateInfo])
def list_templates():
    return TEMPLATES


@router.get("/templates/{template_id}", response_model=TemplateInfo)
def get_template(template_id: str):
    try:
        return get_template_info(template_id)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found") from e


@router.get("/section-types", response_model=list[SectionTypeInfo])
def list_section_types():
    """Section types the editor offers, in sidebar group order."""
    return SECTION_TYPES
