from pydantic import BaseModel


class TemplateInfo(BaseModel):
    id: str
    name: str
    description: str
    category: str


class SectionTypeInfo(BaseModel):
    id: str
    name: str
    group: str
    description: str
