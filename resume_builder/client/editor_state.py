"""
Local editing state for one resume.

Edits are applied to the local copy first and then persisted through the
API client. A failed save is recorded in `errors` and the local edit is kept,
so the caller can retry or reload.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from resume_builder.client.api_client import ResumeApiClient, ResumeApiError
from resume_builder.services.section_catalog import default_content_for_type, default_title
from resume_builder.services.section_ordering import move_item, renumber

logger = logging.getLogger(__name__)


class ResumeEditor:
    def __init__(self, api: ResumeApiClient, resume_id: str):
        self.api = api
        self.resume_id = resume_id
        self.resume: Optional[Dict[str, Any]] = None
        self.active_section_id: Optional[str] = None
        self.errors: List[str] = []

    @property
    def sections(self) -> List[Dict[str, Any]]:
        if not self.resume:
            return []
        return self.resume.get("sections") or []

    @property
    def active_section(self) -> Optional[Dict[str, Any]]:
        return self._find(self.active_section_id)

    def _find(self, section_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if section_id is None:
            return None
        for section in self.sections:
            if section.get("id") == section_id:
                return section
        return None

    def _record(self, message: str, error: ResumeApiError) -> None:
        logger.warning("%s for resume=%s: %s", message, self.resume_id, error)
        self.errors.append(f"{message}: {error.detail}")

    def load(self) -> bool:
        try:
            self.resume = self.api.get_resume(self.resume_id)
        except ResumeApiError as e:
            self._record("Failed to load resume", e)
            return False
        sections = self.sections
        self.active_section_id = sections[0]["id"] if sections else None
        return True

    def select_section(self, section_id: str) -> None:
        if self._find(section_id) is None:
            raise KeyError(section_id)
        self.active_section_id = section_id

    def update_resume(self, **updates: Any) -> bool:
        if self.resume is None:
            return False
        self.resume.update(updates)
        try:
            self.api.update_resume(self.resume_id, **updates)
        except ResumeApiError as e:
            self._record("Failed to save changes", e)
            return False
        return True

    def update_section(self, section_id: str, **updates: Any) -> bool:
        section = self._find(section_id)
        if section is None:
            return False
        section.update(updates)
        try:
            self.api.update_section(section_id, **updates)
        except ResumeApiError as e:
            self._record("Failed to save section", e)
            return False
        return True

    def move_section(self, drag_index: int, hover_index: int) -> bool:
        """Splice the dragged section into its new slot, renumber, then save every position."""
        if self.resume is None:
            return False
        moved = move_item(self.sections, drag_index, hover_index)
        for section, position in renumber(moved):
            section["position"] = position
        self.resume["sections"] = moved

        ok = True
        for section in moved:
            try:
                self.api.update_section(section["id"], position=section["position"])
            except ResumeApiError as e:
                self._record("Failed to reorder sections", e)
                ok = False
        return ok

    def add_section(self, section_type: str) -> Optional[Dict[str, Any]]:
        if self.resume is None:
            return None
        payload = {
            "type": section_type,
            "title": default_title(section_type),
            "content": default_content_for_type(section_type),
            "position": len(self.sections),
            "is_visible": True,
        }
        try:
            created = self.api.create_section(self.resume_id, **payload)
        except ResumeApiError as e:
            self._record("Failed to add section", e)
            return None
        self.resume["sections"] = [*self.sections, created]
        self.active_section_id = created["id"]
        return created

    def delete_section(self, section_id: str) -> bool:
        if self.resume is None:
            return False
        try:
            self.api.delete_section(section_id)
        except ResumeApiError as e:
            self._record("Failed to delete section", e)
            return False
        remaining = [s for s in self.sections if s.get("id") != section_id]
        self.resume["sections"] = remaining
        if self.active_section_id == section_id:
            self.active_section_id = remaining[0]["id"] if remaining else None
        return True
