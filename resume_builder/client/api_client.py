from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15


class ResumeApiError(RuntimeError):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _error_detail(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or resp.reason or "Request failed"
    if isinstance(data, dict) and data.get("detail"):
        detail = data["detail"]
        # FastAPI validation errors come back as a list of dicts
        if isinstance(detail, list):
            return "; ".join(str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail)
        return str(detail)
    return resp.reason or "Request failed"


class ResumeApiClient:
    """
    Thin HTTP client for the resume builder API.

    One method per endpoint. Non-2xx responses raise ResumeApiError carrying
    the status code and the server's `detail` message.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.set_token(token)

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ResumeApiError(0, "Network error calling resume API") from e
        if not 200 <= resp.status_code < 300:
            raise ResumeApiError(resp.status_code, _error_detail(resp))
        return resp

    def _json(self, method: str, path: str, **kwargs) -> Any:
        resp = self._request(method, path, **kwargs)
        try:
            return resp.json()
        except ValueError as e:
            raise ResumeApiError(resp.status_code, "Invalid JSON returned by resume API") from e

    # Auth

    def register(self, email: str, password: str, name: Optional[str] = None) -> Dict[str, Any]:
        payload = {"email": email, "password": password, "confirm_password": password}
        if name:
            payload["name"] = name
        data = self._json("POST", "/auth/register", json=payload)
        self.set_token(data.get("access_token"))
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._json("POST", "/auth/login", json={"email": email, "password": password})
        self.set_token(data.get("access_token"))
        return data

    def me(self) -> Dict[str, Any]:
        return self._json("GET", "/auth/me")

    # Resumes

    def list_resumes(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/resumes")

    def create_resume(self, title: Optional[str] = None, template: Optional[str] = None) -> Dict[str, Any]:
        payload = {k: v for k, v in {"title": title, "template": template}.items() if v is not None}
        return self._json("POST", "/resumes", json=payload)

    def get_resume(self, resume_id: str) -> Dict[str, Any]:
        return self._json("GET", f"/resumes/{resume_id}")

    def update_resume(self, resume_id: str, **updates: Any) -> Dict[str, Any]:
        return self._json("PUT", f"/resumes/{resume_id}", json=updates)

    def delete_resume(self, resume_id: str) -> Dict[str, Any]:
        return self._json("DELETE", f"/resumes/{resume_id}")

    def duplicate_resume(self, resume_id: str) -> Dict[str, Any]:
        return self._json("POST", f"/resumes/{resume_id}/duplicate")

    def create_section(self, resume_id: str, **section: Any) -> Dict[str, Any]:
        return self._json("POST", f"/resumes/{resume_id}/sections", json=section)

    def reorder_sections(self, resume_id: str, from_index: int, to_index: int) -> List[Dict[str, Any]]:
        return self._json(
            "POST",
            f"/resumes/{resume_id}/sections/reorder",
            json={"from_index": from_index, "to_index": to_index},
        )

    def preview(self, resume_id: str, template: Optional[str] = None) -> str:
        params = {"template": template} if template else None
        return self._request("GET", f"/resumes/{resume_id}/preview", params=params).text

    def export(self, resume_id: str, format: str = "pdf", **options: Any) -> bytes:
        params = {"format": format, **{k: v for k, v in options.items() if v is not None}}
        return self._request("GET", f"/resumes/{resume_id}/export", params=params).content

    # Sections

    def get_section(self, section_id: str) -> Dict[str, Any]:
        return self._json("GET", f"/sections/{section_id}")

    def update_section(self, section_id: str, **updates: Any) -> Dict[str, Any]:
        return self._json("PUT", f"/sections/{section_id}", json=updates)

    def delete_section(self, section_id: str) -> Dict[str, Any]:
        return self._json("DELETE", f"/sections/{section_id}")

    # Catalog

    def list_templates(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/templates")

    def list_section_types(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/section-types")
