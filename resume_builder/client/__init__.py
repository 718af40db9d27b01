from resume_builder.client.api_client import ResumeApiClient, ResumeApiError
from resume_builder.client.editor_state import ResumeEditor

__all__ = [
    "ResumeApiClient",
    "ResumeApiError",
    "ResumeEditor",
]
