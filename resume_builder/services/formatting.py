"""Display helpers shared by the renderers."""

import re
from datetime import date, datetime

PRESENT = "Present"

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m", "%Y/%m/%d", "%Y/%m", "%m/%Y", "%b %Y", "%B %Y")


def parse_date(value: str | date | None) -> date | None:
    """Parse the date shapes the editor produces. Returns None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    if re.fullmatch(r"\d{4}", text):
        return date(int(text), 1, 1)
    return None


def format_date(value: str | date | None) -> str:
    """
    Format a date as "Jan 2023".
    Empty values mean an ongoing entry and render as "Present";
    strings that don't look like a date are returned unchanged.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return PRESENT
    parsed = parse_date(value)
    if parsed is None:
        return str(value).strip()
    return parsed.strftime("%b %Y")


def format_date_range(start: str | date | None, end: str | date | None, current: bool = False) -> str:
    start_text = format_date(start)
    if current or not end:
        end_text = PRESENT
    else:
        end_text = format_date(end)
    return f"{start_text} - {end_text}"


def slugify(text: str) -> str:
    """'My Resume 2023' -> 'my-resume-2023'"""
    text = str(text or "").lower()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"[^\w-]+", "", text, flags=re.ASCII)
    text = re.sub(r"--+", "-", text)
    return text.strip("-")


def truncate(text: str | None, length: int) -> str:
    if not text:
        return ""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def get_initials(name: str | None) -> str:
    if not name:
        return ""
    return "".join(part[0] for part in name.split() if part).upper()[:2]


def strip_scheme(url: str | None) -> str:
    return re.sub(r"^https?://", "", str(url) if url else "")


_SAFE_SCHEMES = ("http", "https", "mailto")


def safe_link(url: str | None) -> str:
    """
    Link target for user-entered urls. Bare hosts get https://;
    schemes other than http, https and mailto are dropped.
    """
    text = str(url).strip() if url else ""
    if not text:
        return ""
    match = re.match(r"([a-zA-Z][a-zA-Z0-9+.-]*):", text)
    if match is None:
        return f"https://{text}"
    if match.group(1).lower() not in _SAFE_SCHEMES:
        return ""
    return text


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:] if text else ""
