from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from resume_builder.services.formatting import get_initials

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

DEFAULT_TEMPLATE_ID = "modern"

TEMPLATES: list[dict[str, str]] = [
    {
        "id": "modern",
        "name": "Modern",
        "description": "Clean and contemporary design with a two-column layout",
        "category": "modern",
    },
    {
        "id": "professional",
        "name": "Professional",
        "description": "Classic and formal design for traditional industries",
        "category": "professional",
    },
    {
        "id": "minimal",
        "name": "Minimal",
        "description": "Simple and clean design with maximum readability",
        "category": "minimal",
    },
    {
        "id": "creative",
        "name": "Creative",
        "description": "Modern design with creative elements",
        "category": "creative",
    },
]

_TEMPLATES_BY_ID = {t["id"]: t for t in TEMPLATES}


_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def escape_latex(value) -> str:
    if value is None:
        return ""
    return "".join(_LATEX_SPECIALS.get(ch, ch) for ch in str(value))


class TemplateNotFoundError(LookupError):
    """Raised for a template id that is not in the catalog."""


def is_known_template(template_id: str | None) -> bool:
    return template_id in _TEMPLATES_BY_ID


def get_template_info(template_id: str) -> dict[str, str]:
    try:
        return _TEMPLATES_BY_ID[template_id]
    except KeyError:
        raise TemplateNotFoundError(f"Unknown template '{template_id}'") from None


def resolve_template_id(template_id: str | None) -> str:
    """Unknown or empty ids fall back to the modern layout."""
    return template_id if is_known_template(template_id) else DEFAULT_TEMPLATE_ID


class TemplateRegistry:
    """
    Loads and caches the Jinja2 templates used to render resumes.

    HTML layouts live in templates/<id>.html.jinja with autoescaping on.
    The LaTeX document uses custom delimiters so braces stay literal:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    """

    def __init__(self, templates_path: Path | None = None):
        self.templates_path = templates_path or TEMPLATES_DIR
        self._cache: dict[str, Template] = {}

        self.html_env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            autoescape=select_autoescape(enabled_extensions=("html", "jinja"), default=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.html_env.filters["initials"] = get_initials
        self.latex_env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.latex_env.filters["latex"] = escape_latex

    def get_html_template(self, template_id: str | None) -> Template:
        template_id = resolve_template_id(template_id)
        key = f"html:{template_id}"
        if key not in self._cache:
            self._cache[key] = self.html_env.get_template(f"{template_id}.html.jinja")
        return self._cache[key]

    def get_latex_template(self) -> Template:
        key = "latex:resume"
        if key not in self._cache:
            self._cache[key] = self.latex_env.get_template("resume.tex.jinja")
        return self._cache[key]

    def is_cached(self, key: str) -> bool:
        return key in self._cache

    def clear_cache(self) -> None:
        self._cache.clear()


template_registry = TemplateRegistry()
