from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

import resume_builder.services.resume_renderer as renderer
from resume_builder.schemas.resume import ExportOptions

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _section(type, content, position, title=None, is_visible=True, minutes=0, section_id=None):
    return SimpleNamespace(
        id=section_id or f"{type}-{position}-{minutes}",
        resume_id="r1",
        type=type,
        title=title or type.title(),
        content=content,
        position=position,
        is_visible=is_visible,
        created_at=T0 + timedelta(minutes=minutes),
        updated_at=None,
    )


def _resume(sections, template="modern"):
    return SimpleNamespace(
        id="r1",
        user_id="u1",
        title="Engineer CV",
        slug="engineer-cv-1a2b3c4d",
        template=template,
        is_public=False,
        view_count=0,
        created_at=T0,
        updated_at=T0,
        sections=sections,
    )


@pytest.fixture
def full_resume():
    return _resume(
        [
            _section("skills", {"items": [
                {"name": "Python", "category": "Languages"},
                {"name": "Docker"},
                {"name": "Go", "category": "Languages"},
                {"name": "  "},
            ]}, 3),
            _section("profile", {
                "fullName": "Ada Lovelace",
                "title": "Engineer",
                "email": "ada@example.com",
                "website": "https://ada.dev",
                "summary": "Writes programs & notes.",
            }, 0),
            _section("experience", {"items": [{
                "jobTitle": "Analyst",
                "employer": "Engine Co",
                "startDate": "2020-01",
                "endDate": "2022-03",
                "description": "Built the first algorithm",
                "highlights": ["Loops", ""],
            }]}, 1),
            _section("education", {"items": [{"degree": "BSc", "school": "London", "startDate": "2015", "current": True}]}, 2),
            _section("certifications", {"items": [{"name": "AWS SA", "issuer": "Amazon", "date": "2021-05"}]}, 4),
            _section("certifications", {"items": [{"name": "Ignored"}]}, 5, minutes=1),
            _section("languages", {"note": "fluent"}, 6),
            _section("projects", {"items": [{"name": "Engine"}]}, 7, is_visible=False),
        ]
    )


def test_group_sections_by_type_skips_hidden_and_keeps_order(full_resume):
    grouped = renderer.group_sections_by_type(full_resume.sections)
    assert list(grouped) == ["profile", "experience", "education", "skills", "certifications", "languages"]
    assert len(grouped["certifications"]) == 2


def test_group_skills_by_category():
    items = [{"name": "Python", "category": "Languages"}, {"name": "Docker"}, {"name": "Go", "category": "Languages"}]
    assert renderer.group_skills(items) == [("Languages", ["Python", "Go"]), ("Other", ["Docker"])]


def test_build_render_context(full_resume):
    ctx = renderer.build_render_context(full_resume)
    assert ctx["profile"]["name"] == "Ada Lovelace"
    assert ctx["profile"]["website_label"] == "ada.dev"
    assert ctx["experience"][0]["items"][0]["date_range"] == "Jan 2020 - Mar 2022"
    assert ctx["experience"][0]["items"][0]["highlights"] == ["Loops"]
    assert ctx["education"][0]["items"][0]["date_range"] == "Jan 2015 - Present"
    assert ctx["projects"] == []
    assert ctx["skills"][0]["categories"] == [("Languages", ["Python", "Go"]), ("Other", ["Docker"])]

    other = ctx["other_sections"]
    assert [b["title"] for b in other] == ["Certifications", "Languages"]
    assert other[0]["items"] == [{"name": "AWS SA", "date": "May 2021", "subtitle": "Amazon", "description": ""}]
    assert other[1]["items"] is None
    assert '"note": "fluent"' in other[1]["text"]


def test_build_render_context_defaults_and_hidden_contact():
    ctx = renderer.build_render_context(_resume([]), include_contact=False)
    assert ctx["profile"]["name"] == "Your Name"
    assert ctx["profile"]["email"] == ""

    resume = _resume([_section("profile", {"fullName": "Ada", "email": "ada@example.com"}, 0)])
    ctx = renderer.build_render_context(resume, include_contact=False)
    assert ctx["profile"]["name"] == "Ada"
    assert ctx["profile"]["email"] == ""


def test_generic_item_fallbacks():
    resume = _resume([_section("awards", {"items": [{"title": "Best Paper", "publisher": "ACM"}, {}]}, 0)])
    items = renderer.build_render_context(resume)["other_sections"][0]["items"]
    assert items[0]["name"] == "Best Paper"
    assert items[0]["subtitle"] == "ACM"
    assert items[1]["name"] == "Item"


@pytest.mark.parametrize("template_id", ["modern", "professional", "minimal", "creative"])
def test_render_html_every_template(full_resume, template_id):
    html = renderer.render_html(full_resume, template_id=template_id)
    assert f"template-{template_id}" in html
    assert "Ada Lovelace" in html
    assert "Writes programs &amp; notes." in html
    assert "Analyst" in html
    assert "AWS SA" in html
    assert "Ignored" not in html
    assert "Engine Co" in html


def test_render_html_uses_resume_template_and_falls_back(full_resume):
    full_resume.template = "creative"
    assert "template-creative" in renderer.render_html(full_resume)
    full_resume.template = "retired-layout"
    assert "template-modern" in renderer.render_html(full_resume)


def test_render_text(full_resume):
    text = renderer.render_text(full_resume)
    lines = text.splitlines()
    assert lines[0] == "Ada Lovelace"
    assert "ada@example.com | ada.dev" in lines
    assert "Analyst - Engine Co" in lines
    assert "Languages: Python, Go" in lines
    assert "AWS SA (May 2021)" in lines
    assert text.endswith("\n")


def test_render_json_sorts_sections(full_resume):
    data = renderer.render_json(full_resume)
    assert data["slug"] == "engineer-cv-1a2b3c4d"
    assert [s["position"] for s in data["sections"]] == [0, 1, 2, 3, 4, 5, 6, 7]
    assert data["sections"][7]["is_visible"] is False


def test_render_latex_escapes_and_applies_color(full_resume):
    latex = renderer.render_latex(full_resume, ExportOptions(color="#112233", font_size=12))
    assert latex.startswith("\\documentclass[12pt")
    assert "\\definecolor{accent}{HTML}{112233}" in latex
    assert "Writes programs \\& notes." in latex
    assert "Jan 2020 - Mar 2022" in latex
    assert "\\end{document}" in latex


def test_render_latex_font_size_outside_article_sizes(full_resume):
    latex = renderer.render_latex(full_resume, ExportOptions(font_size=14))
    assert latex.startswith("\\documentclass[11pt")


def test_render_pdf_success(monkeypatch, full_resume):
    seen = {}

    def fake_compile(latex):
        seen["latex"] = latex
        return b"%PDF-1.5"

    monkeypatch.setattr(renderer, "render_latex_to_pdf_bytes", fake_compile)
    assert renderer.render_pdf(full_resume) == b"%PDF-1.5"
    assert "Ada Lovelace" in seen["latex"]


def test_render_pdf_wraps_compile_errors(monkeypatch, full_resume):
    def boom(latex):
        raise RuntimeError("pdflatex is not installed on the server")

    monkeypatch.setattr(renderer, "render_latex_to_pdf_bytes", boom)
    with pytest.raises(renderer.ExportError):
        renderer.render_pdf(full_resume)


def test_render_latex_keeps_free_form_content_escaped():
    payload = "\\end{verbatim}^^5cinput{/etc/passwd}"
    resume = _resume([_section("languages", {"note": payload}, 0)])
    latex = renderer.render_latex(resume)
    assert "verbatim" not in latex.replace("\\textbackslash{}end\\{verbatim\\}", "")
    assert "^^" not in latex
    assert "\\input" not in latex
    assert "\\textbackslash{}end\\{verbatim\\}" in latex


@pytest.mark.parametrize(
    "section",
    [
        _section("experience", {"items": 3}, 0),
        _section("certifications", {"items": "not a list"}, 0),
        _section("skills", {"items": [{"name": 5, "category": {"x": 1}}, {"name": None}]}, 0),
        _section("profile", {"fullName": 42, "website": 123, "email": ["a@b.c"]}, 0),
        _section("experience", {"items": [{"jobTitle": 7, "highlights": 9, "startDate": 2020}]}, 0),
        _section("projects", {"items": [{"name": "X", "technologies": 1, "url": 5}]}, 0),
    ],
)
def test_render_tolerates_odd_content_shapes(section):
    resume = _resume([section])
    assert "template-modern" in renderer.render_html(resume)
    assert renderer.render_text(resume)
    assert "\\end{document}" in renderer.render_latex(resume)


def test_build_render_context_coerces_scalars():
    resume = _resume(
        [
            _section("profile", {"fullName": 42, "website": 123}, 0),
            _section("skills", {"items": [{"name": 5}, {"name": " Go ", "category": 3}]}, 1),
            _section("experience", {"items": [{"jobTitle": "Dev", "highlights": ["Shipped", 2, None, {"x": 1}]}]}, 2),
            _section("projects", {"items": [{"name": "Site", "technologies": "Python"}]}, 3),
        ]
    )
    ctx = renderer.build_render_context(resume)
    assert ctx["profile"]["name"] == "42"
    assert ctx["profile"]["website_label"] == "123"
    assert ctx["skills"][0]["categories"] == [("Other", ["5"]), ("3", ["Go"])]
    assert ctx["experience"][0]["items"][0]["highlights"] == ["Shipped", "2"]
    assert ctx["projects"][0]["items"][0]["technologies"] == []


def test_links_only_use_web_or_mail_schemes():
    resume = _resume(
        [
            _section("profile", {"fullName": "Ada", "website": "javascript:alert(1)"}, 0),
            _section("projects", {"items": [
                {"name": "Bad", "url": "JavaScript:alert(2)"},
                {"name": "Bare", "url": "ada.dev/engine"},
                {"name": "Good", "url": "https://github.com/ada"},
            ]}, 1),
        ]
    )
    ctx = renderer.build_render_context(resume)
    assert ctx["profile"]["website"] == ""
    assert [i["url"] for i in ctx["projects"][0]["items"]] == ["", "https://ada.dev/engine", "https://github.com/ada"]

    html = renderer.render_html(resume)
    assert "javascript:" not in html.lower().replace("javascript:alert(1)</span>", "")
    assert 'href="https://github.com/ada"' in html
