from resume_builder.services.section_catalog import (
    DEFAULT_RESUME_SECTIONS,
    SECTION_GROUPS,
    default_content_for_type,
    default_title,
    grouped_section_types,
)


def test_default_resume_sections():
    assert [t for t, _ in DEFAULT_RESUME_SECTIONS] == ["profile", "experience", "education", "skills"]
    assert dict(DEFAULT_RESUME_SECTIONS)["experience"] == "Work Experience"


def test_default_title_capitalizes_type():
    assert default_title("volunteer") == "Volunteer"


def test_default_content_shapes():
    profile = default_content_for_type("profile")
    assert set(profile) == {"fullName", "email", "phone", "location", "website", "summary"}

    experience = default_content_for_type("experience")["items"][0]
    assert experience["id"].startswith("exp-")
    assert experience["current"] is False

    assert default_content_for_type("education")["items"][0]["id"].startswith("edu-")
    assert default_content_for_type("skills")["items"][0]["level"] == 3
    assert default_content_for_type("projects")["items"][0]["id"].startswith("proj-")
    assert default_content_for_type("certifications") == {}


def test_default_content_is_fresh_each_call():
    a = default_content_for_type("profile")
    a["fullName"] = "changed"
    assert default_content_for_type("profile")["fullName"] == ""


def test_grouped_section_types():
    groups = grouped_section_types()
    assert list(groups) == list(SECTION_GROUPS)
    assert [t["id"] for t in groups["basic"]] == ["profile"]
    assert "volunteer" in [t["id"] for t in groups["other"]]
