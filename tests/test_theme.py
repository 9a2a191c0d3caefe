from md2site.theme import (
    DEFAULT_TEMPLATE_DIR,
    copy_stylesheet,
    fill_template,
    hashed_stylesheet_name,
    load_theme,
)

from tests.conftest import write


def test_fill_template_single_pass():
    out = fill_template(
        "<t>{{TITLE}}</t><c>{{CONTENT}}</c>{{UNKNOWN}}",
        {"TITLE": "{{CONTENT}}", "CONTENT": "body"},
    )
    assert out == "<t>{{CONTENT}}</t><c>body</c>{{UNKNOWN}}"


def test_fill_template_repeated_placeholder():
    assert fill_template("{{A}}-{{A}}", {"A": "x"}) == "x-x"


def test_hashed_name_changes_with_content():
    a = hashed_stylesheet_name(b"body { color: red; }")
    b = hashed_stylesheet_name(b"body { color: blue; }")
    assert a != b
    assert a == hashed_stylesheet_name(b"body { color: red; }")
    assert len(a) == len("style.12345678.css")


def test_copy_stylesheet(tmp_path):
    css = write(tmp_path, "style.css", "p {}")
    rel = copy_stylesheet(css, tmp_path / "out")
    assert rel.startswith("assets/style.")
    assert (tmp_path / "out" / rel).read_text() == "p {}"


def test_load_theme_falls_back_per_file(tmp_path):
    write(tmp_path, "nav.html", "<nav>custom {{LINKS_HTML}}</nav>")
    theme = load_theme(tmp_path)
    assert theme.nav_template.startswith("<nav>custom")
    assert "{{CONTENT}}" in theme.page_template
    assert theme.stylesheet == DEFAULT_TEMPLATE_DIR / "style.css"


def test_load_theme_defaults():
    theme = load_theme(None)
    for placeholder in ["{{TITLE}}", "{{DESCRIPTION}}", "{{NAV}}", "{{STYLESHEET_HREF}}", "{{CONTENT}}"]:
        assert placeholder in theme.page_template
    assert "{{TITLE_HTML}}" in theme.nav_template
