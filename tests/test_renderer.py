from bs4 import BeautifulSoup

from md2site.renderer import (
    assign_heading_ids,
    first_heading_text,
    markdown_to_html,
    sanitize_html,
    slugify_heading,
)


def heading_ids(fragment: str) -> list[str]:
    soup = BeautifulSoup(fragment, "html.parser")
    return [h["id"] for h in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])]


def test_slugify_heading():
    assert slugify_heading("Practice Problem") == "practice-problem"
    assert slugify_heading("What is O(n log n)?") == "what-is-on-log-n"
    assert slugify_heading("<code>foo</code>  bar") == "foo-bar"
    assert slugify_heading("Q&amp;A") == "qa"


def test_duplicate_headings_get_suffix():
    out = assign_heading_ids("<h2>Overview</h2><p>x</p><h2>Overview</h2><h3>Overview</h3>")
    assert heading_ids(out) == ["overview", "overview-1", "overview-2"]


def test_suffix_never_collides_with_literal_heading():
    out = assign_heading_ids("<h2>Overview 1</h2><h2>Overview</h2><h2>Overview</h2>")
    ids = heading_ids(out)
    assert ids[0] == "overview-1"
    assert ids[1] == "overview"
    assert len(set(ids)) == 3


def test_existing_ids_kept_and_reserved():
    out = assign_heading_ids('<h2 id="intro">Start</h2><h2>Intro</h2>')
    assert heading_ids(out) == ["intro", "intro-1"]


def test_empty_slug_falls_back():
    out = assign_heading_ids("<h2>!!!</h2><h2>???</h2>")
    assert heading_ids(out) == ["section", "section-1"]


def test_markdown_to_html_basic():
    out = markdown_to_html("# Title\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~\n")
    assert "<h1>Title</h1>" in out
    assert "<table>" in out
    assert "<del>gone</del>" in out


def test_fenced_code_language_class():
    out = markdown_to_html("```python\nprint('<hi>')\n```\n")
    assert '<pre class="language-python"><code class="language-python">' in out
    assert "&lt;hi&gt;" in out


def test_sanitize_strips_active_content():
    dirty = (
        '<p onclick="steal()">hi</p><script>alert(1)</script>'
        '<style>body{}</style><a href="javascript:alert(1)">x</a>'
        '<img src="a.png" onerror=\'bad()\'>'
    )
    clean = sanitize_html(dirty)
    assert "script" not in clean
    assert "<style" not in clean
    assert "onclick" not in clean
    assert "onerror" not in clean
    assert "javascript:" not in clean
    assert 'src="a.png"' in clean


def test_raw_html_script_removed_from_markdown():
    out = markdown_to_html("text\n\n<script>alert(1)</script>\n")
    assert "alert" not in out


def test_first_heading_text():
    assert first_heading_text("<h2>Sub</h2><h1>Main <em>title</em></h1>") == "Main title"
    assert first_heading_text("<p>none</p>") is None


def test_sanitize_keeps_escaped_markup_in_code_blocks():
    out = markdown_to_html("```html\n<button onclick=go()>Go</button>\n```\n")
    assert "&lt;button onclick=go()&gt;Go&lt;/button&gt;" in out
    assert out.rstrip().endswith("</code></pre>")


def test_sanitize_keeps_prose_that_looks_like_an_attribute():
    out = markdown_to_html("Set the flag onload=true before starting.\n")
    assert "Set the flag onload=true before starting." in out


def test_sanitize_keeps_indented_code_well_formed():
    out = markdown_to_html("    <a href=javascript:void(0)>x</a>\n")
    assert "&lt;a href=javascript:void(0)&gt;x&lt;/a&gt;" in out
    assert "</code></pre>" in out


def test_sanitize_unquoted_and_obfuscated_attributes():
    clean = sanitize_html(
        "<a href=javascript:void(0) ONMOUSEOVER=x()>a</a>"
        '<a href=" Java\tScript:alert(1)">b</a>'
        '<video poster="javascript:x" src="clip.mp4"></video>'
    )
    soup = BeautifulSoup(clean, "html.parser")
    links = soup.find_all("a")
    assert [a["href"] for a in links] == ["#", "#"]
    assert not links[0].has_attr("onmouseover")
    assert soup.find("video")["poster"] == "#"
    assert soup.find("video")["src"] == "clip.mp4"
