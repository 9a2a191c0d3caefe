import pytest

from md2site.resolver import (
    RESOLUTION_RULES,
    _rule_directory_index,
    _rule_home,
    _rule_not_found,
    _rule_page,
    normalize,
    relative_href,
    relative_path,
    resolve,
)


@pytest.mark.parametrize(
    "content_path, expected",
    [
        ("README.md", "index.html"),
        ("foo.md", "foo/index.html"),
        ("foo/index.md", "foo/index.html"),
        ("foo/bar.md", "foo/bar/index.html"),
        ("foo/bar/index.md", "foo/bar/index.html"),
        ("404.md", "404.html"),
        ("index.md", "index.html"),
        ("Notes.MD", "Notes/index.html"),
    ],
)
def test_resolve_rules(content_path, expected):
    assert resolve(content_path, "README.md") == expected


def test_configured_home_basename():
    assert resolve("home.md", "home.md") == "index.html"
    # the conventional home file still maps to the root
    assert resolve("README.md", "home.md") == "index.html"
    assert resolve("home.md", "README.md") == "home/index.html"


def test_home_and_404_only_at_root():
    assert resolve("docs/README.md", "README.md") == "docs/README/index.html"
    assert resolve("docs/404.md", "README.md") == "docs/404/index.html"


def test_resolve_is_deterministic():
    for path in ["a.md", "a/b/c.md", "./x/../y.md", "/z.md"]:
        assert resolve(path, "README.md") == resolve(path, "README.md")


def test_normalize():
    assert normalize("./foo//bar.md") == "foo/bar.md"
    assert normalize("/foo.md") == "foo.md"
    assert normalize("foo\\bar.md") == "foo/bar.md"
    assert normalize(".") == ""


def test_rules_individually():
    assert _rule_home("", "README.md", "README.md") == "index.html"
    assert _rule_home("docs", "README.md", "README.md") is None
    assert _rule_not_found("", "404.md", "README.md") == "404.html"
    assert _rule_not_found("", "foo.md", "README.md") is None
    assert _rule_directory_index("a/b", "index.md", "README.md") == "a/b/index.html"
    assert _rule_directory_index("a", "b.md", "README.md") is None
    assert _rule_page("a", "b.md", "README.md") == "a/b/index.html"


def test_rule_order():
    assert [name for name, _ in RESOLUTION_RULES] == [
        "home", "not_found", "directory_index", "page",
    ]


def test_relative_href_strips_index():
    assert relative_href("about/index.html", "blog/post/index.html") == "../../about"
    assert relative_href("index.html", "blog/post/index.html") == "../.."
    assert relative_href("index.html", "index.html") == "."
    assert relative_href("about/index.html", "about/index.html") == "."
    assert relative_href("404.html", "index.html") == "404.html"


def test_relative_path_keeps_filename():
    assert relative_path("assets/style.abc.css", "blog/post/index.html") == "../../assets/style.abc.css"
    assert relative_path("assets/style.abc.css", "index.html") == "assets/style.abc.css"
